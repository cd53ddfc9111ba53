"""Account setup session scenarios."""
import pytest

from app.account_setup.session import AccountSetupSession
from app.exceptions import ValidationError
from app.schemas.attribute import AttributeStrength, Direction


def _attr_names(session):
    return [a.name for a in session.attributes]


def _affected(quest):
    return [(a.name, a.strength) for a in quest.affected_attributes]


def _select(session, name, strength=AttributeStrength.NORMAL):
    session.update_selection(name=name, strength=strength)
    assert session.add_affected_attribute() is True


def test_default_seed():
    session = AccountSetupSession()
    assert _attr_names(session) == ["Discipline", "Vitality", "Intelligence", "Fitness"]
    assert session.points_remaining == 100
    assert session.ready_to_submit is False


def test_custom_seed_always_starts_with_discipline():
    session = AccountSetupSession(["Focus", "discipline"])
    assert _attr_names(session) == ["Discipline", "Focus"]


def test_scenario_sentinel_protection():
    session = AccountSetupSession([])
    assert [(a.name, a.order) for a in session.attributes] == [("Discipline", 0)]

    session.add_attribute("Vitality")
    assert [(a.name, a.order) for a in session.attributes] == [("Discipline", 0), ("Vitality", 1)]

    assert session.delete_attribute("Discipline") is False
    assert _attr_names(session) == ["Discipline", "Vitality"]


def test_scenario_commit_injects_discipline():
    session = AccountSetupSession(["Vitality"])
    _select(session, "Vitality")

    quest = session.commit_quest("Run", 30)

    assert session.points_remaining == 70
    assert _affected(quest) == [
        ("Vitality", AttributeStrength.NORMAL),
        ("Discipline", AttributeStrength.NORMAL),
    ]
    # Draft is reset after commit
    assert session.selected_attributes == []
    assert session.snapshot().selection.current_attribute_name == "Discipline"


def test_commit_keeps_user_chosen_discipline_strength():
    session = AccountSetupSession(["Vitality"])
    _select(session, "Discipline", AttributeStrength.PLUS)
    quest = session.commit_quest("Meditate", 10)
    assert _affected(quest) == [("Discipline", AttributeStrength.PLUS)]


def test_scenario_experience_up_with_empty_pool():
    session = AccountSetupSession()
    _select(session, "Vitality")
    session.commit_quest("Run", 40)
    _select(session, "Intelligence")
    session.commit_quest("Read", 60)
    assert session.points_remaining == 0

    assert session.change_quest_experience("Run", Direction.UP) is False
    assert session.points_remaining == 0
    assert session.ready_to_submit is True


def test_scenario_attribute_deletion_cascades():
    session = AccountSetupSession()
    _select(session, "Vitality")
    session.commit_quest("Run", 50)

    assert session.delete_attribute("Vitality") is True

    quest = session.quests[0]
    assert _affected(quest) == [("Discipline", AttributeStrength.NORMAL)]
    names = set(_attr_names(session))
    assert all(a.name in names for q in session.quests for a in q.affected_attributes)


def test_attribute_deletion_updates_selection_draft():
    session = AccountSetupSession()
    _select(session, "Fitness")
    session.delete_attribute("Fitness")
    assert session.selected_attributes == []
    available = [a.name for a in session.snapshot().selection.available_attributes]
    assert "Fitness" not in available


def test_attribute_addition_shows_up_in_draft():
    session = AccountSetupSession()
    session.add_attribute("Charisma")
    available = [a.name for a in session.snapshot().selection.available_attributes]
    assert available[-1] == "Charisma"


def test_move_attribute():
    session = AccountSetupSession()
    assert session.move_attribute("Fitness", Direction.UP) is True
    assert _attr_names(session) == ["Discipline", "Vitality", "Fitness", "Intelligence"]
    assert session.move_attribute("Discipline", Direction.UP) is False


def test_commit_validation_errors():
    session = AccountSetupSession()
    with pytest.raises(ValidationError) as excinfo:
        session.commit_quest("", 200)
    errors = excinfo.value.field_errors
    assert "quest_name" in errors
    assert errors["affected_attributes"] == ["Select at least one attribute"]
    assert errors["experience_point_value"] == [
        "Not enough experience: only 100 points are remaining"
    ]
    assert session.quests == []


def test_commit_duplicate_quest_name():
    session = AccountSetupSession()
    _select(session, "Vitality")
    session.commit_quest("Run", 10)
    _select(session, "Vitality")
    with pytest.raises(ValidationError) as excinfo:
        session.commit_quest(" run ", 10)
    assert excinfo.value.field_errors["quest_name"] == ["A quest with this name already exists."]
    # Draft survives a rejected commit
    assert [a.name for a in session.selected_attributes] == ["Vitality"]


def test_submission_blockers():
    session = AccountSetupSession()
    blockers = session.submission_blockers()
    assert blockers["quests"] == ["Add at least one quest"]
    assert blockers["experience_point_value"] == ["100 experience points are still unallocated"]

    _select(session, "Vitality")
    session.commit_quest("Run", 99)
    assert session.submission_blockers() == {
        "experience_point_value": ["1 experience point is still unallocated"]
    }
    session.change_quest_experience("Run", Direction.UP)
    assert session.ready_to_submit is True


def test_snapshot_shape():
    session = AccountSetupSession()
    snapshot = session.snapshot()
    assert snapshot.session_id == session.session_id
    assert snapshot.points_remaining == 100
    assert snapshot.selection.current_attribute_strength == AttributeStrength.NORMAL
    assert [a.order for a in snapshot.attributes] == [0, 1, 2, 3]
