"""Profile submission service tests."""
import uuid

import pytest

from app.exceptions import ProfileSubmissionError
from app.services.profile_service import ProfileService
from app.storage.profiles import ProfileStorage
from app.storage.users import UserStorage


class FailingProfileStorage(ProfileStorage):
    def __init__(self, code, message="boom", **kwargs):
        super().__init__(**kwargs)
        self.code = code
        self.message = message
        self.calls = 0

    async def create_profile_transaction(self, user_id, payload):
        self.calls += 1
        raise ProfileSubmissionError(self.message, code=self.code)


@pytest.fixture
def quests(make_quest):
    return [
        make_quest("Run", 40, order=0, affected=("Vitality", "Discipline")),
        make_quest("Read", 60, order=1, affected=("Intelligence", "Discipline")),
    ]


@pytest.mark.asyncio
async def test_submit_success_marks_user(tmp_path, attributes, quests):
    users = UserStorage(data_dir=str(tmp_path))
    user_id = str(uuid.uuid4())
    await users.register_user(user_id, "alice")
    profiles = ProfileStorage(data_dir=str(tmp_path))
    service = ProfileService(profiles, users)

    result = await service.submit_profile(user_id, attributes, quests)

    assert result.success is True
    stored = await profiles.get_profile(user_id)
    assert [row.name for row in stored.quests] == ["Run", "Read"]
    assert len(stored.quests_attributes) == 4
    assert await users.is_profile_complete(user_id)


@pytest.mark.asyncio
async def test_submit_invalid_never_writes(tmp_path, attributes, make_quest):
    storage = FailingProfileStorage("23505", data_dir=str(tmp_path))
    service = ProfileService(storage)
    bad = [make_quest("Run", 40, affected=("Charisma",))]

    result = await service.submit_profile(str(uuid.uuid4()), attributes, bad)

    assert result.success is False
    assert result.message == "Fields not valid. Failed to create account."
    assert result.errors["quests"]
    assert result.error_kind is None
    assert storage.calls == 0


@pytest.mark.parametrize(
    "code, kind",
    [("23505", "duplicate"), ("42501", "unauthorized"), ("XX000", "failure")],
)
@pytest.mark.asyncio
async def test_submit_classifies_sink_errors(tmp_path, attributes, quests, code, kind):
    service = ProfileService(FailingProfileStorage(code, data_dir=str(tmp_path)))
    result = await service.submit_profile(str(uuid.uuid4()), attributes, quests)
    assert result.success is False
    assert result.error_kind == kind
    assert result.message


@pytest.mark.asyncio
async def test_submit_twice_is_duplicate(tmp_path, attributes, quests):
    service = ProfileService(ProfileStorage(data_dir=str(tmp_path)))
    user_id = str(uuid.uuid4())
    assert (await service.submit_profile(user_id, attributes, quests)).success
    second = await service.submit_profile(user_id, attributes, quests)
    assert second.error_kind == "duplicate"


@pytest.mark.asyncio
async def test_submit_with_non_canonical_uuid_marks_user(tmp_path, attributes, quests):
    users = UserStorage(data_dir=str(tmp_path))
    user_id = str(uuid.uuid4())
    spelled = "{" + user_id.upper() + "}"
    await users.register_user(spelled, "bobby")
    profiles = ProfileStorage(data_dir=str(tmp_path))
    service = ProfileService(profiles, users)

    result = await service.submit_profile(spelled, attributes, quests)

    assert result.success is True
    assert await profiles.profile_exists(user_id)
    assert await users.is_profile_complete(user_id)
    assert await users.is_profile_complete(spelled)
