"""Storage read/write tests using tmp_path."""
import uuid

import pytest

from app.exceptions import ProfileSubmissionError, ValidationError
from app.schemas.profile import AttributeRow, ProfileTransaction, QuestAttributeRow, QuestRow
from app.storage.base import BaseStorage
from app.storage.profiles import ProfileStorage
from app.storage.session_cache import SessionCache
from app.storage.users import UserStorage
from app.account_setup.session import AccountSetupSession


@pytest.fixture
def storage(tmp_path):
    return BaseStorage(data_dir=str(tmp_path))


@pytest.fixture
def payload():
    return ProfileTransaction(
        attributes=[AttributeRow(name="Discipline", position=0)],
        quests=[QuestRow(name="Run", experience_share=100, position=0)],
        quests_attributes=[
            QuestAttributeRow(quest_name="Run", attribute_name="Discipline", attribute_power=1)
        ],
    )


@pytest.mark.asyncio
async def test_write_and_read_yaml(storage, tmp_path):
    filepath = tmp_path / "nested" / "test.yaml"
    data = {"name": "test", "value": 42}
    await storage.write_yaml(filepath, data)
    assert filepath.exists()
    result = await storage.read_yaml(filepath)
    assert result["name"] == "test"
    assert result["value"] == 42
    # No temp files left behind
    assert [p.name for p in filepath.parent.iterdir()] == ["test.yaml"]


@pytest.mark.asyncio
async def test_read_yaml_missing_raises(storage, tmp_path):
    filepath = tmp_path / "nonexistent.yaml"
    with pytest.raises(FileNotFoundError):
        await storage.read_yaml(filepath)


@pytest.mark.asyncio
async def test_write_and_read_text(storage, tmp_path):
    filepath = tmp_path / "notes.md"
    await storage.write_text(filepath, "# Quests\n\nRun daily.")
    assert "Run daily" in await storage.read_text(filepath)


@pytest.mark.asyncio
async def test_profile_transaction_roundtrip(tmp_path, payload):
    profiles = ProfileStorage(data_dir=str(tmp_path))
    user_id = str(uuid.uuid4())

    await profiles.create_profile_transaction(user_id, payload)

    assert await profiles.profile_exists(user_id)
    assert await profiles.get_profile(user_id) == payload


@pytest.mark.asyncio
async def test_profile_transaction_duplicate(tmp_path, payload):
    profiles = ProfileStorage(data_dir=str(tmp_path))
    user_id = str(uuid.uuid4())
    await profiles.create_profile_transaction(user_id, payload)

    with pytest.raises(ProfileSubmissionError) as excinfo:
        await profiles.create_profile_transaction(user_id, payload)
    assert excinfo.value.code == "23505"


@pytest.mark.asyncio
async def test_profile_transaction_invalid_user(tmp_path, payload):
    profiles = ProfileStorage(data_dir=str(tmp_path))
    with pytest.raises(ProfileSubmissionError) as excinfo:
        await profiles.create_profile_transaction("not-a-uuid", payload)
    assert excinfo.value.code == "42501"
    assert not (tmp_path / "profiles").exists() or not any((tmp_path / "profiles").iterdir())


@pytest.mark.asyncio
async def test_get_missing_profile(tmp_path):
    profiles = ProfileStorage(data_dir=str(tmp_path))
    assert await profiles.get_profile(str(uuid.uuid4())) is None


@pytest.mark.asyncio
async def test_register_and_lookup_usertag(tmp_path):
    users = UserStorage(data_dir=str(tmp_path))
    await users.register_user("u1", "Alice")

    assert await users.usertag_exists("alice")
    assert await users.usertag_exists("  ALICE ")
    assert not await users.usertag_exists("alice2")


@pytest.mark.asyncio
async def test_register_duplicate_usertag(tmp_path):
    users = UserStorage(data_dir=str(tmp_path))
    await users.register_user("u1", "alice")
    with pytest.raises(ValidationError) as excinfo:
        await users.register_user("u2", "ALICE")
    assert excinfo.value.field_errors["usertag"] == ["User Tag already exists. Please choose another."]


@pytest.mark.asyncio
async def test_register_invalid_usertag(tmp_path):
    users = UserStorage(data_dir=str(tmp_path))
    with pytest.raises(ValidationError) as excinfo:
        await users.register_user("u1", "a b")
    assert "usertag" in excinfo.value.field_errors


@pytest.mark.asyncio
async def test_profile_complete_flag(tmp_path):
    users = UserStorage(data_dir=str(tmp_path))
    await users.register_user("u1", "alice")
    assert not await users.is_profile_complete("u1")
    assert await users.mark_profile_complete("u1")
    assert await users.is_profile_complete("u1")
    assert not await users.mark_profile_complete("ghost")


@pytest.mark.asyncio
async def test_session_cache_evicts_least_recent():
    cache = SessionCache(max_sessions=2)
    first, second, third = (AccountSetupSession() for _ in range(3))
    await cache.put(first)
    await cache.put(second)
    await cache.get(first.session_id)  # touch
    await cache.put(third)

    assert await cache.get(second.session_id) is None
    assert await cache.get(first.session_id) is first
    assert await cache.get(third.session_id) is third
    assert await cache.remove(third.session_id)
    assert not await cache.remove(third.session_id)
