"""Name availability checker tests: debounce, cache, stale results, cancellation."""
import asyncio

import pytest

from app.exceptions import OperationCancelled
from app.services.name_availability import (
    NAME_CHECK_FAILED_MESSAGE,
    NAME_TAKEN_MESSAGE,
    NameAvailabilityChecker,
)


class FakeLookup:
    """Records calls; candidates listed in ``gates`` block until released."""

    def __init__(self, taken=(), gates=(), fail=(), honor_cancel=False):
        self.taken = {t.lower() for t in taken}
        self.gates = {name: asyncio.Event() for name in gates}
        self.fail = set(fail)
        self.honor_cancel = honor_cancel
        self.calls = []

    async def __call__(self, candidate, cancel_token):
        self.calls.append(candidate)
        gate = self.gates.get(candidate)
        if gate is not None:
            await gate.wait()
        if self.honor_cancel:
            cancel_token.raise_if_cancelled()
        if candidate in self.fail:
            raise ConnectionError("database unreachable")
        return candidate.strip().lower() in self.taken


@pytest.mark.asyncio
async def test_out_of_order_result_is_discarded():
    lookup = FakeLookup(taken={"alice"}, gates={"alice"})
    checker = NameAvailabilityChecker(lookup, debounce_seconds=0)

    first = checker.submit("alice")
    await asyncio.sleep(0.01)  # "alice" is now blocked inside the lookup
    second = checker.submit("alice2")
    assert await second is False
    assert checker.state.candidate == "alice2"
    assert checker.state.exists is False

    lookup.gates["alice"].set()
    assert await first is None
    # The late answer is cached but never applied
    assert checker.state.candidate == "alice2"
    assert checker.state.exists is False
    assert checker.state.error is None
    assert checker.cached("ALICE ") is True
    await checker.close()


@pytest.mark.asyncio
async def test_debounce_collapses_rapid_input():
    lookup = FakeLookup()
    checker = NameAvailabilityChecker(lookup, debounce_seconds=0.05)

    for text in ("b", "bo", "bob"):
        task = checker.submit(text)
        await asyncio.sleep(0.001)

    assert await task is False
    assert lookup.calls == ["bob"]
    assert checker.state.candidate == "bob"
    await checker.close()


@pytest.mark.asyncio
async def test_cache_hit_skips_lookup():
    lookup = FakeLookup(taken={"carol"})
    checker = NameAvailabilityChecker(lookup, debounce_seconds=0)

    assert await checker.check("carol") is True
    assert await checker.check("  Carol ") is True
    assert lookup.calls == ["carol"]
    assert checker.state.error == NAME_TAKEN_MESSAGE
    await checker.close()


@pytest.mark.asyncio
async def test_cache_is_bounded():
    lookup = FakeLookup()
    checker = NameAvailabilityChecker(lookup, debounce_seconds=0, cache_size=2)
    for name in ("a1", "a2", "a3"):
        await checker.check(name)
    assert checker.cached("a1") is None
    assert checker.cached("a3") is False
    await checker.close()


@pytest.mark.asyncio
async def test_failure_surfaces_retryable_error():
    lookup = FakeLookup(fail={"dave"})
    checker = NameAvailabilityChecker(lookup, debounce_seconds=0)

    assert await checker.check("dave") is None
    assert checker.state.error == NAME_CHECK_FAILED_MESSAGE
    assert checker.state.querying is False
    # Failures are not cached, a retry hits the lookup again
    await checker.check("dave")
    assert lookup.calls == ["dave", "dave"]
    await checker.close()


@pytest.mark.asyncio
async def test_cancellation_is_silent():
    lookup = FakeLookup(gates={"erin"}, honor_cancel=True)
    checker = NameAvailabilityChecker(lookup, debounce_seconds=0)

    first = checker.submit("erin")
    await asyncio.sleep(0.01)
    second = checker.submit("frank")
    lookup.gates["erin"].set()

    assert await first is None
    assert await second is False
    assert checker.state.error is None
    assert checker.cached("erin") is None
    await checker.close()


@pytest.mark.asyncio
async def test_close_stops_updates():
    lookup = FakeLookup(gates={"gina"})
    results = []

    async def on_result(state):
        results.append(state)

    checker = NameAvailabilityChecker(lookup, debounce_seconds=0, on_result=on_result)
    checker.submit("gina")
    await asyncio.sleep(0.01)
    await checker.close()
    lookup.gates["gina"].set()

    assert results == []
    with pytest.raises(RuntimeError):
        checker.submit("hank")


@pytest.mark.asyncio
async def test_on_result_receives_latest_state():
    lookup = FakeLookup(taken={"ivy"})
    results = []

    async def on_result(state):
        results.append(state)

    checker = NameAvailabilityChecker(lookup, debounce_seconds=0, on_result=on_result)
    await checker.check("ivy")
    assert [(s.candidate, s.exists, s.error) for s in results] == [("ivy", True, NAME_TAKEN_MESSAGE)]
    await checker.close()


@pytest.mark.asyncio
async def test_storage_lookup_honors_token(tmp_path):
    from app.storage.users import UserStorage
    from app.utils.cancellation import CancellationToken

    storage = UserStorage(data_dir=str(tmp_path))
    token = CancellationToken()
    token.cancel()
    with pytest.raises(OperationCancelled):
        await storage.usertag_exists("anyone", token)


@pytest.mark.asyncio
async def test_storage_lookup_wraps_unreadable_registry(tmp_path):
    from app.exceptions import NameCheckError
    from app.storage.users import UserStorage

    storage = UserStorage(data_dir=str(tmp_path))
    storage.get_users_path().write_text("users: [unclosed", encoding="utf-8")
    with pytest.raises(NameCheckError):
        await storage.usertag_exists("anyone")


@pytest.mark.asyncio
async def test_identical_in_flight_lookup_is_shared():
    lookup = FakeLookup(taken={"alice"}, gates={"alice"})
    checker = NameAvailabilityChecker(lookup, debounce_seconds=0)

    first = checker.submit("alice")
    await asyncio.sleep(0.01)  # first lookup is blocked
    second = checker.submit(" Alice")
    await asyncio.sleep(0.01)
    lookup.gates["alice"].set()

    assert await second is True
    assert await first is None
    assert lookup.calls == ["alice"]
    assert checker.state.candidate == " Alice"
    assert checker.state.exists is True
    assert checker.state.error == NAME_TAKEN_MESSAGE
    await checker.close()


@pytest.mark.asyncio
async def test_returning_to_cancelled_candidate_starts_fresh_lookup():
    lookup = FakeLookup(gates={"erin"}, honor_cancel=True)
    checker = NameAvailabilityChecker(lookup, debounce_seconds=0)

    first = checker.submit("erin")
    await asyncio.sleep(0.01)
    assert await checker.check("frank") is False  # cancels the "erin" lookup
    third = checker.submit("erin")
    await asyncio.sleep(0.01)
    lookup.gates["erin"].set()

    assert await first is None
    assert await third is False
    assert lookup.calls == ["erin", "frank", "erin"]
    assert checker.state.candidate == "erin"
    assert checker.state.exists is False
    await checker.close()


@pytest.mark.asyncio
async def test_check_returns_none_when_superseded_mid_lookup():
    lookup = FakeLookup(taken={"kim"}, gates={"kim"})
    checker = NameAvailabilityChecker(lookup, debounce_seconds=0)

    pending = asyncio.create_task(checker.check("kim"))
    await asyncio.sleep(0.01)
    assert await checker.check("lee") is False
    lookup.gates["kim"].set()

    assert await pending is None
    assert checker.cached("kim") is True
    await checker.close()
