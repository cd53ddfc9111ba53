"""
Name availability checking.

Debounced, cached and cancellable lookups for globally unique names such as
the public usertag. Each submitted candidate gets a sequence number and a
cancellation token; only the result of the most recently submitted candidate
is ever applied to ``state``, so a slow lookup finishing late cannot
overwrite a fresher answer.
"""

import asyncio
from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Dict, Optional, Set, Tuple

from app.config import settings
from app.exceptions import OperationCancelled
from app.utils.cancellation import CancellationToken
from app.utils.logger import get_logger
from app.utils.text import normalize_name

logger = get_logger(__name__)

NAME_TAKEN_MESSAGE = "User Tag already taken"
NAME_CHECK_FAILED_MESSAGE = "Error checking User Tag availability, please try again"

Lookup = Callable[[str, CancellationToken], Awaitable[bool]]


@dataclass(frozen=True)
class NameCheckState:
    candidate: str = ""
    exists: Optional[bool] = None
    querying: bool = False
    error: Optional[str] = None


class NameAvailabilityChecker:
    """
    名称可用性检查器

    Name availability checker.

    Args:
        lookup: ``async (candidate, cancel_token) -> bool``
        debounce_seconds: Quiet period before a lookup is issued
        cache_size: Maximum number of remembered results
        on_result: Optional ``async (state) -> None`` called after each applied result
    """

    def __init__(
        self,
        lookup: Lookup,
        debounce_seconds: Optional[float] = None,
        cache_size: Optional[int] = None,
        on_result: Optional[Callable[[NameCheckState], Awaitable[None]]] = None,
    ):
        self._lookup = lookup
        self.debounce_seconds = (
            settings.name_check_debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self._cache_size = cache_size or settings.name_check_cache_size
        self._cache: "OrderedDict[str, bool]" = OrderedDict()
        self._on_result = on_result

        self._seq = 0
        self._token: Optional[CancellationToken] = None
        self._task: Optional[asyncio.Task] = None
        self._debouncing = False
        self._tasks: Set[asyncio.Task] = set()
        self._inflight: Dict[str, Tuple[asyncio.Future, CancellationToken]] = {}
        self._closed = False

        self.state = NameCheckState()

    def cached(self, candidate: str) -> Optional[bool]:
        return self._cache.get(normalize_name(candidate))

    def submit(self, candidate: str) -> asyncio.Task:
        """
        Schedule a check for ``candidate``, superseding any earlier one.

        A superseded request still waiting out its debounce is dropped; one
        already inside the lookup has its token cancelled and its result,
        if it still arrives, is cached but not applied. A lookup already in
        flight for the same normalized candidate is joined, not repeated.
        """
        if self._closed:
            raise RuntimeError("Name availability checker is closed")

        self._supersede(normalize_name(candidate))
        self._seq += 1
        token = CancellationToken()
        self._token = token
        self._debouncing = True
        self.state = NameCheckState(candidate=candidate)

        task = asyncio.create_task(self._run(self._seq, candidate, token))
        self._task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def check(self, candidate: str) -> Optional[bool]:
        """Submit and wait. Returns None when superseded, cancelled or failed."""
        task = self.submit(candidate)
        await asyncio.wait({task})
        if task.cancelled():
            return None
        return task.result()

    async def close(self) -> None:
        """Cancel everything in flight. No state is updated afterwards."""
        self._closed = True
        if self._token is not None:
            self._token.cancel()
        pending = list(self._tasks)
        for future, lookup_token in list(self._inflight.values()):
            lookup_token.cancel()
            pending.append(future)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def _supersede(self, key: str) -> None:
        if self._token is not None:
            self._token.cancel()
        if self._task is not None and not self._task.done() and self._debouncing:
            self._task.cancel()
        # A shared lookup stays alive only while the newest candidate needs it
        for inflight_key, (_, lookup_token) in self._inflight.items():
            if inflight_key != key:
                lookup_token.cancel()

    def _is_current(self, seq: int, token: CancellationToken) -> bool:
        return seq == self._seq and not token.cancelled and not self._closed

    async def _run(self, seq: int, candidate: str, token: CancellationToken) -> Optional[bool]:
        if self.debounce_seconds > 0:
            await asyncio.sleep(self.debounce_seconds)
        else:
            await asyncio.sleep(0)
        if seq == self._seq:
            self._debouncing = False

        key = normalize_name(candidate)
        if key in self._cache:
            self._cache.move_to_end(key)
            exists = self._cache[key]
            await self._apply(seq, token, exists=exists)
            return exists if self._is_current(seq, token) else None

        if self._is_current(seq, token):
            self.state = replace(self.state, querying=True)

        try:
            exists = await self._shared_lookup(key, candidate)
        except OperationCancelled:
            logger.debug("Name check for %r cancelled", candidate)
            return None
        except Exception as exc:
            logger.error("Error checking name availability for %r: %s", candidate, exc)
            if self._is_current(seq, token):
                self.state = replace(self.state, querying=False, error=NAME_CHECK_FAILED_MESSAGE)
                await self._notify()
            return None

        await self._apply(seq, token, exists=exists)
        return exists if self._is_current(seq, token) else None

    async def _shared_lookup(self, key: str, candidate: str) -> bool:
        entry = self._inflight.get(key)
        if entry is None or entry[1].cancelled:
            lookup_token = CancellationToken()
            future = asyncio.ensure_future(self._lookup(candidate, lookup_token))
            entry = (future, lookup_token)
            self._inflight[key] = entry
            future.add_done_callback(lambda done, k=key: self._lookup_done(k, done))
        else:
            logger.debug("Joining in-flight name check for %r", candidate)
        return await asyncio.shield(entry[0])

    def _lookup_done(self, key: str, future: asyncio.Future) -> None:
        entry = self._inflight.get(key)
        if entry is not None and entry[0] is future:
            del self._inflight[key]
        if not future.cancelled() and future.exception() is None:
            self._remember(key, future.result())

    def _remember(self, key: str, exists: bool) -> None:
        self._cache[key] = exists
        self._cache.move_to_end(key)
        while len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)

    async def _apply(self, seq: int, token: CancellationToken, exists: bool) -> None:
        if not self._is_current(seq, token):
            logger.debug("Discarding stale name check result (seq=%d, latest=%d)", seq, self._seq)
            return
        self.state = replace(
            self.state,
            exists=exists,
            querying=False,
            error=NAME_TAKEN_MESSAGE if exists else None,
        )
        await self._notify()

    async def _notify(self) -> None:
        if self._on_result is not None:
            await self._on_result(self.state)
