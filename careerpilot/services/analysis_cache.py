"""
Content-addressed cache for resume analyses.

Key: sha256(content + target_role), hex. Entries are append-only rows in the
`resumes` table, partitioned by owner. A lookup filters on owner, hash and
target role and returns the newest row (created_at desc, id desc), so double
submits that both miss and both store still read back deterministically.

- A miss is None, never an exception.
- Store errors (DB down, SQL error) raise StoreUnavailable for lookup and store;
  the caller decides whether to continue uncached.
- Blocking DB work runs in the default executor with its own session, so a
  store does not depend on the request session.
- A store (and, via run_shielded, a whole analyze-and-store) is shielded from
  caller cancellation and finishes in the background.
"""
import asyncio
import hashlib
import logging
import threading
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Any, Callable, Coroutine, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from careerpilot.database import SessionLocal
from careerpilot.models.resume import ResumeAnalysisEntry
from careerpilot.repositories.resume_repository import ResumeRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreUnavailable(Exception):
    """Backing store unreachable or failed. Not a cache miss."""


class HashComputationError(Exception):
    """Cache key could not be computed. Caller falls back to uncached analysis."""


def compute_key(content: str | bytes, context_param: str) -> str:
    """
    Pure: sha256 over content bytes followed by the UTF-8 context string.
    Text content is UTF-8 encoded, so compute_key(text, role) == sha256((text + role).encode()).
    """
    try:
        data = content if isinstance(content, bytes) else content.encode("utf-8")
        digest = hashlib.sha256(data)
        digest.update(context_param.encode("utf-8"))
        return digest.hexdigest()
    except (AttributeError, TypeError, ValueError) as e:
        # ValueError covers UnicodeEncodeError (lone surrogates)
        raise HashComputationError(f"cannot hash analysis input: {e}") from e


class MonotonicClock:
    """utcnow that never repeats or goes backwards within the process (1 µs steps)."""

    def __init__(self, now: Callable[[], datetime] = datetime.utcnow):
        self._now = now
        self._last: datetime | None = None
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            ts = self._now()
            if self._last is not None and ts <= self._last:
                ts = self._last + timedelta(microseconds=1)
            self._last = ts
            return ts


class AnalysisCache:
    """Lookup/store over the resumes table. One instance per process (see get_analysis_cache)."""

    def __init__(
        self,
        session_factory: Callable[[], Session] | None = None,
        repository: ResumeRepository | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._session_factory = session_factory or SessionLocal
        self._repo = repository or ResumeRepository()
        self._clock = clock or MonotonicClock()
        # Strong refs so in-flight stores are not garbage collected after the caller leaves
        self._pending: set[asyncio.Task] = set()

    async def lookup(self, owner_id: str, key: str, context_param: str) -> ResumeAnalysisEntry | None:
        """Newest entry for (owner_id, key, context_param), or None on miss. Never writes."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._lookup_sync, owner_id, key, context_param)
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"analysis cache lookup failed: {e}") from e

    def _lookup_sync(self, owner_id: str, key: str, context_param: str) -> ResumeAnalysisEntry | None:
        db = self._session_factory()
        try:
            return self._repo.find_latest_by_hash(db, owner_id, key, context_param)
        finally:
            db.close()

    async def store(
        self,
        owner_id: str,
        key: str,
        context_param: str,
        payload: dict[str, Any],
        content_label: str = "",
    ) -> ResumeAnalysisEntry:
        """
        Append a new entry and return it with its created_at.
        If the caller is cancelled, the insert still completes in the background.
        """
        return await self.run_shielded(self._store(owner_id, key, context_param, payload, content_label))

    async def run_shielded(self, coro: Coroutine[Any, Any, T]) -> T:
        """
        Run coro as a tracked task that outlives caller cancellation.
        drain() waits for it; an orphaned task's outcome is logged.
        """
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            task.add_done_callback(_log_orphaned_task)
            raise

    async def _store(
        self,
        owner_id: str,
        key: str,
        context_param: str,
        payload: dict[str, Any],
        content_label: str,
    ) -> ResumeAnalysisEntry:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                None, self._store_sync, owner_id, key, context_param, payload, content_label
            )
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"analysis cache store failed: {e}") from e

    def _store_sync(
        self,
        owner_id: str,
        key: str,
        context_param: str,
        payload: dict[str, Any],
        content_label: str,
    ) -> ResumeAnalysisEntry:
        db = self._session_factory()
        try:
            return self._repo.insert_analysis(
                db, owner_id, key, context_param, payload,
                content=content_label,
                created_at=self._clock(),
            )
        except SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()

    async def drain(self) -> None:
        """Wait for background tasks (shutdown, tests). Their failures are already logged."""
        # A shielded analysis may start its store while we wait
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


def _log_orphaned_task(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("Background analysis cache task failed: %s", exc)
    else:
        logger.info("Background analysis cache task completed after caller left")


@lru_cache
def get_analysis_cache() -> AnalysisCache:
    """Process-wide cache handle."""
    return AnalysisCache()
