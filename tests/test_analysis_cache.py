import asyncio
import hashlib
import threading
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from careerpilot.repositories.resume_repository import ResumeRepository, insert_analysis
from careerpilot.services.analysis_cache import (
    AnalysisCache,
    HashComputationError,
    MonotonicClock,
    StoreUnavailable,
    compute_key,
)

RESUME = "Skilled in Python and React."
ROLE = "Backend Engineer"
PAYLOAD = {"atsScore": 72, "extractedSkills": ["Python", "React"]}


def _stepping_clock(start: datetime | None = None):
    """Returns a clock that advances one second per call."""
    state = {"ts": start or datetime(2026, 1, 1, 12, 0, 0)}

    def now():
        state["ts"] += timedelta(seconds=1)
        return state["ts"]

    return now


# ---------- compute_key ----------


class TestComputeKey:

    def test_deterministic(self):
        assert compute_key(RESUME, ROLE) == compute_key(RESUME, ROLE)

    def test_is_sha256_of_concatenation(self):
        expected = hashlib.sha256((RESUME + ROLE).encode("utf-8")).hexdigest()
        key = compute_key(RESUME, ROLE)
        assert key == expected
        assert len(key) == 64

    def test_bytes_and_text_agree(self):
        assert compute_key(RESUME.encode("utf-8"), ROLE) == compute_key(RESUME, ROLE)

    def test_single_character_change_in_content(self):
        assert compute_key(RESUME, ROLE) != compute_key(RESUME[:-1] + "!", ROLE)
        assert compute_key(RESUME, ROLE) != compute_key(RESUME + " ", ROLE)

    def test_single_character_change_in_context(self):
        assert compute_key(RESUME, ROLE) != compute_key(RESUME, "Backend Engineeq")
        assert compute_key(RESUME, "Backend Engineer") != compute_key(RESUME, "Frontend Engineer")

    def test_non_ascii_content(self):
        assert compute_key("Développeur Python ✓", ROLE) != compute_key("Developpeur Python ✓", ROLE)

    def test_unencodable_text_raises(self):
        with pytest.raises(HashComputationError):
            compute_key("broken \ud800 surrogate", ROLE)

    def test_wrong_type_raises(self):
        with pytest.raises(HashComputationError):
            compute_key(None, ROLE)


class TestMonotonicClock:

    def test_strictly_increasing_when_time_stands_still(self):
        fixed = datetime(2026, 1, 1)
        clock = MonotonicClock(now=lambda: fixed)
        first, second, third = clock(), clock(), clock()
        assert first == fixed
        assert first < second < third
        assert second - first == timedelta(microseconds=1)

    def test_never_goes_backwards(self):
        times = iter([datetime(2026, 1, 2), datetime(2026, 1, 1)])
        clock = MonotonicClock(now=lambda: next(times))
        first = clock()
        assert clock() > first


# ---------- lookup / store ----------


class TestAnalysisCache:

    @pytest.mark.asyncio
    async def test_lookup_miss_returns_none(self, session_factory):
        cache = AnalysisCache(session_factory=session_factory)
        assert await cache.lookup("u1", compute_key(RESUME, ROLE), ROLE) is None

    @pytest.mark.asyncio
    async def test_store_then_lookup_hits(self, session_factory):
        cache = AnalysisCache(session_factory=session_factory)
        key = compute_key(RESUME, ROLE)
        stored = await cache.store("u1", key, ROLE, PAYLOAD, RESUME)
        assert stored.created_at is not None
        assert stored.hash == key

        entry = await cache.lookup("u1", key, ROLE)
        assert entry is not None
        assert entry.id == stored.id
        assert entry.analysis == PAYLOAD
        assert entry.content == RESUME

    @pytest.mark.asyncio
    async def test_owner_isolation(self, session_factory):
        cache = AnalysisCache(session_factory=session_factory)
        key = compute_key(RESUME, ROLE)
        await cache.store("owner-a", key, ROLE, PAYLOAD)
        assert await cache.lookup("owner-b", key, ROLE) is None
        assert await cache.lookup("owner-a", key, ROLE) is not None

    @pytest.mark.asyncio
    async def test_context_isolation(self, session_factory):
        cache = AnalysisCache(session_factory=session_factory)
        key = compute_key(RESUME, "roleA")
        await cache.store("u1", key, "roleA", PAYLOAD)
        assert await cache.lookup("u1", key, "roleB") is None

    @pytest.mark.asyncio
    async def test_context_filter_blocks_concatenation_collision(self, session_factory):
        # "ab" + "c" and "a" + "bc" hash identically; the role filter keeps them apart
        cache = AnalysisCache(session_factory=session_factory)
        assert compute_key("ab", "c") == compute_key("a", "bc")
        await cache.store("u1", compute_key("ab", "c"), "c", PAYLOAD)
        assert await cache.lookup("u1", compute_key("a", "bc"), "bc") is None

    @pytest.mark.asyncio
    async def test_latest_store_wins(self, session_factory):
        cache = AnalysisCache(session_factory=session_factory, clock=_stepping_clock())
        key = compute_key(RESUME, ROLE)
        first = await cache.store("u1", key, ROLE, {"atsScore": 60})
        second = await cache.store("u1", key, ROLE, {"atsScore": 80})
        assert second.created_at > first.created_at

        entry = await cache.lookup("u1", key, ROLE)
        assert entry.id == second.id
        assert entry.analysis == {"atsScore": 80}

    @pytest.mark.asyncio
    async def test_tie_on_created_at_is_deterministic(self, session_factory):
        key = compute_key(RESUME, ROLE)
        ts = datetime(2026, 3, 1, 9, 30)
        db = session_factory()
        try:
            ids = [
                insert_analysis(db, "u1", key, ROLE, {"n": n}, created_at=ts).id
                for n in range(3)
            ]
        finally:
            db.close()

        cache = AnalysisCache(session_factory=session_factory)
        first = await cache.lookup("u1", key, ROLE)
        again = await cache.lookup("u1", key, ROLE)
        assert first.id == again.id == max(ids)

    @pytest.mark.asyncio
    async def test_concurrent_double_submit_reads_consistently(self, session_factory):
        cache = AnalysisCache(session_factory=session_factory)
        key = compute_key(RESUME, ROLE)
        a, b = await asyncio.gather(
            cache.store("u1", key, ROLE, {"atsScore": 70}),
            cache.store("u1", key, ROLE, {"atsScore": 71}),
        )
        assert a.created_at != b.created_at
        newest = a if a.created_at > b.created_at else b

        results = [await cache.lookup("u1", key, ROLE) for _ in range(3)]
        assert {r.id for r in results} == {newest.id}
        assert results[0].analysis == newest.analysis

    @pytest.mark.asyncio
    async def test_lookup_store_error_is_not_a_miss(self, session_factory):
        repo = MagicMock()
        repo.find_latest_by_hash.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        cache = AnalysisCache(session_factory=session_factory, repository=repo)
        with pytest.raises(StoreUnavailable):
            await cache.lookup("u1", compute_key(RESUME, ROLE), ROLE)

    @pytest.mark.asyncio
    async def test_store_error_raises_store_unavailable(self, session_factory):
        repo = MagicMock()
        repo.insert_analysis.side_effect = OperationalError("INSERT", {}, Exception("db down"))
        cache = AnalysisCache(session_factory=session_factory, repository=repo)
        with pytest.raises(StoreUnavailable):
            await cache.store("u1", compute_key(RESUME, ROLE), ROLE, PAYLOAD)
        await cache.drain()

    @pytest.mark.asyncio
    async def test_lookup_never_writes(self, session_factory):
        repo = MagicMock(wraps=ResumeRepository())
        cache = AnalysisCache(session_factory=session_factory, repository=repo)
        await cache.lookup("u1", compute_key(RESUME, ROLE), ROLE)
        repo.insert_analysis.assert_not_called()

    @pytest.mark.asyncio
    async def test_store_completes_after_caller_is_cancelled(self, session_factory):
        gate = threading.Event()

        class SlowRepository(ResumeRepository):
            def insert_analysis(self, *args, **kwargs):
                gate.wait(timeout=5)
                return ResumeRepository.insert_analysis(*args, **kwargs)

        cache = AnalysisCache(session_factory=session_factory, repository=SlowRepository())
        key = compute_key(RESUME, ROLE)

        caller = asyncio.ensure_future(cache.store("u1", key, ROLE, PAYLOAD))
        await asyncio.sleep(0.05)
        caller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller

        gate.set()
        await cache.drain()

        entry = await cache.lookup("u1", key, ROLE)
        assert entry is not None
        assert entry.analysis == PAYLOAD
