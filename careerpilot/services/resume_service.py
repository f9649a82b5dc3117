"""
Resume analysis orchestration over the analysis cache:
1) key = sha256(content + role)  2) lookup  3) hit -> cached payload, Gemini not called
4) miss -> Gemini, store, return. Analyze-and-store runs as one shielded task,
   so a caller that leaves mid-analysis does not lose the paid result.
Cache trouble (key or store) degrades to an uncached analysis and is logged;
Gemini errors propagate to the router.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

from pydantic import ValidationError

from careerpilot.schemas.resume import ResumeAnalysis
from careerpilot.services import ai_service
from careerpilot.services.analysis_cache import (
    AnalysisCache,
    HashComputationError,
    StoreUnavailable,
    compute_key,
)

logger = logging.getLogger(__name__)

AnalyzeFn = Callable[[str | bytes, str, str | None], ResumeAnalysis]


@dataclass
class AnalysisOutcome:
    analysis: ResumeAnalysis
    from_cache: bool
    cache_key: str | None = None


class ResumeAnalysisService:
    """Cache-first resume analysis. cache=None disables caching (always calls Gemini)."""

    def __init__(self, cache: AnalysisCache | None, analyze: AnalyzeFn | None = None):
        self._cache = cache
        self._analyze = analyze or ai_service.analyze_resume

    async def analyze(
        self,
        owner_id: str,
        content: str | bytes,
        target_role: str,
        *,
        mime_type: str | None = None,
        content_label: str | None = None,
    ) -> AnalysisOutcome:
        """
        content: pasted text, or the base64 payload of an uploaded document (mime_type set).
        content_label: what to record as the resume content (defaults to the text itself).
        """
        key = None
        if self._cache is not None:
            try:
                key = compute_key(content, target_role)
            except HashComputationError as e:
                logger.warning("Analysis cache key failed, analyzing without cache: %s", e)

        if key is not None:
            try:
                entry = await self._cache.lookup(owner_id, key, target_role)
            except StoreUnavailable as e:
                logger.warning("Analysis cache unavailable, analyzing without cache: %s", e)
                key = None
            else:
                if entry is not None:
                    try:
                        analysis = ResumeAnalysis.model_validate(entry.analysis)
                    except ValidationError as e:
                        logger.warning("Cached analysis %s is unreadable, re-analyzing: %s", entry.id, e)
                    else:
                        logger.info("Analysis cache hit for owner %s (entry %s)", owner_id, entry.id)
                        return AnalysisOutcome(analysis=analysis, from_cache=True, cache_key=key)

        if key is None:
            analysis = await self._run_analyzer(content, target_role, mime_type)
        else:
            if content_label is None:
                content_label = content if isinstance(content, str) else ""
            # Once Gemini is called the result is cached, even if the caller goes away
            analysis = await self._cache.run_shielded(
                self._analyze_and_store(owner_id, key, content, target_role, mime_type, content_label)
            )

        return AnalysisOutcome(analysis=analysis, from_cache=False, cache_key=key)

    async def _run_analyzer(
        self, content: str | bytes, target_role: str, mime_type: str | None
    ) -> ResumeAnalysis:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._analyze, content, target_role, mime_type)

    async def _analyze_and_store(
        self,
        owner_id: str,
        key: str,
        content: str | bytes,
        target_role: str,
        mime_type: str | None,
        content_label: str,
    ) -> ResumeAnalysis:
        analysis = await self._run_analyzer(content, target_role, mime_type)
        try:
            await self._cache.store(
                owner_id, key, target_role, analysis.model_dump(by_alias=True), content_label
            )
        except StoreUnavailable as e:
            logger.warning("Could not cache analysis for owner %s: %s", owner_id, e)
        return analysis
