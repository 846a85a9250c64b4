"""Session controller: one live session, superseded by each new trigger."""

from __future__ import annotations

import asyncio
import inspect
import logging
from contextlib import aclosing
from typing import Any, Callable, Optional

from core import SessionState
from processing.classifier import get_classifier
from scrapers.meme_api_scraper import MemeApiScraper

from .pipeline import AcquisitionPipeline


logger = logging.getLogger(__name__)

StateCallback = Callable[[SessionState], Any]


class SessionController:
    """
    Owns the live session task for a presentation adapter.

    ``trigger`` cancels any in-flight session (fetch, scoring and pacing
    are cancelled together) before starting the next one. Snapshots from a
    superseded session are dropped, never delivered.
    """

    def __init__(self, pipeline: AcquisitionPipeline, on_state: Optional[StateCallback] = None) -> None:
        self._pipeline = pipeline
        self._on_state = on_state
        self._task: Optional[asyncio.Task] = None
        self._generation = 0
        self._latest: Optional[SessionState] = None
        self._trigger_lock = asyncio.Lock()

    @property
    def latest(self) -> Optional[SessionState]:
        """Most recent snapshot of the live session."""
        return self._latest

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def trigger(self, target_count: int) -> asyncio.Task:
        """Start a new session, superseding the current one."""
        async with self._trigger_lock:
            superseded = await self.cancel()
            if superseded:
                logger.info("Superseded the in-flight session")
            self._generation += 1
            self._latest = None
            self._task = asyncio.create_task(self._consume(self._generation, target_count))
            return self._task

    async def cancel(self) -> bool:
        """Cancel the live session. Returns True when one was running."""
        task = self._task
        if task is None or task.done():
            return False
        task.cancel()
        await asyncio.wait({task})
        return True

    async def wait(self) -> Optional[SessionState]:
        """Wait for the live session and return its final snapshot (None if it was cancelled)."""
        task = self._task
        if task is None:
            return self._latest
        await asyncio.wait({task})
        if task.cancelled():
            return None
        return task.result()

    async def _consume(self, generation: int, target_count: int) -> Optional[SessionState]:
        final: Optional[SessionState] = None
        async with aclosing(self._pipeline.run(target_count)) as states:
            async for state in states:
                if generation != self._generation:
                    logger.debug(f"Dropped snapshot from superseded session {state.session_id}")
                    continue
                final = state
                self._latest = state
                await self._deliver(state)
        return final

    async def _deliver(self, state: SessionState) -> None:
        if self._on_state is None:
            return
        result = self._on_state(state)
        if inspect.isawaitable(result):
            await result


def build_pipeline(
    *,
    provider: Optional[str] = None,
    seed: Optional[int] = None,
    pacing_delay: Optional[float] = None,
) -> AcquisitionPipeline:
    """Wire the configured source and classifier into a pipeline."""
    classifier_kwargs = {}
    if seed is not None:
        classifier_kwargs["seed"] = seed
    classifier = get_classifier(provider, **classifier_kwargs)
    return AcquisitionPipeline(MemeApiScraper(), classifier, pacing_delay=pacing_delay)
