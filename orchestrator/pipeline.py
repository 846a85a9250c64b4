"""Acquisition pipeline: bounded, deduplicated fetch-and-classify loop."""

from __future__ import annotations

import asyncio
import logging
from contextlib import aclosing
from typing import Any, AsyncIterator, Awaitable, Callable, List, Optional

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from config import get_settings
from core import ClassifiedItem, SessionState
from models import Classification
from processing.classifier import BaseClassifier
from scrapers.base import BaseMemeSource
from utils.exceptions import FetchError, ScoreError, SessionBusyError, TargetCountError

from .session import AcquisitionSession


logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]

GENERIC_FAILURE_MESSAGE = "Failed to fetch and classify memes. Please try again."


def validate_target_count(value: Any, lower: int = 1, upper: int = 10) -> int:
    """Return ``value`` when it is an int within [lower, upper], else raise TargetCountError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TargetCountError(value, lower, upper)
    if value < lower or value > upper:
        raise TargetCountError(value, lower, upper)
    return value


def clamp_target_count(raw: Any, lower: int = 1, upper: int = 10) -> int:
    """Coerce free-form input into range: unparseable or zero becomes ``lower``."""
    try:
        value = int(float(str(raw).strip()))
    except (TypeError, ValueError, OverflowError):
        value = lower
    return min(upper, max(lower, value))


class AcquisitionPipeline:
    """
    Drives one acquisition session at a time.

    ``run`` is an async generator of SessionState snapshots; the last one is
    always terminal. Per-attempt fetch failures and per-item scoring failures
    are absorbed here, so callers never handle network exceptions.
    Close the generator (``contextlib.aclosing``) when abandoning it early.
    """

    def __init__(
        self,
        source: BaseMemeSource,
        classifier: BaseClassifier,
        *,
        min_count: Optional[int] = None,
        max_count: Optional[int] = None,
        attempt_multiplier: Optional[int] = None,
        pacing_delay: Optional[float] = None,
        score_attempts: Optional[int] = None,
        score_retry_wait: Optional[float] = None,
        sleep: Optional[SleepFn] = None,
    ) -> None:
        settings = get_settings()
        acquisition = settings.acquisition
        self._source = source
        self._classifier = classifier
        self.min_count = acquisition.min_count if min_count is None else int(min_count)
        self.max_count = acquisition.max_count if max_count is None else int(max_count)
        self.attempt_multiplier = (
            acquisition.attempt_multiplier if attempt_multiplier is None else int(attempt_multiplier)
        )
        self.pacing_delay = acquisition.pacing_delay if pacing_delay is None else float(pacing_delay)
        self.score_attempts = max(
            1, settings.classifier.max_attempts if score_attempts is None else int(score_attempts)
        )
        self.score_retry_wait = (
            settings.classifier.retry_wait if score_retry_wait is None else float(score_retry_wait)
        )
        self._sleep = sleep or asyncio.sleep
        self._lock = asyncio.Lock()
        self._active_session_id: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def __aenter__(self):
        await self._classifier.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        """Release the source and classifier."""
        await self._source.close()
        await self._classifier.close()

    async def run(self, target_count: int) -> AsyncIterator[SessionState]:
        """
        Acquire ``target_count`` unique memes and classify each one.

        Args:
            target_count: requested number of unique memes

        Yields:
            A snapshot after every visible change; the final one is terminal.

        Raises:
            SessionBusyError: another session is running on this pipeline
        """
        if self._lock.locked():
            raise SessionBusyError(session_id=self._active_session_id)

        async with self._lock:
            try:
                count = validate_target_count(target_count, self.min_count, self.max_count)
            except TargetCountError as exc:
                rejected = AcquisitionSession(
                    target_count if isinstance(target_count, int) else 0,
                    attempt_multiplier=0,
                )
                rejected.fail(exc.message)
                logger.warning(f"Rejected target count {target_count!r}: {exc.message}")
                yield rejected.snapshot()
                return

            session = AcquisitionSession(count, attempt_multiplier=self.attempt_multiplier)
            self._active_session_id = session.session_id
            try:
                async with aclosing(self._drive(session)) as states:
                    async for state in states:
                        yield state
            finally:
                self._active_session_id = None

    async def _drive(self, session: AcquisitionSession) -> AsyncIterator[SessionState]:
        session.begin()
        logger.info(
            f"Session {session.session_id} started: target={session.target_count} "
            f"budget={session.max_attempts} attempts"
        )
        yield session.snapshot()

        try:
            while session.needs_more():
                attempt = session.record_attempt()
                try:
                    reference = await self._source.fetch_one()
                except FetchError as exc:
                    logger.warning(f"Attempt {attempt}/{session.max_attempts} failed: {exc}")
                else:
                    if session.has_seen(reference.identity_key):
                        logger.debug(f"Attempt {attempt}: duplicate {reference.identity_key} discarded")
                    else:
                        item = session.accept(reference)
                        logger.info(
                            f"Accepted {item.id} ({session.found_count}/{session.target_count}): {item.identity_key}"
                        )
                        yield session.snapshot()

                        session.mark_scoring(item.id)
                        yield session.snapshot()

                        await self._score_item(session, item)
                        yield session.snapshot()

                if session.needs_more() and self.pacing_delay > 0:
                    await self._sleep(self.pacing_delay)
        except Exception:
            logger.exception(f"Session {session.session_id} aborted")
            session.fail(GENERIC_FAILURE_MESSAGE)
            yield session.snapshot()
            return

        session.complete()
        if session.failure_message:
            logger.warning(f"Session {session.session_id}: {session.failure_message}")
        else:
            logger.info(
                f"Session {session.session_id} completed: {session.found_count} memes "
                f"in {session.attempts_made} attempts"
            )
        yield session.snapshot()

    async def _classify(self, item: ClassifiedItem) -> List[Classification]:
        results: List[Classification] = []
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.score_attempts),
            wait=wait_exponential(multiplier=self.score_retry_wait, max=10),
            retry=retry_if_exception_type(ScoreError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self._sleep,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                results = list(await self._classifier.classify(item.payload_ref.url))
                if not results:
                    raise ScoreError("Classifier returned no results", model=self._classifier.model_name)
        return results

    async def _score_item(self, session: AcquisitionSession, item: ClassifiedItem) -> None:
        try:
            results = await self._classify(item)
        except ScoreError as exc:
            logger.warning(f"Scoring {item.id} gave up after {self.score_attempts} attempt(s): {exc}")
            session.mark_unscored(item.id, exc.message)
            return

        scored = session.mark_scored(item.id, results)
        logger.info(f"Scored {item.id}: top={scored.top_score.label} ({scored.top_score.percent}%)")
