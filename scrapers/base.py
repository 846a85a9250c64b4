"""
Base Source
Abstract base for random-content sources
"""
from abc import ABC, abstractmethod
import logging

from config import get_settings
from models import MemeReference


logger = logging.getLogger(__name__)


class BaseMemeSource(ABC):
    """
    Source client base class

    A source hands out one candidate per call. It performs no retries and
    keeps no deduplication state; both belong to the acquisition pipeline.
    """

    def __init__(self):
        self.settings = get_settings()
        self._session = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name used in logs and errors"""
        pass

    @abstractmethod
    async def fetch_one(self) -> MemeReference:
        """
        Fetch one random candidate

        Returns:
            The candidate reference

        Raises:
            FetchError: network failure, bad status, malformed payload or
                missing identity field
        """
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Release the HTTP session"""
        if self._session:
            await self._session.close()
            self._session = None

    def _log_error(self, message: str, error: Exception):
        logger.warning(f"[{self.name}] {message}: {error}")
