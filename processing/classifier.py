"""
Classifier
Meme emotion scorers behind a single async contract
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple
import asyncio
import logging
import random

import httpx
from pydantic import ValidationError

from models import Classification
from utils.exceptions import ConfigurationError, ScoreError


logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]

DEFAULT_LABELS: Tuple[Tuple[str, float], ...] = (
    ("Funny", 0.82),
    ("Sarcastic", 0.56),
    ("Offensive", 0.14),
    ("Informative", 0.08),
)


def _clamp_unit(value: float) -> float:
    return min(1.0, max(0.0, value))


def _flatten_payload(payload: Any) -> List[Any]:
    # Some inference servers wrap the list once more (one entry per input)
    if isinstance(payload, list) and len(payload) == 1 and isinstance(payload[0], list):
        return list(payload[0])
    if isinstance(payload, list):
        return list(payload)
    raise TypeError(f"expected a JSON list, got {type(payload).__name__}")


class BaseClassifier(ABC):
    """
    Classifier base class

    Implementations must be idempotent and side-effect free: scoring the same
    image twice is always safe.
    """

    def __init__(self, model_name: str):
        self.model_name = model_name
        self._initialized = False
        self._init_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """One-time lazy warm-up; safe to call repeatedly."""
        if self._initialized:
            return
        async with self._init_lock:
            if self._initialized:
                return
            await self._load()
            self._initialized = True
            logger.info(f"Classifier ready: {self.model_name}")

    async def _load(self) -> None:
        """Subclasses acquire models/clients here"""

    @abstractmethod
    async def classify(self, image_url: str) -> List[Classification]:
        """
        Score one image

        Args:
            image_url: image location

        Returns:
            (label, confidence) pairs in the classifier's own order

        Raises:
            ScoreError: on any internal fault or unusable output
        """

    async def close(self) -> None:
        self._initialized = False

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _parse_results(self, payload: Any) -> List[Classification]:
        """Validate raw ``[{label, score}, ...]`` output."""
        try:
            results = [Classification.model_validate(entry) for entry in _flatten_payload(payload)]
        except (TypeError, ValidationError) as exc:
            raise ScoreError(f"Malformed classifier output: {exc}", model=self.model_name)
        if not results:
            raise ScoreError("Classifier returned no results", model=self.model_name)
        return results

    def _require_url(self, image_url: str) -> str:
        url = str(image_url or "").strip()
        if not url:
            raise ScoreError("Image URL is required", model=self.model_name)
        return url


class MockMemeClassifier(BaseClassifier):
    """
    Demo classifier

    Returns a fixed label set with slight random noise after a simulated
    processing delay. Pass ``seed`` for reproducible scores.
    """

    def __init__(
        self,
        model_name: str = "mock-meme-classifier",
        *,
        labels: Sequence[Tuple[str, float]] = DEFAULT_LABELS,
        min_latency: float = 0.8,
        max_latency: float = 1.5,
        jitter: float = 0.1,
        seed: Optional[int] = None,
        sleep: Optional[SleepFn] = None,
    ):
        super().__init__(model_name)
        if min_latency > max_latency:
            raise ConfigurationError(
                "min_latency must not exceed max_latency",
                {"min_latency": min_latency, "max_latency": max_latency},
            )
        self.labels = tuple(labels)
        self.min_latency = min_latency
        self.max_latency = max_latency
        self.jitter = jitter
        self._rng = random.Random(seed)
        self._sleep = sleep or asyncio.sleep

    async def classify(self, image_url: str) -> List[Classification]:
        self._require_url(image_url)
        await self.initialize()

        latency = self._rng.uniform(self.min_latency, self.max_latency)
        if latency > 0:
            await self._sleep(latency)

        return [
            Classification(
                label=label,
                score=_clamp_unit(base + self._rng.uniform(-self.jitter, self.jitter)),
            )
            for label, base in self.labels
        ]


class HttpMemeClassifier(BaseClassifier):
    """
    Remote image-classification endpoint

    POSTs ``{"inputs": <image url>}`` and expects a JSON list of
    ``{"label": str, "score": float}`` objects (the Hugging Face inference
    response shape).
    """

    def __init__(
        self,
        model_name: str = "meme-emotion-classifier",
        *,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(model_name)
        self.endpoint = str(endpoint or "").strip()
        if not self.endpoint:
            raise ConfigurationError("CLASSIFIER_ENDPOINT is required for the http classifier")
        self.api_key = api_key
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _load(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout), follow_redirects=True)
            self._owns_client = True

    async def classify(self, image_url: str) -> List[Classification]:
        url = self._require_url(image_url)
        await self.initialize()

        try:
            response = await self._client.post(self.endpoint, json={"inputs": url}, headers=self._headers())
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise ScoreError(f"Inference request failed: {exc}", model=self.model_name)
        except ValueError as exc:
            raise ScoreError(f"Inference response is not JSON: {exc}", model=self.model_name)

        return self._parse_results(payload)

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
        await super().close()


def get_classifier(
    provider: Optional[str] = None,
    model_name: Optional[str] = None,
    **kwargs,
) -> BaseClassifier:
    """
    Build a classifier

    Precedence: arguments > .env (CLASSIFIER_*) > defaults

    Args:
        provider: "mock" or "http" (defaults to CLASSIFIER_PROVIDER)
        model_name: model name (defaults to CLASSIFIER_MODEL_NAME)
        **kwargs: overrides for the chosen implementation

    Returns:
        Classifier instance
    """
    from config import get_classifier_settings

    settings = get_classifier_settings()
    provider_name = (provider or settings.provider or "mock").strip().lower()

    if provider_name == "mock":
        options = {
            "min_latency": settings.min_latency,
            "max_latency": settings.max_latency,
            "jitter": settings.jitter,
            "seed": settings.seed,
        }
        options.update(kwargs)
        return MockMemeClassifier(model_name or "mock-meme-classifier", **options)

    if provider_name == "http":
        if kwargs.get("seed") is not None:
            raise ConfigurationError("seed only applies to the mock classifier")
        kwargs.pop("seed", None)
        options = {
            "endpoint": settings.endpoint,
            "api_key": settings.api_key,
            "timeout": settings.timeout,
        }
        options.update(kwargs)
        return HttpMemeClassifier(model_name or settings.model_name, **options)

    raise ConfigurationError(f"Unknown classifier provider: {provider_name}. Supported: mock, http")
