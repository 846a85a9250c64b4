from __future__ import annotations

import json
from typing import List

import httpx
import pytest

from processing.classifier import (
    DEFAULT_LABELS,
    HttpMemeClassifier,
    MockMemeClassifier,
    get_classifier,
)
from utils.exceptions import ConfigurationError, ScoreError


IMAGE = "https://i.redd.it/abc123.png"


@pytest.mark.asyncio
async def test_mock_without_jitter_returns_default_labels() -> None:
    classifier = MockMemeClassifier(min_latency=0, max_latency=0, jitter=0)

    results = await classifier.classify(IMAGE)

    assert [(r.label, r.score) for r in results] == list(DEFAULT_LABELS)


@pytest.mark.asyncio
async def test_mock_scores_are_jittered_within_unit_interval() -> None:
    classifier = MockMemeClassifier(min_latency=0, max_latency=0, jitter=0.1, seed=7)

    for _ in range(20):
        results = await classifier.classify(IMAGE)
        for result, (label, base) in zip(results, DEFAULT_LABELS):
            assert result.label == label
            assert 0.0 <= result.score <= 1.0
            assert abs(result.score - base) <= 0.1 + 1e-9


@pytest.mark.asyncio
async def test_mock_is_reproducible_with_seed() -> None:
    first = MockMemeClassifier(min_latency=0, max_latency=0, seed=42)
    second = MockMemeClassifier(min_latency=0, max_latency=0, seed=42)

    assert await first.classify(IMAGE) == await second.classify(IMAGE)


@pytest.mark.asyncio
async def test_mock_simulates_latency() -> None:
    delays: List[float] = []

    async def _record(seconds: float) -> None:
        delays.append(seconds)

    classifier = MockMemeClassifier(min_latency=0.2, max_latency=0.2, sleep=_record)
    await classifier.classify(IMAGE)

    assert delays == [0.2]


@pytest.mark.asyncio
async def test_mock_rejects_blank_url() -> None:
    with pytest.raises(ScoreError):
        await MockMemeClassifier(min_latency=0, max_latency=0).classify("  ")


def test_mock_rejects_inverted_latency_range() -> None:
    with pytest.raises(ConfigurationError):
        MockMemeClassifier(min_latency=2.0, max_latency=1.0)


def _http_classifier(handler, **kwargs) -> HttpMemeClassifier:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpMemeClassifier(endpoint="https://inference.test/models/meme", client=client, **kwargs)


@pytest.mark.asyncio
async def test_http_classifier_parses_label_score_list() -> None:
    captured = {}

    def _handler(request: httpx.Request) -> httpx.Response:
        captured["body"] = json.loads(request.content)
        captured["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[{"label": "Funny", "score": 0.7}, {"label": "Offensive", "score": 0.2}])

    classifier = _http_classifier(_handler, api_key="secret")
    results = await classifier.classify(IMAGE)

    assert [(r.label, r.score) for r in results] == [("Funny", 0.7), ("Offensive", 0.2)]
    assert captured["body"] == {"inputs": IMAGE}
    assert captured["auth"] == "Bearer secret"
    await classifier.close()


@pytest.mark.asyncio
async def test_http_classifier_unwraps_single_nested_list() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[[{"label": "Sarcastic", "score": 0.9}]])

    results = await _http_classifier(_handler).classify(IMAGE)

    assert [r.label for r in results] == ["Sarcastic"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "model loading"}),
        httpx.Response(200, content=b"<html>oops</html>"),
        httpx.Response(200, json=[]),
        httpx.Response(200, json=[{"label": "Funny", "score": 1.5}]),
        httpx.Response(200, json=[{"score": 0.5}]),
        httpx.Response(200, json={"label": "Funny", "score": 0.5}),
    ],
)
async def test_http_classifier_failures_are_score_errors(response: httpx.Response) -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        return response

    with pytest.raises(ScoreError):
        await _http_classifier(_handler).classify(IMAGE)


def test_http_classifier_requires_endpoint() -> None:
    with pytest.raises(ConfigurationError):
        HttpMemeClassifier(endpoint="")


def test_get_classifier_builds_configured_providers() -> None:
    mock = get_classifier("mock", seed=1, min_latency=0, max_latency=0)
    assert isinstance(mock, MockMemeClassifier)

    http = get_classifier("http", endpoint="https://inference.test/models/meme")
    assert isinstance(http, HttpMemeClassifier)


def test_get_classifier_rejects_unknown_or_invalid_options() -> None:
    with pytest.raises(ConfigurationError):
        get_classifier("tensorflow")
    with pytest.raises(ConfigurationError):
        get_classifier("http", endpoint="https://inference.test/models/meme", seed=3)


@pytest.mark.asyncio
async def test_initialize_runs_once_and_context_manager_closes() -> None:
    loads = []

    class _CountingClassifier(MockMemeClassifier):
        async def _load(self) -> None:
            loads.append(1)

    async with _CountingClassifier(min_latency=0, max_latency=0) as classifier:
        await classifier.initialize()
        await classifier.classify(IMAGE)

    assert loads == [1]
