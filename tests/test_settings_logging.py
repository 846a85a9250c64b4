from __future__ import annotations

import logging
from uuid import uuid4

from rich.logging import RichHandler

from config.settings import AcquisitionSettings, ClassifierSettings, MemeApiSettings, Settings
from utils.exceptions import FetchError, TargetCountError
from utils.logger import get_logger, setup_logger


def test_defaults_match_acquisition_contract(monkeypatch) -> None:
    for name in ("ACQUISITION_MIN_COUNT", "ACQUISITION_MAX_COUNT", "ACQUISITION_ATTEMPT_MULTIPLIER", "ACQUISITION_PACING_DELAY"):
        monkeypatch.delenv(name, raising=False)

    settings = AcquisitionSettings()
    assert (settings.min_count, settings.max_count) == (1, 10)
    assert settings.attempt_multiplier == 2
    assert settings.pacing_delay == 0.5


def test_env_prefix_overrides(monkeypatch) -> None:
    monkeypatch.setenv("MEME_API_ENDPOINT", "https://meme-api.test/gimme/wholesomememes")
    monkeypatch.setenv("CLASSIFIER_PROVIDER", "http")
    monkeypatch.setenv("CLASSIFIER_MAX_ATTEMPTS", "4")
    monkeypatch.setenv("ACQUISITION_PACING_DELAY", "0.1")

    assert MemeApiSettings().endpoint == "https://meme-api.test/gimme/wholesomememes"
    classifier = ClassifierSettings()
    assert classifier.provider == "http"
    assert classifier.max_attempts == 4
    assert AcquisitionSettings().pacing_delay == 0.1


def test_settings_aggregate_sections() -> None:
    settings = Settings()
    assert isinstance(settings.meme_api, MemeApiSettings)
    assert isinstance(settings.classifier, ClassifierSettings)
    assert isinstance(settings.acquisition, AcquisitionSettings)


def test_setup_logger_is_idempotent() -> None:
    name = f"meme_analyzer.test.{uuid4().hex[:6]}"
    logger = setup_logger(name, level="debug")
    again = setup_logger(name, level="debug")

    assert logger is again
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RichHandler)
    assert get_logger(name) is logger


def test_setup_logger_plain_handler() -> None:
    logger = setup_logger(f"meme_analyzer.test.{uuid4().hex[:6]}", level="bogus", use_rich=False)
    assert logger.level == logging.INFO
    assert not isinstance(logger.handlers[0], RichHandler)


def test_exception_messages() -> None:
    err = FetchError("Response has no usable 'url' field", source="Meme API", keys=["code"])
    assert err.source == "Meme API"
    assert "Details" in str(err)

    count_err = TargetCountError(15, 1, 10)
    assert str(count_err) == "Please enter a number between 1 and 10"
    assert count_err.value == 15
