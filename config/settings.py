"""
Settings Configuration
Pydantic-validated configuration loaded from environment and config/.env
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class MemeApiSettings(BaseSettings):
    """Random meme source (meme-api.com)"""
    endpoint: str = Field(default="https://meme-api.com/gimme", description="GET endpoint returning one random meme")
    timeout: float = Field(default=10.0, description="Request timeout (seconds)")
    user_agent: str = Field(default="MemeEmotionAnalyzer/1.0", description="User Agent")

    class Config:
        env_prefix = "MEME_API_"


class ClassifierSettings(BaseSettings):
    """Meme classifier"""
    provider: str = Field(default="mock", description="Classifier provider: mock, http")
    endpoint: Optional[str] = Field(default=None, description="Inference endpoint for the http provider")
    api_key: Optional[str] = Field(default=None, description="Bearer token for the inference endpoint")
    model_name: str = Field(default="meme-emotion-classifier", description="Model name reported in errors/logs")
    timeout: float = Field(default=30.0, description="Inference request timeout (seconds)")
    max_attempts: int = Field(default=2, ge=1, description="Scoring attempts per item before it is marked unscored")
    retry_wait: float = Field(default=1.0, ge=0, description="Exponential backoff multiplier between scoring attempts (seconds)")

    # Mock provider
    min_latency: float = Field(default=0.8, ge=0, description="Simulated minimum latency (seconds)")
    max_latency: float = Field(default=1.5, ge=0, description="Simulated maximum latency (seconds)")
    jitter: float = Field(default=0.1, ge=0, description="Uniform +/- noise applied to mock scores")
    seed: Optional[int] = Field(default=None, description="Random seed for reproducible mock scores")

    class Config:
        env_prefix = "CLASSIFIER_"


class AcquisitionSettings(BaseSettings):
    """Acquisition session limits"""
    min_count: int = Field(default=1, ge=1, description="Smallest accepted target count")
    max_count: int = Field(default=10, ge=1, description="Largest accepted target count")
    default_count: int = Field(default=3, ge=1, description="Target count when the caller gives none")
    attempt_multiplier: int = Field(default=2, ge=1, description="Attempt budget = multiplier x target count")
    pacing_delay: float = Field(default=0.5, ge=0, description="Fixed delay between attempts (seconds)")

    class Config:
        env_prefix = "ACQUISITION_"


class GeneralSettings(BaseSettings):
    """General settings"""
    log_level: str = Field(default="INFO", description="Log level")
    log_file: Optional[str] = Field(default=None, description="Optional log file name under logs/")

    class Config:
        env_prefix = "GENERAL_"


class Settings(BaseSettings):
    """Aggregated settings"""

    meme_api: MemeApiSettings = Field(default_factory=MemeApiSettings)
    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)
    acquisition: AcquisitionSettings = Field(default_factory=AcquisitionSettings)
    general: GeneralSettings = Field(default_factory=GeneralSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """Load settings, reading config/.env first when present"""
        if env_path is None:
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            meme_api=MemeApiSettings(),
            classifier=ClassifierSettings(),
            acquisition=AcquisitionSettings(),
            general=GeneralSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings singleton"""
    return Settings.load_from_env_file()


def get_meme_api_settings() -> MemeApiSettings:
    return get_settings().meme_api


def get_classifier_settings() -> ClassifierSettings:
    return get_settings().classifier


def get_acquisition_settings() -> AcquisitionSettings:
    return get_settings().acquisition


def get_general_settings() -> GeneralSettings:
    return get_settings().general
