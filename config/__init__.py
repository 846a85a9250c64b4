"""
Configuration Management Module
"""
from .settings import (
    Settings,
    MemeApiSettings,
    ClassifierSettings,
    AcquisitionSettings,
    GeneralSettings,
    get_settings,
    get_meme_api_settings,
    get_classifier_settings,
    get_acquisition_settings,
    get_general_settings,
)

__all__ = [
    "Settings",
    "MemeApiSettings",
    "ClassifierSettings",
    "AcquisitionSettings",
    "GeneralSettings",
    "get_settings",
    "get_meme_api_settings",
    "get_classifier_settings",
    "get_acquisition_settings",
    "get_general_settings",
]
