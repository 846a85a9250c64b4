"""
Scrapers Module
Random-content source clients
"""
from .base import BaseMemeSource
from .meme_api_scraper import MemeApiScraper, parse_meme_payload

__all__ = [
    "BaseMemeSource",
    "MemeApiScraper",
    "parse_meme_payload",
]
