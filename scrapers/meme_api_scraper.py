"""
Meme API Scraper
Random meme source backed by meme-api.com
API: GET https://meme-api.com/gimme
"""
import asyncio
from typing import Any, Dict, List, Optional
import logging

import aiohttp
from pydantic import ValidationError

from .base import BaseMemeSource
from models import MemeReference
from utils.exceptions import FetchError


logger = logging.getLogger(__name__)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _preview_urls(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    return [str(item) for item in raw if isinstance(item, str) and item.strip()]


def parse_meme_payload(data: Any, source: str = "Meme API") -> MemeReference:
    """
    Convert a ``/gimme`` response body into a MemeReference

    Raises:
        FetchError: body is not an object, lacks a usable ``url`` or
            carries fields the model rejects
    """
    if not isinstance(data, dict):
        raise FetchError("Response body is not a JSON object", source=source)

    url = data.get("url")
    if not isinstance(url, str) or not url.strip():
        raise FetchError("Response has no usable 'url' field", source=source, keys=sorted(data.keys()))

    try:
        ups = int(data.get("ups") or 0)
    except (TypeError, ValueError, OverflowError):
        ups = 0

    try:
        return MemeReference(
            url=url.strip(),
            title=_optional_text(data.get("title")),
            subreddit=_optional_text(data.get("subreddit")),
            post_link=_optional_text(data.get("postLink")),
            author=_optional_text(data.get("author")),
            ups=ups,
            nsfw=bool(data.get("nsfw", False)),
            spoiler=bool(data.get("spoiler", False)),
            preview=_preview_urls(data.get("preview")),
        )
    except ValidationError as e:
        raise FetchError(f"Malformed meme payload: {e}", source=source)


class MemeApiScraper(BaseMemeSource):
    """
    meme-api.com client

    Each ``fetch_one`` call is exactly one GET. Any failure surfaces as a
    FetchError so the caller can spend one attempt and move on.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__()
        api_settings = self.settings.meme_api
        self.endpoint = endpoint or api_settings.endpoint
        self.timeout = timeout if timeout is not None else api_settings.timeout
        self.user_agent = api_settings.user_agent

    @property
    def name(self) -> str:
        return "Meme API"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Create the HTTP session lazily"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            )
        return self._session

    async def _request_json(self) -> Dict[str, Any]:
        session = await self._get_session()
        async with session.get(self.endpoint) as response:
            response.raise_for_status()
            return await response.json(content_type=None)

    async def fetch_one(self) -> MemeReference:
        try:
            data = await self._request_json()
        except aiohttp.ClientError as e:
            self._log_error("Request failed", e)
            raise FetchError(f"Request failed: {e}", source=self.name)
        except asyncio.TimeoutError as e:
            self._log_error("Request timed out", e)
            raise FetchError(f"Request timed out after {self.timeout}s", source=self.name)
        except ValueError as e:
            self._log_error("Invalid JSON", e)
            raise FetchError(f"Invalid JSON response: {e}", source=self.name)

        reference = parse_meme_payload(data, source=self.name)
        logger.debug(f"[{self.name}] Fetched {reference.url}")
        return reference
