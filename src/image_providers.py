# image_providers.py
#
# Description:
# This module defines the common interface for all stock photo providers and
# the four concrete adapters: Pexels, Unsplash, Pixabay and the keyless
# Wikimedia Commons fallback. Every adapter maps its provider's JSON into
# ImageCandidate objects and never raises: errors are logged and turn into an
# empty result list, so one failing provider never blocks the cascade.

import logging
import os
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests

import config
from models import ImageCandidate, ImageProvider

# Set the chatty HTTP loggers to WARNING level
logging.getLogger('urllib3').setLevel(logging.WARNING)

RASTER_EXTENSIONS = {"jpg", "jpeg", "png", "webp"}


def strip_html(text: Optional[str]) -> str:
    """Removes HTML tags from provider metadata."""
    return re.sub(r"<[^>]*>", "", text or "").strip()


def file_extension(url: Optional[str]) -> str:
    """Returns the lowercase extension of a URL, ignoring query and escapes."""
    if not url:
        return ""
    ext = url.rsplit(".", 1)[-1].lower() if "." in url else ""
    return ext.split("%")[0].split("?")[0]


class ImageSearchProvider(ABC):
    """
    Abstract base class for all stock photo providers.
    Ensures a consistent interface for the search cascade.
    """

    name: ImageProvider
    api_key_env: Optional[str] = None

    def get_api_key(self) -> str:
        """Reads the provider credential from the environment at call time."""
        if not self.api_key_env:
            return ""
        return os.environ.get(self.api_key_env, "")

    @property
    def is_configured(self) -> bool:
        return self.api_key_env is None or bool(self.get_api_key())

    def _get_json(self, url: str, params: Dict[str, Any],
                  headers: Optional[Dict[str, str]] = None) -> Optional[Dict[str, Any]]:
        """Issues a single GET and returns the decoded JSON, or None on any failure."""
        try:
            response = requests.get(url, params=params, headers=headers,
                                    timeout=config.REQUEST_TIMEOUT_SECONDS)
        except requests.exceptions.RequestException as e:
            logging.warning(f"⚠️ {self.name.value} request error: {e}")
            return None

        if not response.ok:
            logging.warning(f"⚠️ {self.name.value} HTTP {response.status_code}")
            return None

        try:
            data = response.json()
        except ValueError as e:
            logging.warning(f"⚠️ {self.name.value} returned invalid JSON: {e}")
            return None

        if not isinstance(data, dict):
            logging.warning(f"⚠️ {self.name.value} returned an unexpected payload type: {type(data).__name__}")
            return None
        return data

    @abstractmethod
    def search(self, query: str, limit: int = config.SEARCH_LIMIT) -> List[ImageCandidate]:
        """
        Searches the provider for images matching a query.

        Args:
            query: The search text.
            limit: The maximum number of results to request.

        Returns:
            The normalised candidates. Empty when the provider is not
            configured, fails, or has no results.
        """
        pass


class PexelsProvider(ImageSearchProvider):
    """Pexels: the best food photos, 200 requests per hour."""

    name = ImageProvider.PEXELS
    api_key_env = config.PEXELS_API_KEY_ENV

    def search(self, query: str, limit: int = config.SEARCH_LIMIT) -> List[ImageCandidate]:
        api_key = self.get_api_key()
        if not api_key:
            return []

        params = {"query": query, "per_page": limit, "orientation": "landscape"}
        data = self._get_json(config.PEXELS_SEARCH_URL, params, headers={"Authorization": api_key})
        if not data:
            return []

        candidates = []
        for photo in data.get("photos") or []:
            try:
                src = photo.get("src") or {}
                candidates.append(ImageCandidate(
                    title=photo.get("alt") or query,
                    description=photo.get("alt") or "",
                    url=src.get("large2x") or src.get("large") or src.get("original"),
                    thumb_url=src.get("medium") or "",
                    width=photo.get("width") or 0,
                    height=photo.get("height") or 0,
                    license="Pexels License",
                    author=photo.get("photographer") or "Pexels",
                    author_url=photo.get("photographer_url") or "",
                    provider=self.name,
                    query=query,
                ))
            except (AttributeError, ValueError) as e:
                logging.debug(f"Skipping malformed Pexels photo: {e}")
        return candidates


class UnsplashProvider(ImageSearchProvider):
    """Unsplash: high quality, 50 requests per hour on the demo tier."""

    name = ImageProvider.UNSPLASH
    api_key_env = config.UNSPLASH_API_KEY_ENV

    def search(self, query: str, limit: int = config.SEARCH_LIMIT) -> List[ImageCandidate]:
        api_key = self.get_api_key()
        if not api_key:
            return []

        params = {
            "query": query,
            "per_page": limit,
            "orientation": "landscape",
            "content_filter": "high",
        }
        data = self._get_json(config.UNSPLASH_SEARCH_URL, params,
                              headers={"Authorization": f"Client-ID {api_key}"})
        if not data:
            return []

        candidates = []
        for photo in data.get("results") or []:
            try:
                urls = photo.get("urls") or {}
                user = photo.get("user") or {}
                candidates.append(ImageCandidate(
                    title=photo.get("description") or photo.get("alt_description") or query,
                    description=photo.get("alt_description") or "",
                    url=urls.get("regular"),
                    thumb_url=urls.get("small") or "",
                    width=photo.get("width") or 0,
                    height=photo.get("height") or 0,
                    license="Unsplash License",
                    author=user.get("name") or "Unsplash",
                    author_url=(user.get("links") or {}).get("html") or "",
                    provider=self.name,
                    query=query,
                ))
            except (AttributeError, ValueError) as e:
                logging.debug(f"Skipping malformed Unsplash photo: {e}")
        return candidates


class PixabayProvider(ImageSearchProvider):
    """Pixabay: large catalogue, 100 requests per minute."""

    name = ImageProvider.PIXABAY
    api_key_env = config.PIXABAY_API_KEY_ENV

    def search(self, query: str, limit: int = config.SEARCH_LIMIT) -> List[ImageCandidate]:
        api_key = self.get_api_key()
        if not api_key:
            return []

        params = {
            "key": api_key,
            "q": query,
            "per_page": limit,
            "image_type": "photo",
            "orientation": "horizontal",
            "safesearch": "true",
            "min_width": config.MIN_IMAGE_WIDTH,
            "min_height": config.MIN_IMAGE_HEIGHT,
        }
        data = self._get_json(config.PIXABAY_SEARCH_URL, params)
        if not data:
            return []

        candidates = []
        for photo in data.get("hits") or []:
            try:
                candidates.append(ImageCandidate(
                    title=photo.get("tags") or query,
                    description=photo.get("tags") or "",
                    url=photo.get("largeImageURL") or photo.get("webformatURL"),
                    thumb_url=photo.get("previewURL") or "",
                    width=photo.get("imageWidth") or 0,
                    height=photo.get("imageHeight") or 0,
                    license="Pixabay License",
                    author=photo.get("user") or "Pixabay",
                    author_url=f"https://pixabay.com/users/{photo.get('user_id')}/" if photo.get("user_id") else "",
                    provider=self.name,
                    query=query,
                ))
            except (AttributeError, ValueError) as e:
                logging.debug(f"Skipping malformed Pixabay hit: {e}")
        return candidates


class WikimediaProvider(ImageSearchProvider):
    """Wikimedia Commons: keyless fallback, filtered to large raster images."""

    name = ImageProvider.WIKIMEDIA

    def search(self, query: str, limit: int = config.WIKIMEDIA_SEARCH_LIMIT) -> List[ImageCandidate]:
        params = {
            "action": "query",
            "format": "json",
            "generator": "search",
            "gsrnamespace": "6",
            "gsrsearch": query,
            "gsrlimit": limit,
            "prop": "imageinfo",
            "iiprop": "url|size|extmetadata|mime",
            "iiurlwidth": "800",
            "origin": "*",
        }
        data = self._get_json(config.WIKIMEDIA_API_URL, params, headers={"User-Agent": config.USER_AGENT})
        if not data:
            return []

        query_block = data.get("query")
        pages = query_block.get("pages") if isinstance(query_block, dict) else None
        if not isinstance(pages, dict):
            return []

        candidates = []
        for page in pages.values():
            try:
                info = (page.get("imageinfo") or [None])[0]
                if not info:
                    continue

                if file_extension(info.get("url")) not in RASTER_EXTENSIONS:
                    continue
                width = int(info.get("width") or 0)
                height = int(info.get("height") or 0)
                if width < config.MIN_IMAGE_WIDTH or height < config.MIN_IMAGE_HEIGHT:
                    continue

                meta = info.get("extmetadata") or {}
                candidates.append(ImageCandidate(
                    title=(page.get("title") or "").replace("File:", "") or query,
                    description=strip_html((meta.get("ImageDescription") or {}).get("value")),
                    url=info["url"],
                    thumb_url=info.get("thumburl") or info["url"],
                    width=width,
                    height=height,
                    license=(meta.get("LicenseShortName") or {}).get("value") or "CC",
                    author=strip_html((meta.get("Artist") or {}).get("value")) or "Wikimedia",
                    author_url="",
                    provider=self.name,
                    query=query,
                ))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logging.debug(f"Skipping malformed Wikimedia page: {e}")
        return candidates


def default_providers() -> List[ImageSearchProvider]:
    """Returns the providers in cascade priority order."""
    return [PexelsProvider(), UnsplashProvider(), PixabayProvider(), WikimediaProvider()]
