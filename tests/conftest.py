# conftest.py
#
# Description:
# Shared fixtures: fake HTTP responses, scripted providers and a recording
# sleep so no test touches the network or actually waits.

from typing import Callable, Dict, List, Optional

import pytest
import requests

from image_providers import ImageSearchProvider
from models import ImageCandidate, ImageProvider


class FakeResponse:
    """The small part of requests.Response the application uses."""

    def __init__(self, status_code: int = 200, json_data=None, content: bytes = b""):
        self.status_code = status_code
        self._json_data = json_data
        self.content = content

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON object could be decoded")
        return self._json_data

    def raise_for_status(self):
        if not self.ok:
            raise requests.exceptions.HTTPError(f"HTTP {self.status_code}")


class ScriptedProvider(ImageSearchProvider):
    """A provider whose results are looked up per query, recording every call."""

    def __init__(self, name: ImageProvider, results_by_query: Optional[Dict[str, List[ImageCandidate]]] = None,
                 default: Optional[List[ImageCandidate]] = None, configured: bool = True):
        self.name = name
        self.results_by_query = results_by_query or {}
        self.default = default or []
        self.configured = configured
        self.calls: List[str] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    def search(self, query: str, limit: int = 15) -> List[ImageCandidate]:
        self.calls.append(query)
        results = self.results_by_query.get(query, self.default)
        # Fresh copies, as a real provider builds new objects on every call
        return [c.model_copy() for c in results]


def make_candidate(url: str, title: str = "", provider: ImageProvider = ImageProvider.PEXELS,
                   width: int = 1600, height: int = 1067, **kwargs) -> ImageCandidate:
    return ImageCandidate(url=url, title=title, provider=provider, width=width, height=height,
                          license=kwargs.pop("license", "Pexels License"),
                          author=kwargs.pop("author", "Jane Doe"), **kwargs)


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def no_sleep(sleeps) -> Callable[[float], None]:
    return sleeps.append


@pytest.fixture
def clear_provider_keys(monkeypatch):
    for name in ("PEXELS_API_KEY", "UNSPLASH_ACCESS_KEY", "PIXABAY_API_KEY"):
        monkeypatch.delenv(name, raising=False)
