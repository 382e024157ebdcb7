"""Shared fixtures: an in-memory transport and icon source."""

import json
import threading
import time

import pytest
from PIL import Image

from iconrequest.config import ServiceConfig
from iconrequest.models.request import UploadItem
from iconrequest.transport import Response

ENDPOINT = "https://stats.example.com/api"
TOKEN = "secret-token"


class FakeTransport:
    """
    Records every call and answers from per-method handlers.

    Handlers may return a Response or raise. PUTs track how many are running
    at once so tests can check the concurrency cap.
    """

    def __init__(self, put_delay: float = 0.0):
        self.calls: list[dict] = []
        self._lock = threading.Lock()
        self.put_delay = put_delay
        self.active_puts = 0
        self.max_active_puts = 0

        self.on_post = lambda url, data, headers: Response(200)
        self.on_get = lambda url, params, headers: Response(
            200, json.dumps({"uploadURL": f"https://uploads.example.com/{params['packageName']}"}).encode()
        )
        self.on_put = lambda url, data, headers: Response(200)

    def _record(self, **call):
        with self._lock:
            self.calls.append(call)

    def calls_for(self, method: str) -> list[dict]:
        with self._lock:
            return [c for c in self.calls if c["method"] == method]

    def post(self, url, data, headers=None):
        self._record(method="POST", url=url, data=data, headers=headers)
        return self.on_post(url, data, headers)

    def get(self, url, headers=None, params=None):
        self._record(method="GET", url=url, params=params, headers=headers)
        return self.on_get(url, params, headers)

    def put(self, url, data, headers=None):
        self._record(method="PUT", url=url, data=data, headers=headers)
        with self._lock:
            self.active_puts += 1
            self.max_active_puts = max(self.max_active_puts, self.active_puts)
        try:
            if self.put_delay:
                time.sleep(self.put_delay)
            return self.on_put(url, data, headers)
        finally:
            with self._lock:
                self.active_puts -= 1

    def close(self):
        pass


class FakeIconSource:
    """Returns a small solid icon for every item except the listed ones."""

    def __init__(self, missing: set[str] | None = None):
        self.missing = missing or set()

    def load_icon(self, item):
        if item.package_name in self.missing:
            return None
        return Image.new("RGBA", (8, 8), (255, 0, 0, 255))


def make_items(count: int) -> list[UploadItem]:
    return [
        UploadItem(
            package_name=f"com.example.app{i}",
            name=f"App {i}",
            activity=f"com.example.app{i}.MainActivity",
        )
        for i in range(count)
    ]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def icon_source():
    return FakeIconSource()


@pytest.fixture
def service():
    return ServiceConfig(endpoint=ENDPOINT, token=TOKEN)
