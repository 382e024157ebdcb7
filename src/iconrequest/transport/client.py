"""Pooled HTTP client shared by every upload in a submission."""

from dataclasses import dataclass
from typing import Any

import requests
from requests.adapters import HTTPAdapter

from iconrequest.config import TransportConfig
from iconrequest.errors import TransportFailure


@dataclass(frozen=True)
class Response:
    """Status and body of a completed HTTP call."""

    status_code: int
    content: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


class Transport:
    """
    Thin wrapper over a ``requests.Session``.

    The session's connection pool is safe to share between worker threads.
    Network errors are raised as ``TransportFailure``; any HTTP status,
    including 4xx/5xx, is returned as a ``Response``.
    """

    def __init__(self, config: TransportConfig | None = None, session: requests.Session | None = None):
        self.config = config or TransportConfig()
        self.session = session or self._build_session(self.config)

    @staticmethod
    def _build_session(config: TransportConfig) -> requests.Session:
        session = requests.Session()
        # No retries: a failed call is final
        adapter = HTTPAdapter(
            pool_connections=config.pool_maxsize,
            pool_maxsize=config.pool_maxsize,
            max_retries=0,
        )
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session

    @property
    def timeout(self) -> tuple[float, float]:
        return (self.config.connect_timeout, self.config.read_timeout)

    def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        data: bytes | str | None = None,
    ) -> Response:
        """Issue a request and return its status and body."""
        try:
            resp = self.session.request(
                method,
                url,
                headers=headers,
                params=params,
                data=data,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportFailure(str(e)) from e

        return Response(status_code=resp.status_code, content=resp.content)

    def get(self, url: str, headers: dict[str, str] | None = None, params: dict[str, Any] | None = None) -> Response:
        return self.request("GET", url, headers=headers, params=params)

    def post(self, url: str, data: bytes | str, headers: dict[str, str] | None = None) -> Response:
        return self.request("POST", url, headers=headers, data=data)

    def put(self, url: str, data: bytes, headers: dict[str, str] | None = None) -> Response:
        return self.request("PUT", url, headers=headers, data=data)

    def close(self):
        self.session.close()
