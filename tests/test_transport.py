"""Tests for the requests-backed transport."""

from unittest.mock import MagicMock

import pytest
import requests

from iconrequest.config import TransportConfig
from iconrequest.errors import TransportFailure
from iconrequest.transport import Response, Transport


@pytest.fixture
def session():
    session = MagicMock(spec=requests.Session)
    session.request.return_value = MagicMock(status_code=201, content=b'{"ok": true}')
    return session


class TestTransport:
    """Tests for Transport."""

    def test_passes_timeouts(self, session):
        transport = Transport(TransportConfig(connect_timeout=5, read_timeout=7), session=session)

        transport.get("https://x.example/a", headers={"Accept": "*/*"}, params={"q": "1"})

        session.request.assert_called_once_with(
            "GET",
            "https://x.example/a",
            headers={"Accept": "*/*"},
            params={"q": "1"},
            data=None,
            timeout=(5, 7),
        )

    def test_returns_status_and_body(self, session):
        response = Transport(session=session).post("https://x.example/a", data=b"[]")

        assert response == Response(201, b'{"ok": true}')
        assert response.ok
        assert response.text == '{"ok": true}'

    def test_error_status_is_not_raised(self, session):
        session.request.return_value = MagicMock(status_code=503, content=b"")

        response = Transport(session=session).put("https://x.example/a", data=b"\x89PNG")

        assert not response.ok
        assert response.status_code == 503

    def test_network_error_becomes_transport_failure(self, session):
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(TransportFailure, match="refused"):
            Transport(session=session).get("https://x.example/a")

    def test_default_session_is_pooled(self):
        transport = Transport(TransportConfig(pool_maxsize=4))
        adapter = transport.session.get_adapter("https://x.example")

        assert adapter._pool_maxsize == 4
        transport.close()
