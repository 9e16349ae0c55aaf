"""Integration tests for the explorer HTTP transport."""

import itertools
import threading

import pytest
import requests
import responses

from contract_verifier import ExplorerRejectedError, VerificationTimeoutError
from contract_verifier.transport import ExplorerTransport

URL = "https://x/api"


class TestRequest:
    """Test decoding of explorer answers."""

    @responses.activate
    def test_json_body(self):
        """Test that JSON answers are decoded."""
        responses.add(responses.POST, URL, json={"status": "1", "result": "guid"}, status=200)

        body = ExplorerTransport(timeout=5).request("POST", URL, data={"a": "b"})

        assert body == {"status": "1", "result": "guid"}

    @responses.activate
    def test_text_body(self):
        """Test that non-JSON answers come back as text."""
        responses.add(responses.GET, URL, body="queued", status=200)

        assert ExplorerTransport(timeout=5).request("GET", URL) == "queued"

    @responses.activate
    def test_large_body_within_deadline(self):
        """Test that a multi-chunk answer is read in full."""
        payload = "a" * 50000
        responses.add(responses.GET, URL, body=payload, status=200)

        assert ExplorerTransport(timeout=5).request("GET", URL) == payload

    @responses.activate
    def test_non_2xx_is_rejection(self):
        """Test that error statuses raise with the status code and message."""
        responses.add(responses.POST, URL, body="Contract source code already verified", status=400)

        with pytest.raises(ExplorerRejectedError, match="already verified") as exc_info:
            ExplorerTransport(timeout=5).request("POST", URL)

        assert exc_info.value.status_code == 400


class TestDeadline:
    """Test that the timeout bounds the whole call."""

    @responses.activate
    def test_slow_body_exceeds_deadline(self):
        """Test that reading past the deadline raises a timeout."""
        responses.add(responses.GET, URL, body="a" * 50000, status=200)
        ticks = itertools.count(0, 100)
        transport = ExplorerTransport(timeout=15, clock=lambda: next(ticks))

        with pytest.raises(VerificationTimeoutError, match="15"):
            transport.request("GET", URL)

    @responses.activate
    def test_deadline_error_is_timeout_error(self):
        """Test that the deadline error can be caught as TimeoutError."""
        responses.add(responses.GET, URL, body="slow", status=200)
        ticks = itertools.count(0, 100)
        transport = ExplorerTransport(timeout=1, clock=lambda: next(ticks))

        with pytest.raises(TimeoutError):
            transport.request("GET", URL)


class TestSessions:
    """Test session handling across threads."""

    def _session_from_thread(self, transport):
        seen = []
        worker = threading.Thread(target=lambda: seen.append(transport.session))
        worker.start()
        worker.join()
        return seen[0]

    def test_one_session_per_thread(self):
        """Test that each thread gets its own session."""
        transport = ExplorerTransport(timeout=5)

        main_session = transport.session

        assert transport.session is main_session
        assert self._session_from_thread(transport) is not main_session

    def test_given_session_is_shared(self):
        """Test that an explicit session is used by every thread."""
        session = requests.Session()
        transport = ExplorerTransport(timeout=5, session=session)

        assert transport.session is session
        assert self._session_from_thread(transport) is session

    def test_close_closes_thread_sessions(self, monkeypatch):
        """Test that close releases every session the transport created."""
        closed = []
        monkeypatch.setattr(requests.Session, "close", lambda self: closed.append(self))
        transport = ExplorerTransport(timeout=5)
        sessions = {id(transport.session), id(self._session_from_thread(transport))}

        transport.close()

        assert {id(session) for session in closed} == sessions
