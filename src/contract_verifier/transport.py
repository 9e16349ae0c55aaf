"""HTTP transport for explorer calls in contract-verifier library."""

import json as jsonlib
import threading
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from .constants import DEFAULT_TIMEOUT
from .exceptions import ExplorerRejectedError, TransportError, VerificationTimeoutError

_CHUNK_SIZE = 8192


class ExplorerTransport:
    """
    Performs explorer HTTP calls with a fixed timeout.

    The timeout bounds the whole call: requests applies it to connecting and
    to each socket read, and the body is read in chunks against an overall
    deadline so a slowly trickling answer cannot outlive it by more than one
    read. Each thread gets its own requests.Session unless a session is given.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the transport.

        Args:
            timeout: Seconds allowed per call
            session: requests session shared by every call (one per thread if None)
            clock: Monotonic clock used for the overall deadline
        """
        self.timeout = timeout
        self._shared_session = session
        self._clock = clock
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        """Session used by the calling thread."""
        if self._shared_session is not None:
            return self._shared_session

        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """
        Issue one HTTP call and decode the answer.

        Args:
            method: HTTP method ("GET" or "POST")
            url: Target URL
            params: Query string parameters
            data: Form body
            json: JSON body

        Returns:
            Decoded JSON body, or the raw text if the body is not JSON

        Raises:
            VerificationTimeoutError: If the call exceeds the timeout
            TransportError: If a network error occurs
            ExplorerRejectedError: If the explorer answers with a non-2xx status
        """
        deadline = self._clock() + self.timeout
        try:
            with self.session.request(
                method,
                url,
                params=params,
                data=data,
                json=json,
                timeout=self.timeout,
                stream=True,
            ) as response:
                content = self._read_body(response, deadline, method, url)
        except requests.Timeout as e:
            raise VerificationTimeoutError(
                f"{method} {url} timed out after {self.timeout}s"
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"Network error during {method} {url}: {e}") from e

        text = content.decode(response.encoding or "utf-8", errors="replace")

        if not response.ok:
            raise ExplorerRejectedError(
                f"{method} {url} failed with status {response.status_code}: {text[:500]}",
                status_code=response.status_code,
            )

        try:
            return jsonlib.loads(text)
        except ValueError:
            return text

    def _read_body(
        self, response: requests.Response, deadline: float, method: str, url: str
    ) -> bytes:
        chunks = []
        for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
            chunks.append(chunk)
            if self._clock() > deadline:
                raise VerificationTimeoutError(
                    f"{method} {url} did not finish within {self.timeout}s"
                )
        return b"".join(chunks)

    def close(self) -> None:
        if self._shared_session is not None:
            self._shared_session.close()
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
