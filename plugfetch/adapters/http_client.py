"""
Shared HTTP client for platform APIs and downloads.

Every request carries the same fixed User-Agent and nothing else. Each thread
gets its own `requests.Session`, so batch workers never share a connection
pool or cookie jar.
"""
import threading
from typing import Any, Callable, Optional

import requests
from requests.exceptions import HTTPError, RequestException

from plugfetch.internal.constants import (
    CONNECT_TIMEOUT_SECONDS,
    READ_TIMEOUT_SECONDS,
    USER_AGENT_SUFFIX,
)
from plugfetch.internal.logging import get_logger
from plugfetch.kernel.errors import ResolutionDisqualified

logger = get_logger(__name__)


def build_user_agent(app_name: str, app_version: str) -> str:
    return f"{app_name}/{app_version} {USER_AGENT_SUFFIX}"


class ApiClient:
    def __init__(
        self,
        app_name: str,
        app_version: str,
        connect_timeout: float = CONNECT_TIMEOUT_SECONDS,
        read_timeout: float = READ_TIMEOUT_SECONDS,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        self.user_agent = build_user_agent(app_name, app_version)
        self.timeout = (connect_timeout, read_timeout)
        self._session_factory = session_factory
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        """
        The calling thread's session, created on first use.
        """
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            session.headers.clear()
            session.headers["User-Agent"] = self.user_agent
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def get_json(self, url: str, params: Optional[dict] = None) -> Any:
        """
        GET a JSON document.

        Raises ResolutionDisqualified for transport errors, 404, any other
        non-2xx status and bodies that are not JSON.
        """
        try:
            r = self.session.get(url, params=params, timeout=self.timeout)
            if r.status_code == 404:
                raise ResolutionDisqualified(f"not found: {url}")
            r.raise_for_status()
            return r.json()
        except HTTPError as e:
            raise ResolutionDisqualified(f"HTTP {e.response.status_code} from {url}") from e
        except RequestException as e:
            logger.debug("API request failed", url=url, error=str(e))
            raise ResolutionDisqualified(f"request to {url} failed: {e}") from e
        except ValueError as e:
            raise ResolutionDisqualified(f"malformed response from {url}") from e

    def open_stream(self, url: str) -> requests.Response:
        """
        Open a streaming GET. Callers own the returned response.
        """
        r = self.session.get(url, stream=True, timeout=self.timeout)
        try:
            r.raise_for_status()
        except HTTPError:
            r.close()
            raise
        return r

    def release(self) -> None:
        """
        Close the calling thread's session, if it opened one.
        """
        session = getattr(self._local, "session", None)
        if session is None:
            return
        del self._local.session
        with self._lock:
            self._sessions.remove(session)
        session.close()

    def close(self) -> None:
        self._local.__dict__.pop("session", None)
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
