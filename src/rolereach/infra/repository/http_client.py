from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from rolereach.domain.errors import ModelDecodeError, ResolutionError, SecurityLoadError
from rolereach.domain.model_nodes import NavigationDocument, NodeRef, ProjectSecurity, Role, Unit
from rolereach.infra.repository.base import ModelRepository
from rolereach.infra.repository.codec import decode_navigation, decode_security, decode_unit
from rolereach.infra.repository.common import DEFAULT_TIMEOUT, HEADER_KEY, HEADER_USER, USER_AGENT

logger = logging.getLogger(__name__)


class HttpModelRepository(ModelRepository):
    """
    Model repository served by a remote model REST service.

    Endpoints (relative to `api_url`):
        GET /projects/{project_id}/security
        GET /projects/{project_id}/navigation
        GET /projects/{project_id}/units/{kind}/{qualified_name}

    Every request carries the revision (-1 for latest) and branch (empty
    for mainline) as query parameters. Sessions are kept per thread because
    requests.Session is not guaranteed to be thread-safe.
    """

    def __init__(
            self,
            api_url: str,
            project_id: str,
            username: str = "",
            api_key: str = "",
            revision: int = -1,
            branch: str = "",
            timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._base = f"{api_url.rstrip('/')}/projects/{quote(project_id, safe='')}"
        self._headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if username:
            self._headers[HEADER_USER] = username
        if api_key:
            self._headers[HEADER_KEY] = api_key
        self._params: Dict[str, Any] = {"revision": revision}
        if branch:
            self._params["branch"] = branch
        self._timeout = timeout
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    # -------------------------------------------------------------------------
    # ModelRepository API
    # -------------------------------------------------------------------------

    def fetch_security_model(self) -> ProjectSecurity:
        try:
            data = self._get_json("/security")
        except ResolutionError as e:
            raise SecurityLoadError(f"Failed to load security: {e}") from e

        security = decode_security(data)
        logger.info(f"Network: loaded security with {len(security.user_roles)} user roles.")
        return security

    def fetch_navigation(self, role: Role) -> Optional[NavigationDocument]:
        return decode_navigation(self._get_json("/navigation", allow_missing=True))

    def resolve(self, ref: NodeRef) -> Unit:
        path = f"/units/{ref.kind}/{quote(ref.qualified_name, safe='')}"
        try:
            data = self._get_json(path, allow_missing=True)
        except ResolutionError as e:
            raise type(e)(str(e), ref) from e
        if data is None:
            raise ResolutionError(f"Dangling reference: {ref} was not found.", ref)
        return decode_unit(ref, data)

    def close(self) -> None:
        with self._sessions_lock:
            for session in self._sessions:
                session.close()
            self._sessions.clear()

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self._headers)
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def _get_json(self, path: str, allow_missing: bool = False) -> Any:
        """
        GET a JSON document.

        Returns None on 404 when `allow_missing` is set; the caller decides
        what a missing document means.

        Raises:
            ResolutionError: Transport failure, timeout or non-2xx status.
            ModelDecodeError: Body is not JSON.
        """
        url = self._base + path
        logger.debug(f"Network: GET {url}")

        try:
            response = self._session().get(url, params=self._params, timeout=self._timeout)
        except requests.exceptions.Timeout as e:
            raise ResolutionError(f"Request to {url} timed out after {self._timeout}s.") from e
        except requests.exceptions.RequestException as e:
            raise ResolutionError(f"Communication error with {url}: {e}") from e

        if response.status_code == 404:
            if allow_missing:
                return None
            raise ResolutionError(f"Resource not found: {url}")

        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise ResolutionError(f"Model service rejected {url}: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise ModelDecodeError(f"Response from {url} is not valid JSON: {e}") from e
