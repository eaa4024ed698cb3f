from __future__ import annotations

"""
Snapshot Model Repository.

Serves the application model from a JSON export on disk. The file is read
once, on first access; unit documents are decoded on every resolve, so the
traversal sees the same lazy-loading contract as with the remote service.
"""

import json
import logging
import threading
from typing import Any, Dict, Optional

from rolereach.domain.errors import ModelDecodeError, ResolutionError, SecurityLoadError
from rolereach.domain.model_nodes import NavigationDocument, NodeRef, ProjectSecurity, Role, Unit
from rolereach.infra.repository.base import ModelRepository
from rolereach.infra.repository.codec import decode_navigation, decode_security, decode_unit

logger = logging.getLogger(__name__)


class SnapshotRepository(ModelRepository):
    """Model repository backed by a JSON snapshot file or an in-memory document."""

    def __init__(self, path: str = "", document: Optional[Dict[str, Any]] = None) -> None:
        self._path = path
        self._document = document
        self._lock = threading.Lock()

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "SnapshotRepository":
        return cls(path="<memory>", document=document)

    # -------------------------------------------------------------------------
    # ModelRepository API
    # -------------------------------------------------------------------------

    def fetch_security_model(self) -> ProjectSecurity:
        try:
            document = self._load()
        except ResolutionError as e:
            raise SecurityLoadError(f"Failed to load security: {e}") from e

        security = decode_security(document.get("security"))
        logger.info(f"Snapshot: loaded security with {len(security.user_roles)} user roles.")
        return security

    def fetch_navigation(self, role: Role) -> Optional[NavigationDocument]:
        return decode_navigation(self._load().get("navigation"))

    def resolve(self, ref: NodeRef) -> Unit:
        units = self._load().get("units")
        if units is None:
            units = {}
        if not isinstance(units, dict):
            raise ModelDecodeError("Snapshot 'units' must be an object keyed by qualified name.", ref)

        data = units.get(ref.qualified_name)
        if data is None:
            raise ResolutionError(f"Dangling reference: {ref} is not in the snapshot.", ref)
        return decode_unit(ref, data)

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _load(self) -> Dict[str, Any]:
        """Read and cache the snapshot document (thread-safe, first call only)."""
        with self._lock:
            if self._document is None:
                logger.debug(f"Snapshot: reading {self._path}")
                try:
                    with open(self._path, "r", encoding="utf-8") as f:
                        data = json.load(f)
                except OSError as e:
                    raise ResolutionError(f"Cannot read snapshot '{self._path}': {e}") from e
                except ValueError as e:
                    raise ModelDecodeError(f"Snapshot '{self._path}' is not valid JSON: {e}") from e

                if not isinstance(data, dict):
                    raise ModelDecodeError(f"Snapshot '{self._path}' root must be an object.")
                self._document = data
            return self._document
