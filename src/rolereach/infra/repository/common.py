from __future__ import annotations

from rolereach.domain.constants import APP_VERSION

USER_AGENT = f"RoleReach-Client/{APP_VERSION}"
DEFAULT_TIMEOUT = 10

HEADER_USER = "X-Api-User"
HEADER_KEY = "X-Api-Key"
