from __future__ import annotations

"""
Domain Constants.

Centralizes labels of the reachability document, the node-kind vocabulary
shared by references and decoders, and the reason codes attached to
unhandled actions.
"""

APP_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# OUTPUT DOCUMENT LABELS
# -----------------------------------------------------------------------------

ROOT_NAME = "User Roles"
HOME_SCREEN_LEAF = "ShowHomepage"
PATH_SEPARATOR = ","

DEFAULT_OUTPUT_FILE = "reachability.json"

# -----------------------------------------------------------------------------
# NODE KINDS (lazy reference targets)
# -----------------------------------------------------------------------------

KIND_SCREEN = "screen"
KIND_WORKFLOW = "workflow"
KIND_FRAGMENT = "fragment"
KIND_ENTITY = "entity"

# Only steps of this kind can navigate or call other workflows
ACTIVITY_STEP = "action_activity"

# -----------------------------------------------------------------------------
# UNHANDLED ACTION REASONS
# -----------------------------------------------------------------------------

REASON_NO_ACTION = "no-action"
REASON_DROPDOWN = "dropdown-button"
REASON_CREATE_DENIED = "create-denied"
REASON_POLICY_GAP = "policy-gap"
REASON_INCOMPLETE_NEW_BUTTON = "incomplete-new-button"
REASON_UNSUPPORTED_ACTION = "unsupported-action"
REASON_UNSUPPORTED_ELEMENT = "unsupported-element"
