"""
Core — Constants

Shared identifiers used across apps: audit actions, pagination bounds,
stock status labels.

@file core/constants.py
"""

# ---------------------------------------------------------------------------
# Audit actions (mirror AuditLog.ActionChoices)
# ---------------------------------------------------------------------------

AUDIT_ACTION_CREATE = 'CREATE'
AUDIT_ACTION_UPDATE = 'UPDATE'
AUDIT_ACTION_STATUS_CHANGE = 'STATUS_CHANGE'
AUDIT_ACTION_ADMIN_FLAG = 'ADMIN_FLAG'
AUDIT_ACTION_LOGIN = 'LOGIN'
AUDIT_ACTION_LOGIN_FAILED = 'LOGIN_FAILED'


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 200


# ---------------------------------------------------------------------------
# Stock status
# ---------------------------------------------------------------------------

STOCK_STATUS_HEALTHY = 'healthy'
STOCK_STATUS_ZERO = 'zero'
STOCK_STATUS_NEGATIVE = 'negative'


# ---------------------------------------------------------------------------
# Ledger notes & idempotency namespaces
# ---------------------------------------------------------------------------

UNDO_NOTE_PREFIX = 'Undo of '
ADJUSTMENT_NOTE_PREFIX = 'Stock adjustment: '
ADJUSTMENT_KEY_PREFIX = 'adj:'
UNDO_KEY_PREFIX = 'undo:'
