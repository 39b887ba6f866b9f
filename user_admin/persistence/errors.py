"""
Translation of storage-engine errors into a small set of kinds
the service layer can reason about.

Only the signals listed here are recognised; anything else is
reported as ``None`` and must be propagated by the caller.
"""

import enum
from typing import Optional

from sqlalchemy.exc import IntegrityError, NoResultFound

# PostgreSQL SQLSTATE for unique_violation
PG_UNIQUE_VIOLATION = "23505"


class StorageErrorKind(str, enum.Enum):
    UNIQUE_VIOLATION = "unique_violation"
    RECORD_NOT_FOUND = "record_not_found"


def _sqlstate(exc: IntegrityError) -> Optional[str]:
    orig = exc.orig
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    return None


def _is_unique(exc: IntegrityError) -> bool:
    if _sqlstate(exc) == PG_UNIQUE_VIOLATION:
        return True
    # SQLite: "UNIQUE constraint failed: users.email"
    return "UNIQUE constraint failed" in str(exc.orig)


def classify_storage_error(exc: BaseException) -> Optional[StorageErrorKind]:
    """
    Map a storage-layer exception to a :class:`StorageErrorKind`.

    Returns ``None`` for errors that have no domain meaning.
    """
    if isinstance(exc, IntegrityError) and _is_unique(exc):
        return StorageErrorKind.UNIQUE_VIOLATION

    if isinstance(exc, NoResultFound):
        return StorageErrorKind.RECORD_NOT_FOUND

    return None


def is_unique_violation(exc: BaseException, column: str) -> bool:
    """
    True when ``exc`` is a unique violation involving ``column``.

    PostgreSQL names the column in the constraint/detail text
    (``ix_users_email``, ``Key (email)=...``), SQLite as
    ``users.email``.
    """
    if classify_storage_error(exc) is not StorageErrorKind.UNIQUE_VIOLATION:
        return False

    orig = exc.orig
    haystack = " ".join(
        str(part)
        for part in (
            orig,
            getattr(orig, "constraint_name", None),
            getattr(getattr(orig, "__cause__", None), "constraint_name", None),
            getattr(getattr(orig, "__cause__", None), "detail", None),
        )
        if part
    )
    return column in haystack
