"""Error taxonomy for sovereign-identity.

Every failure raised by the store, the detail ledger, or the wire codec is a
:class:`SovereignError`. Each subclass also derives from the closest builtin
exception so callers that only know about ``KeyError`` / ``ValueError`` /
``PermissionError`` keep working.

All errors are terminal: nothing in this package retries. When one of these
is raised the target record has not been modified.
"""
from __future__ import annotations


class SovereignError(Exception):
    """Base class for all sovereign-identity errors.

    Attributes
    ----------
    code:
        Stable machine-readable identifier, used by the HTTP server and CLI.
    """

    code: str = "sovereign_error"


class AlreadyExists(SovereignError, ValueError):
    """Raised when an identity is created twice for the same owner."""

    code = "already_exists"

    def __init__(self, owner: object) -> None:
        self.owner = owner
        super().__init__(f"Identity already exists for owner {str(owner)!r}.")


class NotFound(SovereignError, KeyError):
    """Raised when an operation targets a record that does not exist."""

    code = "not_found"

    def __init__(self, what: str, key: object) -> None:
        self.what = what
        self.key = key
        super().__init__(f"{what} {str(key)!r} not found.")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class OwnerMismatch(SovereignError, PermissionError):
    """Raised when a non-owner tries to change an authority pointer."""

    code = "owner_mismatch"

    def __init__(self, caller: object, owner: object) -> None:
        self.caller = caller
        self.owner = owner
        super().__init__(
            f"Caller {str(caller)!r} is not the owner of identity {str(owner)!r}."
        )


class Unauthorized(SovereignError, PermissionError):
    """Raised when a score or detail write comes from the wrong authority."""

    code = "unauthorized"

    def __init__(self, caller: object, dimension: object) -> None:
        self.caller = caller
        self.dimension = dimension
        label = getattr(dimension, "value", dimension)
        super().__init__(
            f"Caller {str(caller)!r} is not the {label} authority for this identity."
        )


class InvalidScore(SovereignError, ValueError):
    """Raised when a submitted score is not an integer in [0, 10000]."""

    code = "invalid_score"

    def __init__(self, score: object) -> None:
        self.score = score
        super().__init__(f"Invalid score {score!r}: must be an integer between 0 and 10000.")


class InvalidAuthority(SovereignError, ValueError):
    """Raised when the all-zero principal is proposed as a dimension authority."""

    code = "invalid_authority"

    def __init__(self, authority: object) -> None:
        self.authority = authority
        super().__init__(
            f"Invalid authority {str(authority)!r}: cannot delegate to the zero principal."
        )


class InvalidMetrics(SovereignError, ValueError):
    """Raised when detail metrics do not match the dimension's schema."""

    code = "invalid_metrics"


class WireFormatError(SovereignError, ValueError):
    """Raised when raw record bytes cannot be decoded."""

    code = "wire_format"


__all__ = [
    "AlreadyExists",
    "InvalidAuthority",
    "InvalidMetrics",
    "InvalidScore",
    "NotFound",
    "OwnerMismatch",
    "SovereignError",
    "Unauthorized",
    "WireFormatError",
]
