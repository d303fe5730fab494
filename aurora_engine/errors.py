"""
Engine error types.

Only two conditions are errors. Out-of-range readings and missing optional
signals are normalized or defaulted, never raised.

  ``InvalidWindow``: a raw window has a missing or unparsable timestamp.
                      Callers should drop that window and keep going.
  ``EmptyHorizon`` : no windows were supplied at all (caller error).
"""

from __future__ import annotations

from typing import Any, Optional


class AuroraEngineError(Exception):
    """Base class for all errors raised by the decision engine."""


class InvalidWindow(AuroraEngineError, ValueError):
    """Raised when a raw window's timestamp is missing or cannot be parsed.

    Attributes:
        timestamp: The offending timestamp value as received (may be ``None``).
        index:     Position of the window in its horizon, when known.
    """

    def __init__(
        self,
        timestamp: Any,
        reason: str,
        index: Optional[int] = None,
    ) -> None:
        self.timestamp = timestamp
        self.index     = index
        where = f" at index {index}" if index is not None else ""
        super().__init__(f"Invalid window{where}: {reason} (timestamp={timestamp!r}).")


class EmptyHorizon(AuroraEngineError, ValueError):
    """Raised when a horizon with zero windows is scanned or decided."""

    def __init__(self, message: str = "Cannot compute a decision for an empty horizon.") -> None:
        super().__init__(message)
