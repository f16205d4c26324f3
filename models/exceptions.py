"""
Exceptions raised by the forecasting engine.

Single-item operations raise these directly; bulk operations convert them to
ForecastError values so one failing product never aborts its siblings.
"""

from __future__ import annotations

from dataclasses import dataclass

from .enums import ErrorKind


class ForecastEngineError(Exception):
    """Base class for all engine errors."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str, product_id: str | None = None):
        super().__init__(message)
        self.product_id = product_id


class NotFoundError(ForecastEngineError):
    """The requested product does not exist in the catalog."""

    kind = ErrorKind.NOT_FOUND


class InvalidInputError(ForecastEngineError):
    """Input failed validation (non-positive horizon, negative price or stock, bad config)."""

    kind = ErrorKind.INVALID_INPUT


class CollaboratorUnavailableError(ForecastEngineError):
    """A collaborator timed out or raised while serving a request."""

    kind = ErrorKind.COLLABORATOR_UNAVAILABLE

    def __init__(
        self, message: str, collaborator: str, product_id: str | None = None
    ):
        super().__init__(message, product_id)
        self.collaborator = collaborator


@dataclass(frozen=True)
class ForecastError:
    """Error value recorded per item in bulk results."""

    kind: ErrorKind
    message: str
    product_id: str | None = None

    @classmethod
    def from_exception(
        cls, exc: Exception, product_id: str | None = None
    ) -> ForecastError:
        if isinstance(exc, ForecastEngineError):
            return cls(exc.kind, str(exc), exc.product_id or product_id)
        return cls(
            ErrorKind.INTERNAL,
            f"{type(exc).__name__}: {exc}",
            product_id,
        )
