"""
Module: exceptions

Purpose: Domain-specific exception hierarchy for the scroll visualization.

All exceptions include context information and should be raised instead of returning None.
"""

from typing import Any


class ScrollVisError(Exception):
    """Base exception for all scroll visualization errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = dict(context or {})
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


class DataLoadError(ScrollVisError):
    """Raised when the input table cannot be loaded or yields no usable data."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if path is not None:
            ctx["path"] = path
        super().__init__(message, context=ctx)
        self.path = path


class DataValidationError(ScrollVisError):
    """Raised when a single input row fails parsing or validation."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        row: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if field is not None:
            ctx["field"] = field
        if value is not None:
            ctx["value"] = value
        if row is not None:
            ctx["row"] = row
        super().__init__(message, context=ctx)
        self.field = field
        self.value = value
        self.row = row


class InvalidSectionIndexError(ScrollVisError):
    """Raised when a section index outside the known sections is activated."""

    def __init__(
        self,
        message: str,
        *,
        index: int,
        section_count: int,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        ctx["index"] = index
        ctx["section_count"] = section_count
        super().__init__(message, context=ctx)
        self.index = index
        self.section_count = section_count


class ReconciliationError(ScrollVisError):
    """Raised when a data join cannot be computed for the target records."""

    def __init__(
        self,
        message: str,
        *,
        duplicate_keys: list[str] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if duplicate_keys is not None:
            ctx["duplicate_keys"] = duplicate_keys
        super().__init__(message, context=ctx)
        self.duplicate_keys = duplicate_keys or []


class RenderError(ScrollVisError):
    """Raised when essay HTML or SVG output cannot be produced."""

    def __init__(
        self,
        message: str,
        *,
        output: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if output is not None:
            ctx["output"] = output
        super().__init__(message, context=ctx)
        self.output = output
