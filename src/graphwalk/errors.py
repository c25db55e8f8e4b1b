"""Exception hierarchy for graphwalk.

Store-level failures are raised as :class:`GraphWalkError` subclasses.
Services translate the expected ones (empty table, missing table) into
``ServiceResult`` errors; everything else propagates to the CLI.
"""

from __future__ import annotations

from typing import Any


class GraphWalkError(Exception):
    """Base exception for all graphwalk errors."""

    error_code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message or self.message
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class GraphStoreError(GraphWalkError):
    """The backing store failed (connectivity, I/O, SQL)."""

    error_code = "STORE_ERROR"
    message = "Graph store operation failed"


class TableNotFoundError(GraphWalkError):
    """A vertex or edge table does not exist in the store."""

    error_code = "TABLE_NOT_FOUND"
    message = "Table not found"


class NoSampleRowError(GraphWalkError):
    """The vertex table holds no row to sample a start vertex from."""

    error_code = "NO_SAMPLE_ROW"
    message = "No sample data row key found"


class TableNameConflictError(GraphWalkError):
    """The vertex and edge tables were given the same name."""

    error_code = "TABLE_NAME_CONFLICT"
    message = "Vertex and edge tables must be different tables"
