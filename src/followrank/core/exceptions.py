"""Custom exceptions for followrank."""

from __future__ import annotations

from typing import Any


class FollowRankError(Exception):
    """Base exception for all followrank errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class DataSourceError(FollowRankError):
    """Raised when relationship rows cannot be fetched from the store."""

    def __init__(self, message: str, operation: str | None = None) -> None:
        super().__init__(message, details={"operation": operation})
        self.operation = operation


class GraphError(FollowRankError):
    """Raised when graph operations fail."""

    def __init__(
        self,
        message: str,
        node_count: int | None = None,
        edge_count: int | None = None,
    ) -> None:
        super().__init__(
            message,
            details={"node_count": node_count, "edge_count": edge_count},
        )


class PersistenceError(FollowRankError):
    """Raised when writing scores back to the store fails."""

    def __init__(
        self,
        message: str,
        batch_index: int | None = None,
        saved_count: int | None = None,
    ) -> None:
        super().__init__(
            message,
            details={"batch_index": batch_index, "saved_count": saved_count},
        )
        self.batch_index = batch_index
        self.saved_count = saved_count
