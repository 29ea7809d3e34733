"""Explicit success/failure wrapper for read paths."""

from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, Field

from src.utils.errors import SupabaseError

T = TypeVar("T")


class FetchError(BaseModel):
    """A store read that failed (network, PostgREST or validation error)."""
    operation: str = Field(..., description="Logical operation, e.g. resolve_listings")
    table: Optional[str] = None
    message: str


class Result(BaseModel, Generic[T]):
    """Either a value or a FetchError, so "no rows" and "query failed" differ."""
    value: Optional[T] = None
    error: Optional[FetchError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, operation: str, message: str, table: Optional[str] = None) -> "Result[T]":
        return cls(error=FetchError(operation=operation, table=table, message=message))

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_empty(self) -> bool:
        """Successful and without rows."""
        return self.ok and not self.value

    def unwrap(self) -> T:
        if self.error is not None:
            raise SupabaseError(f"{self.error.operation} failed: {self.error.message}")
        return self.value

    def rows_or_empty(self) -> list:
        """Page-rendering fallback: failure degrades to no rows."""
        if self.error is not None or self.value is None:
            return []
        return self.value
