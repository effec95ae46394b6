"""Success/failure container returned by repository collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from ..errors import PersistenceError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, value: T = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException | str) -> "Result[T]":
        if isinstance(error, str):
            error = PersistenceError(error)
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return str(self.error) if self.error is not None else ""

    def unwrap(self) -> T:
        """Return the value or raise ``PersistenceError`` carrying the failure."""

        if self.error is None:
            return self.value  # type: ignore[return-value]
        if isinstance(self.error, PersistenceError):
            raise self.error
        raise PersistenceError(str(self.error) or type(self.error).__name__, cause=self.error) from self.error
