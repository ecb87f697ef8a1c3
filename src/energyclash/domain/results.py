"""Typed outcomes returned by domain operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from energyclash.domain.enums import ErrorKind

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class GameError:
    """A rejected action. ``kind`` is stable, ``message`` is for humans."""

    kind: ErrorKind
    message: str


@dataclass(slots=True)
class ActionResult(Generic[T]):
    """Either a value or a :class:`GameError`, never both."""

    value: T | None = None
    error: GameError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> ActionResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> ActionResult[T]:
        return cls(error=GameError(kind=kind, message=message))

    def unwrap(self) -> T:
        """Return the value, raising ``ValueError`` if the action failed."""

        if self.error is not None:
            raise ValueError(f"{self.error.kind}: {self.error.message}")
        return self.value  # type: ignore[return-value]
