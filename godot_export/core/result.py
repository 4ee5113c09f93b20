"""Result type for explicit error handling.

Every pipeline stage returns ``Ok(value)`` or ``Err(error)`` instead of
raising, so the orchestrator can stop at the first failed stage and map each
stage's error payload into a ``RunError`` in one place.

    decision = parse_base_version(text).and_then(lambda base: resolve(base, tag))
    match decision:
        case Ok(d):
            console.info(d.tag)
        case Err(e):
            console.error(e.message)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, Never, TypeAlias, TypeGuard, TypeVar

__all__ = ["Ok", "Err", "Result", "is_ok", "is_err"]

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: object) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))

    def map_err(self, f: Callable[[Never], object]) -> Ok[T]:
        return self

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chain a step that can itself fail."""
        return f(self.value)


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def unwrap(self) -> Never:
        """Raises ValueError carrying the error; use only where failure is a bug."""
        raise ValueError(f"unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[[Never], object]) -> Err[E]:
        return self

    def map_err(self, f: Callable[[E], F]) -> Err[F]:
        """Wrap a lower-level error in a stage error."""
        return Err(f(self.error))

    def and_then(self, f: Callable[[Never], object]) -> Err[E]:
        return self


Result: TypeAlias = Ok[T] | Err[E]


def is_ok(result: Result[T, E]) -> TypeGuard[Ok[T]]:
    return isinstance(result, Ok)


def is_err(result: Result[T, E]) -> TypeGuard[Err[E]]:
    return isinstance(result, Err)
