"""
Explicit outcome values returned by the document store collaborators.

Fetch helpers never raise into the ranking code; they hand back either a
Success carrying the value or a Failure carrying a readable reason.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    ok: bool = True


@dataclass(frozen=True)
class Failure:
    reason: str
    ok: bool = False


FetchOutcome = Union[Success[T], Failure]


def success(value: T) -> Success[T]:
    return Success(value=value)


def failure(reason: str) -> Failure:
    return Failure(reason=reason)
