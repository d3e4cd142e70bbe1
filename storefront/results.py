"""Tagged results returned at collaborator boundaries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class FaultKind(str, Enum):
    SUPPLIER_EMPTY = "supplier_empty"
    SUPPLIER_FAULT = "supplier_fault"
    GATEWAY_FAULT = "gateway_fault"
    MISSING_CREDENTIAL = "missing_credential"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful outcome carrying its value."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Fault:
    """A failed outcome with a kind and human-readable detail."""

    kind: FaultKind
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Fault]
