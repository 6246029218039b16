from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")

class ErrorKind(str, enum.Enum):
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"
    INVENTORY_ERROR = "INVENTORY_ERROR"
    INVALID_INPUT = "INVALID_INPUT"

@dataclass(frozen=True)
class Result(Generic[T]):
    ok: bool
    message: str
    value: Optional[T] = None
    kind: Optional[ErrorKind] = None
    code: str = ""

def ok(value: T, msg: str = "") -> Result[T]:
    return Result(ok=True, message=msg, value=value)

def err(kind: ErrorKind, msg: str, code: str = "") -> Result[Any]:
    return Result(ok=False, message=msg, kind=kind, code=code or kind.value)
