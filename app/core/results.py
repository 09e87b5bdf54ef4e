"""
서비스 결과 타입

재고 부족, 검증 실패, 상태 전이 거부 등 호출자가 처리해야 하는 정상적인
실패를 값으로 전달합니다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """예상 가능한 실패 유형"""

    VALIDATION = "validation"
    INSUFFICIENT_STOCK = "insufficient_stock"
    CONCURRENCY_CONFLICT = "concurrency_conflict"
    NOT_FOUND = "not_found"
    INVALID_STATE_TRANSITION = "invalid_state_transition"


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """
    서비스 호출 결과

    Attributes:
        value: 성공 시 결과 값
        error: 실패 시 실패 유형 (성공이면 None)
        message: 실패 사유
    """

    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: Optional[T] = None) -> "ServiceResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "ServiceResult[T]":
        return cls(error=error, message=message)
