"""
Uniform result wrapper for every remote call.

Higher layers branch on ``success`` only; transport exceptions never escape
the ApiClient.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from ireporter.core.errors import ErrorCode, IReporterError

T = TypeVar("T")


@dataclass
class Envelope(Generic[T]):
    """Outcome of a remote or client-side operation."""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: Optional[ErrorCode] = None
    status_code: Optional[int] = None

    @classmethod
    def ok(cls, data: Optional[T] = None, status_code: Optional[int] = None) -> "Envelope[T]":
        return cls(success=True, data=data, status_code=status_code)

    @classmethod
    def fail(
        cls,
        error: str,
        code: ErrorCode = ErrorCode.SERVER_ERROR,
        status_code: Optional[int] = None
    ) -> "Envelope[T]":
        return cls(success=False, error=error, code=code, status_code=status_code)

    @classmethod
    def from_error(cls, exc: IReporterError) -> "Envelope[T]":
        """Convert a client-side error caught at an operation boundary."""
        return cls(success=False, error=exc.message, code=exc.code)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success}
        if self.success:
            result["data"] = self.data
        else:
            result["error"] = self.error
            result["code"] = self.code.value if self.code else None
        return result
