from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, eq=False)
class AppError(Exception):
    message: str
    error: str
    http_status: int
    extra: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


class ValidationError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(message=message, error="Service Validation Exception", http_status=400)


class NotFoundError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(message=message, error="Resource Not Found", http_status=404)


class RateLimitedError(AppError):
    def __init__(self, retry_after_seconds: int) -> None:
        super().__init__(
            message="rate limit exceeded",
            error="Too Many Requests",
            http_status=429,
            extra={"retry_after_seconds": retry_after_seconds},
        )
