# services/errors.py
"""
Errors raised by the service layer.

Every error carries the HTTP status the API answers with; the
app-level error handler replies with ``e.to_dict(), e.status``.
"""
from __future__ import annotations

from typing import Any, Dict


class PortalError(Exception):
    status = 400

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        data = {"msg": self.message}
        data.update(self.extra)
        return data


# ---- draft editing ----
class UnknownField(PortalError):
    pass


class FloorReached(PortalError):
    pass


class UnknownSlot(PortalError):
    status = 404


# ---- submission ----
class DraftInvalid(PortalError):
    def __init__(self, errors: Dict[str, str], message: str = "Please fill in all required fields correctly."):
        super().__init__(message, errors=errors)
        self.errors = errors


class ReferenceInvalid(PortalError):
    pass


class SubmissionFailed(PortalError):
    status = 500


class UploadFailed(PortalError):
    status = 502


# ---- AI gateway ----
class AIGatewayError(PortalError):
    status = 502


class RateLimited(AIGatewayError):
    status = 429

    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message)


class QuotaExhausted(AIGatewayError):
    status = 402

    def __init__(self, message: str = "AI credits exhausted. Please contact support."):
        super().__init__(message)


class NotFound(PortalError):
    status = 404
