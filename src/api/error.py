"""API error envelope

Every error leaves the service as
``{"error": {"code": ..., "message": ..., "details"?: {...}}}``.
"""

from typing import Optional
from fastapi import status
from libs.result import Error
from src.domain.errors import ErrorCode

STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONFLICT.value: status.HTTP_409_CONFLICT,
    ErrorCode.UPSTREAM_ERROR.value: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.INTERNAL_ERROR.value: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ClientError(Exception):
    """Raised by routes to return an error envelope"""

    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or STATUS_BY_CODE.get(
            error.code, status.HTTP_400_BAD_REQUEST
        )

    def to_dict(self) -> dict:
        body = {"code": self.error.code, "message": self.error.message}
        if self.error.details:
            body["details"] = self.error.details
        return {"error": body}
