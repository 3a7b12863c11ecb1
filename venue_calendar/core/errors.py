from __future__ import annotations

from fastapi import HTTPException, status


class InvalidInput(HTTPException):
    def __init__(self, detail: str = "Invalid input") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class UpstreamUnavailable(HTTPException):
    """The database did not answer; callers may retry, we don't."""

    def __init__(self, detail: str = "Storage unavailable") -> None:
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
