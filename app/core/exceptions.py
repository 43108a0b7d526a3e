from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RecordStoreError(ServiceError):
    """Record store read/write/commit failed after retries."""

    def __init__(self, message: str = "Record store unavailable") -> None:
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)


class AccountNotFoundError(ServiceError):
    """Identity service has no account for the given id."""

    def __init__(self, uid: str) -> None:
        super().__init__(f"No account found for uid {uid}", status.HTTP_404_NOT_FOUND)
        self.uid = uid
