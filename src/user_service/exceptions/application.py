"""
Application-layer errors: failures of a service operation that the caller cannot fix.

The wrapped cause is kept on `.cause` (and `__cause__`) for logs only. It never
reaches the HTTP response: the translator replaces the detail with a generic text.
"""

from .base import AppError, FailureKind


class ApplicationError(AppError):
    kind = FailureKind.APPLICATION

    def __init__(self, service: str, message: str, cause: BaseException | None = None, *,
                 error_code: str | None = None):
        super().__init__(message, error_code=error_code)
        self.service = service
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class ServiceOperationError(ApplicationError):
    """
    Raised by services to wrap any unexpected lower-level failure, e.g.

        except Exception as exc:
            raise ServiceOperationError("UserService", "create_user",
                                        "An error occurred while creating the user.", exc) from exc
    """

    kind = FailureKind.SERVICE_OPERATION_FAILED

    def __init__(self, service: str, operation: str, message: str, cause: BaseException | None = None, *,
                 error_code: str | None = None):
        super().__init__(service, message, cause, error_code=error_code)
        self.operation = operation


__all__ = ["ApplicationError", "ServiceOperationError"]
