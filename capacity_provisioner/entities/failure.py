from datetime import datetime

from .errors import ErrorType


class Failure:
    def __init__(self,
                 source_name: str | None,
                 label: str | None,
                 error_code: ErrorType,
                 reason: str,
                 exception: Exception | str | None,
                 traceback: str | None = None,
                 description: str | None = None,
                 occurred_at: datetime | None = None) -> None:
        self.source_name = source_name
        self.label = label
        self.error_code = error_code
        self.reason = reason
        self.exception = exception
        self.traceback = traceback
        self.description = description
        self.occurred_at = occurred_at if occurred_at else datetime.now()

    @staticmethod
    def from_error(error, description: str | None = None) -> "Failure":
        return Failure(
            source_name=getattr(error, "source_name", None),
            label=getattr(error, "label", None),
            error_code=error.error_type,
            reason=error.reason,
            exception=error.original_exception or error,
            traceback=error.original_exception_traceback,
            description=description,
        )

    def __repr__(self) -> str:
        return f"Failure(source_name={self.source_name!r}, label={self.label!r}, error_code={self.error_code}, reason={self.reason!r})"
