"""
Typed failures raised by the scrape pipeline and item store.
"""

from __future__ import annotations


class ScrapePipelineError(Exception):
    """
    Base class for failures surfaced to pipeline callers.

    `code` is the stable wire identifier, `stage` the pipeline state the
    failure was raised from.
    """

    code = "internal"
    default_message = "Failed to scrape data."

    def __init__(self, message: str | None = None, *, stage: str | None = None) -> None:
        self.message = message or self.default_message
        self.stage = stage
        super().__init__(self.message)


class Unauthenticated(ScrapePipelineError):
    code = "unauthenticated"
    default_message = "You must be logged in to perform this action."


class PermissionDenied(ScrapePipelineError):
    code = "permission-denied"
    default_message = "You do not have permission to perform this action."


class FetchFailed(ScrapePipelineError):
    """
    Raised when the target page cannot be fetched.
    """

    code = "fetch-failed"
    default_message = "Failed to fetch the target page."

    def __init__(
        self,
        message: str | None = None,
        *,
        url: str,
        status_code: int | None = None,
        detail: str | None = None,
        stage: str | None = None,
    ) -> None:
        super().__init__(message, stage=stage)
        self.url = url
        self.status_code = status_code
        self.detail = detail


class InternalError(ScrapePipelineError):
    code = "internal"
    default_message = "Failed to scrape data."


class StorageError(Exception):
    """
    Raised by the item store; `reason` distinguishes the failure class.
    """

    UNAVAILABLE = "unavailable"
    MALFORMED_ITEM = "malformed_item"

    def __init__(self, reason: str, message: str) -> None:
        self.reason = reason
        self.message = message
        super().__init__(f"{reason}: {message}")
