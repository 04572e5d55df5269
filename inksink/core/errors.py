"""Exception types shared across the API and the chat workflow."""


class ApiError(Exception):
    """Request-level failure rendered as ``{"error": message}``."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ChatWorkflowError(Exception):
    """Base class for failures inside a chat workflow run."""


class ClassificationError(ChatWorkflowError):
    """The intent classifier failed or returned nothing. Fatal for the run."""


class ResponderError(ChatWorkflowError):
    """A responder agent failed while generating its reply."""
