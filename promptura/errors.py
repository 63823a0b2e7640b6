"""Error taxonomy for the template engine and version manager"""

from typing import Optional


class PrompturaError(Exception):
    """Base class for all Promptura errors"""


class RateLimitedError(PrompturaError):
    """Local rate limit reached; resolved by falling back"""

    def __init__(self, message: str = "Rate limit exceeded"):
        super().__init__(message)
        self.message = message


class RemoteError(PrompturaError):
    """
    Remote completion call failed

    ``status`` is the HTTP status code, or None for network-level failures,
    timeouts and caller-triggered aborts.
    """

    def __init__(self, status: Optional[int], message: str):
        super().__init__(f"{status}: {message}" if status is not None else message)
        self.status = status
        self.message = message


class InadequateResponseError(PrompturaError):
    """Remote call succeeded but the content failed the quality gate"""

    def __init__(self, message: str = "Inadequate response"):
        super().__init__(message)
        self.message = message


class NotFoundError(PrompturaError):
    """Version, history or comparison lookup miss"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidOperationError(PrompturaError):
    """Operation rejected with a human-readable reason"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
