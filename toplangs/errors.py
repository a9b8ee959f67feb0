"""
toplangs/errors.py — Exception taxonomy for the language card.

Aggregation fails with one of these instead of returning a partial table.
Rendering never raises them; callers turn them into an error card
(see toplangs.pipeline).
"""

from typing import Iterable, Optional


class TopLangsError(RuntimeError):
    """Base class for every failure surfaced by toplangs.

    Attributes:
        secondary_message: Optional hint shown on the error card under the
            main message.
    """

    secondary_message: str = ""


class MissingParameterError(TopLangsError):
    """A required request parameter (e.g. ``username``) is absent."""

    def __init__(self, missing: Iterable[str], secondary_message: str = "") -> None:
        self.missing = list(missing)
        names = ", ".join(f'"{name}"' for name in self.missing)
        super().__init__(f"Missing params {names} make sure you pass the parameters in URL")
        self.secondary_message = secondary_message


class MissingCredentialError(TopLangsError):
    """No GitHub access token is configured."""

    def __init__(self, message: str = "GitHub token not found.") -> None:
        super().__init__(message)
        self.secondary_message = "Set PAT_1 or GITHUB_TOKEN in the environment."


class UpstreamError(TopLangsError):
    """The GitHub API returned a structured error, or every retry failed.

    Attributes:
        cause: The underlying exception when the error wraps a transport
            failure, else None.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause
        self.secondary_message = "Please try again later"


class TransportError(TopLangsError):
    """Network or HTTP-level failure of a single request. Retried."""
