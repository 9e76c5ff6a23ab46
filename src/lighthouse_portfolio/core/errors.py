"""Exception hierarchy shared by the client, engine, and tool layers."""


class LighthouseError(Exception):
    """Base class for all Lighthouse portfolio errors."""


class InvalidInputError(LighthouseError):
    """Raised for malformed user input (login URL, start date, portfolio name)."""


class UnauthenticatedError(LighthouseError):
    """Raised when a data operation is attempted without a stored session."""

    def __init__(self, message: str = "Not authenticated. Please authenticate first.") -> None:
        super().__init__(message)


class UpstreamError(LighthouseError):
    """
    Raised for failures reported by the Lighthouse API.

    Parameters
    ----------
    message : str
        Human-readable description
    status_code : int | None
        HTTP status code when the failure was a non-success response

    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DataContractError(LighthouseError):
    """Raised when upstream data is structurally inconsistent (e.g. unpaired pool legs)."""
