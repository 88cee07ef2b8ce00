"""Exception hierarchy for Nano Studio.

Every failure a generation call can produce is a :class:`StudioError`
subclass.  The message is intended to be shown to the user directly, so
it is kept short and free of internal detail.
"""


class StudioError(Exception):
    """Base class for all user-facing Nano Studio errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StudioError):
    """Input rejected before any network call was made."""

    pass


class UnauthorizedError(StudioError):
    """Access credential missing or incorrect.

    Raised separately from other failures so that clients can drop the
    cached credential and ask the user for it again.
    """

    def __init__(self, message: str = "Access code missing or incorrect"):
        super().__init__(message)


class RemoteAPIError(StudioError):
    """The remote image API failed or returned no usable image."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StoreError(StudioError):
    """The local image store could not be read or written."""

    pass
