class UserFacingError(ValueError):
    """Errors safe to show directly to users."""


class TransportError(UserFacingError):
    """
    The analyze call failed before a usable body was obtained
    (network error, non-2xx status, or a body that is not JSON).
    The message is shown verbatim and nothing gets normalized.
    """

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code
