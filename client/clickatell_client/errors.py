"""
Exceptions raised by the Clickatell client.
"""


class ClickatellException(Exception):
    """Base class for all client errors"""


class ClickatellError(ClickatellException):
    """An ``ERR`` line returned by the gateway"""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")

    @classmethod
    def parse(cls, error_string: str) -> "ClickatellError":
        """
        Build an error from a gateway response body.

        Example:
            ClickatellError.parse("ERR: 001, Authentication failed")
            # code='001', message='Authentication failed'
        """
        _, _, details = error_string.partition("ERR:")
        details = details.strip().splitlines()[0] if details.strip() else ""
        code, _, message = details.partition(",")
        return cls(code.strip(), message.strip())


class ClickatellRequestError(ClickatellException):
    """The HTTP request to the gateway failed"""
