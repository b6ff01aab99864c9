"""
Service Layer Exceptions

Typed failures raised by the harness. None of them are retried: a test step
that hits one of these is expected to end.
"""

from typing import Optional


class HarnessError(Exception):
    """Base class for every harness failure."""
    pass


class HarnessAssertionError(HarnessError, AssertionError):
    """
    The rendered UI does not look like the test expected.
    Subclasses AssertionError so test runners report it as a failed assertion.
    """
    pass


class ElementNotFoundError(HarnessAssertionError):
    """Raised when a block tree search finds nothing."""

    def __init__(self, text: Optional[str] = None, action_id: Optional[str] = None, value: str = ""):
        self.text = text
        self.action_id = action_id
        self.value = value
        if action_id is not None:
            message = f"cannot search element with action={action_id}&value={value}"
        else:
            message = f"cannot search element with text={text}"
        super().__init__(message)


class UnexpectedElementError(HarnessAssertionError):
    """Raised when the element found is not the kind the operation needs."""
    pass


class OptionNotFoundError(HarnessAssertionError):
    """Raised when a select input has no option with the requested visible text."""

    def __init__(self, label: str, option_text: str):
        self.label = label
        self.option_text = option_text
        super().__init__(f"value not found in select: '{option_text}' (input '{label}')")


class MessageNotFoundError(HarnessAssertionError):
    """Raised when a channel has no message to pick."""

    def __init__(self, channel: str):
        self.channel = channel
        super().__init__(f"no messages in channel {channel}")


class TransportError(HarnessError):
    """Raised when an HTTP exchange with the application under test fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class HarnessTimeoutError(HarnessError):
    """Raised when an asynchronous update does not arrive in time."""

    def __init__(self, waited_on: str, timeout: float):
        self.waited_on = waited_on
        self.timeout = timeout
        super().__init__(f"waited on {waited_on} for {timeout:g} seconds")


class MalformedRequestError(HarnessError):
    """Raised by the mock server when an inbound request cannot be decoded."""
    pass
