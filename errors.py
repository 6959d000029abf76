from typing import Optional


class SignalingError(Exception):
    """Base exception for the signaling relay."""


class MalformedMessageError(SignalingError):
    """A frame could not be parsed or its payload failed validation."""

    def __init__(self, message: str, event: Optional[str] = None):
        super().__init__(message)
        self.event = event


class UnknownEventError(SignalingError):
    def __init__(self, event: str):
        super().__init__(f"Unknown event: {event}")
        self.event = event


class CredentialServiceError(SignalingError):
    """The external credential-issuance service failed or is unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
