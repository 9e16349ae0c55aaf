"""Custom exception classes for contract-verifier library."""

from typing import Optional


class VerifierError(Exception):
    """Base exception for verification-related errors."""

    pass


class ConfigNotFoundError(VerifierError, FileNotFoundError):
    """Raised when a network configuration file is not found."""

    pass


class InvalidProfileError(VerifierError, ValueError):
    """Raised when a network, compiler or explorer profile is malformed."""

    pass


class UnknownNetworkError(VerifierError, ValueError):
    """Raised when requested network is not in the registry."""

    pass


class DuplicateChainIdError(VerifierError, ValueError):
    """Raised when two registered networks share a chain ID."""

    pass


class VerificationUnsupportedError(VerifierError, ValueError):
    """Raised when a network has no explorer configured for verification."""

    pass


class ConstructorEncodingError(VerifierError, ValueError):
    """Raised when constructor arguments cannot be ABI encoded."""

    pass


class TransportError(VerifierError, RuntimeError):
    """Raised when the explorer cannot be reached."""

    pass


class VerificationTimeoutError(TransportError, TimeoutError):
    """Raised when the explorer does not answer within the timeout."""

    pass


class ExplorerRejectedError(TransportError):
    """Raised when the explorer answers but refuses the request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
