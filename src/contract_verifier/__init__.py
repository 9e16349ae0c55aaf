"""
contract-verifier: multi-chain smart contract source verification
"""

from importlib.metadata import PackageNotFoundError, version

from .encoding import encode_constructor_args
from .exceptions import (
    ConfigNotFoundError,
    ConstructorEncodingError,
    DuplicateChainIdError,
    ExplorerRejectedError,
    InvalidProfileError,
    TransportError,
    UnknownNetworkError,
    VerificationTimeoutError,
    VerificationUnsupportedError,
    VerifierError,
)
from .registry import NetworkRegistry
from .transport import ExplorerTransport
from .types import (
    CompilerKind,
    CompilerProfile,
    ExplorerProfile,
    ExplorerProtocol,
    FailureReason,
    NetworkProfile,
    RetryPolicy,
    VerificationFailure,
    VerificationRequest,
    VerificationResult,
    VerificationStatus,
    VerificationSuccess,
)
from .verification import VerificationSubmitter, verify_contract

try:
    __version__ = version("contract-verifier")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "NetworkRegistry",
    "VerificationSubmitter",
    "verify_contract",
    "encode_constructor_args",
    "ExplorerTransport",
    "CompilerKind",
    "CompilerProfile",
    "ExplorerProfile",
    "ExplorerProtocol",
    "FailureReason",
    "NetworkProfile",
    "RetryPolicy",
    "VerificationRequest",
    "VerificationResult",
    "VerificationStatus",
    "VerificationSuccess",
    "VerificationFailure",
    "VerifierError",
    "ConfigNotFoundError",
    "InvalidProfileError",
    "UnknownNetworkError",
    "DuplicateChainIdError",
    "VerificationUnsupportedError",
    "ConstructorEncodingError",
    "TransportError",
    "VerificationTimeoutError",
    "ExplorerRejectedError",
]
