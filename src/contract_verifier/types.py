"""Data types and dataclasses for contract-verifier library."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Tuple, Union

from .constants import DEFAULT_RETRY, EMPTY_API_KEY
from .exceptions import InvalidProfileError


class ExplorerProtocol(Enum):
    """
    Verification API flavours spoken by explorers.

    Value strings define de/serialization law:
    - ETHERSCAN: Etherscan-compatible form API (also served by Blockscout)
    - ZKSYNC: zkSync Era contract_verification JSON API
    """

    ETHERSCAN = "etherscan"
    ZKSYNC = "zksync"


class CompilerKind(Enum):
    """
    Compiler toolchain families.

    - STANDARD: native EVM compiler (solc)
    - ALTERNATIVE: rollup-specific compiler anchored to a base-layer network
    """

    STANDARD = "standard"
    ALTERNATIVE = "alternative"

    @property
    def requires_base_layer(self) -> bool:
        return self in _BASE_LAYER_KINDS

    @property
    def default_protocol(self) -> ExplorerProtocol:
        return _DEFAULT_PROTOCOLS[self]


_BASE_LAYER_KINDS = frozenset({CompilerKind.ALTERNATIVE})

_DEFAULT_PROTOCOLS = {
    CompilerKind.STANDARD: ExplorerProtocol.ETHERSCAN,
    CompilerKind.ALTERNATIVE: ExplorerProtocol.ZKSYNC,
}


class FailureReason(Enum):
    """Why a verification attempt ended in failure."""

    UNKNOWN_NETWORK = "unknown_network"
    UNSUPPORTED = "unsupported"
    INVALID_REQUEST = "invalid_request"
    ENCODING = "encoding"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    REJECTED = "rejected"

    @property
    def retryable(self) -> bool:
        return self in (FailureReason.TRANSPORT, FailureReason.TIMEOUT, FailureReason.REJECTED)


class VerificationStatus(Enum):
    """State of a submitted verification job as reported by the explorer."""

    PENDING = "pending"
    VERIFIED = "verified"
    FAILED = "failed"


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff."""

    max_attempts: int = DEFAULT_RETRY["max_attempts"]
    initial_delay: float = DEFAULT_RETRY["initial_delay"]  # seconds
    backoff: float = DEFAULT_RETRY["backoff"]
    max_delay: float = DEFAULT_RETRY["max_delay"]

    def __post_init__(self):
        if self.max_attempts < 1:
            raise InvalidProfileError("max_attempts must be at least 1")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise InvalidProfileError("retry delays must not be negative")
        if self.backoff < 1:
            raise InvalidProfileError("backoff must be at least 1")

    def delays(self) -> Iterator[float]:
        """Yield the pause before each retry (max_attempts - 1 values)."""
        delay = self.initial_delay
        for _ in range(self.max_attempts - 1):
            yield min(delay, self.max_delay)
            delay *= self.backoff


@dataclass(frozen=True)
class CompilerProfile:
    """Compiler pipeline used to build contracts for a network."""

    kind: CompilerKind
    version: Optional[str] = None  # e.g. "0.8.33" or zksolc "1.4.1"
    settings: Mapping[str, Any] = field(default_factory=dict)  # optimizer etc., opaque
    eth_network: Optional[str] = None  # base layer, e.g. "sepolia"
    solc_version: Optional[str] = None  # solc wrapped by an alternative compiler

    def __post_init__(self):
        object.__setattr__(self, "settings", MappingProxyType(dict(self.settings)))

        if self.kind.requires_base_layer and not self.eth_network:
            raise InvalidProfileError(
                f"Compiler kind '{self.kind.value}' requires a base-layer ethNetwork"
            )
        if not self.kind.requires_base_layer and self.eth_network:
            raise InvalidProfileError(
                f"Compiler kind '{self.kind.value}' must not set ethNetwork"
            )

    @property
    def optimizer_enabled(self) -> bool:
        optimizer = self.settings.get("optimizer", {})
        return bool(optimizer.get("enabled", False))

    @property
    def optimizer_runs(self) -> Optional[int]:
        return self.settings.get("optimizer", {}).get("runs")


@dataclass(frozen=True)
class ExplorerProfile:
    """Where and how to submit source verification."""

    verify_url: str
    protocol: ExplorerProtocol = ExplorerProtocol.ETHERSCAN
    api_url: Optional[str] = None
    browser_url: Optional[str] = None
    api_key: str = EMPTY_API_KEY
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    def __post_init__(self):
        if not self.verify_url:
            raise InvalidProfileError("Explorer profile requires a verifyUrl")

    @property
    def requires_api_key(self) -> bool:
        return bool(self.api_key) and self.api_key != EMPTY_API_KEY

    def address_url(self, address: str) -> Optional[str]:
        """Public page of a contract, or None when no browser URL is known."""
        if not self.browser_url:
            return None
        return f"{self.browser_url.rstrip('/')}/address/{address}#code"


@dataclass(frozen=True)
class NetworkProfile:
    """A deployment target."""

    id: str  # e.g. "somnia-testnet"
    rpc_url: str
    chain_id: int
    compiler: CompilerProfile
    explorer: Optional[ExplorerProfile] = None

    def __post_init__(self):
        if not self.id:
            raise InvalidProfileError("Network id must not be empty")
        if isinstance(self.chain_id, bool) or not isinstance(self.chain_id, int) or self.chain_id <= 0:
            raise InvalidProfileError(
                f"Network '{self.id}' chainId must be a positive integer, got {self.chain_id!r}"
            )

    @property
    def supports_verification(self) -> bool:
        return self.explorer is not None


@dataclass(frozen=True)
class VerificationRequest:
    """One verification job."""

    address: str
    contract_ref: str  # "contracts/Foo.sol:Foo"
    constructor_args: Tuple[Any, ...] = ()
    constructor_types: Optional[Tuple[str, ...]] = None  # ABI types, e.g. ("address", "uint256")
    source_code: Optional[Any] = None  # standard JSON input or flattened source

    def __post_init__(self):
        object.__setattr__(self, "constructor_args", tuple(self.constructor_args))
        if self.constructor_types is not None:
            object.__setattr__(self, "constructor_types", tuple(self.constructor_types))


@dataclass(frozen=True)
class VerificationSuccess:
    """The explorer accepted the verification job."""

    request: VerificationRequest
    network_id: str
    guid: Optional[str] = None  # explorer tracking identifier
    status: Optional[str] = None
    explorer_url: Optional[str] = None

    ok = True

    @property
    def address(self) -> str:
        return self.request.address


@dataclass(frozen=True)
class VerificationFailure:
    """The verification job could not be submitted or was refused."""

    request: VerificationRequest
    network_id: str
    reason: FailureReason
    cause: BaseException

    ok = False

    @property
    def address(self) -> str:
        return self.request.address

    @property
    def constructor_args(self) -> Tuple[Any, ...]:
        return self.request.constructor_args

    def describe(self) -> str:
        return (
            f"{self.address} on {self.network_id} ({self.reason.value}): {self.cause}; "
            f"constructor args {list(self.constructor_args)}"
        )


VerificationResult = Union[VerificationSuccess, VerificationFailure]
