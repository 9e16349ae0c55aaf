"""Verification submission for contract-verifier library."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Sequence

from .constants import DEFAULT_TIMEOUT
from .encoding import encode_constructor_args
from .exceptions import (
    ConstructorEncodingError,
    ExplorerRejectedError,
    InvalidProfileError,
    TransportError,
    UnknownNetworkError,
    VerificationTimeoutError,
    VerificationUnsupportedError,
)
from .parsers import parse_contract_ref
from .protocols import (
    ALREADY_VERIFIED,
    build_status_query,
    build_submission,
    interpret_status,
    interpret_submission,
)
from .registry import NetworkRegistry
from .transport import ExplorerTransport
from .types import (
    FailureReason,
    NetworkProfile,
    RetryPolicy,
    VerificationFailure,
    VerificationRequest,
    VerificationResult,
    VerificationStatus,
    VerificationSuccess,
)

logger = logging.getLogger(__name__)


def _failure(
    network_id: str,
    request: VerificationRequest,
    reason: FailureReason,
    cause: BaseException,
) -> VerificationFailure:
    failure = VerificationFailure(
        request=request, network_id=network_id, reason=reason, cause=cause
    )
    logger.warning("Verification failed: %s", failure.describe())
    return failure


class VerificationSubmitter:
    """Submits verification jobs to explorers and reports outcomes as values."""

    def __init__(
        self,
        transport: Optional[ExplorerTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the submitter.

        Args:
            transport: Explorer transport (defaults to ExplorerTransport(timeout))
            timeout: Seconds allowed per explorer call when creating the transport
            sleep: Pause function used between retries
        """
        self._transport = transport or ExplorerTransport(timeout=timeout)
        self._sleep = sleep

    def submit(self, profile: NetworkProfile, request: VerificationRequest) -> VerificationResult:
        """
        Submit one verification job.

        Makes at most one explorer call. Never raises: every failure is
        returned as a VerificationFailure carrying the request and the cause.

        Args:
            profile: Resolved network profile
            request: Verification request (constructor args in declaration order)

        Returns:
            VerificationSuccess or VerificationFailure
        """
        if profile.explorer is None:
            return _failure(
                profile.id,
                request,
                FailureReason.UNSUPPORTED,
                VerificationUnsupportedError(
                    f"Network '{profile.id}' has no explorer configured for verification"
                ),
            )

        try:
            parse_contract_ref(request.contract_ref)
        except InvalidProfileError as e:
            return _failure(profile.id, request, FailureReason.INVALID_REQUEST, e)

        try:
            encoded_args = encode_constructor_args(
                request.constructor_args, request.constructor_types
            )
            call = build_submission(profile, request, encoded_args)
        except ConstructorEncodingError as e:
            return _failure(profile.id, request, FailureReason.ENCODING, e)
        except Exception as e:
            # A request that cannot be turned into a call is still a result
            logger.exception("Cannot build verification call for %s", request.address)
            return _failure(profile.id, request, FailureReason.INVALID_REQUEST, e)

        logger.info(
            "Submitting %s at %s to %s", request.contract_ref, request.address, call.url
        )

        try:
            body = self._transport.request(
                call.method, call.url, params=call.params, data=call.data, json=call.json
            )
            guid, status = interpret_submission(body)
        except VerificationTimeoutError as e:
            return _failure(profile.id, request, FailureReason.TIMEOUT, e)
        except ExplorerRejectedError as e:
            if "already verified" not in str(e).lower():
                return _failure(profile.id, request, FailureReason.REJECTED, e)
            guid, status = None, ALREADY_VERIFIED
        except TransportError as e:
            return _failure(profile.id, request, FailureReason.TRANSPORT, e)
        except Exception as e:
            # Unexpected transport errors still resolve to a result
            logger.exception("Unexpected error submitting %s", request.address)
            return _failure(profile.id, request, FailureReason.TRANSPORT, e)

        logger.info("Verification of %s submitted (guid=%s, status=%s)", request.address, guid, status)
        return VerificationSuccess(
            request=request,
            network_id=profile.id,
            guid=guid,
            status=status,
            explorer_url=profile.explorer.address_url(request.address),
        )

    def submit_with_retry(
        self,
        profile: NetworkProfile,
        request: VerificationRequest,
        policy: Optional[RetryPolicy] = None,
    ) -> VerificationResult:
        """
        Submit with bounded exponential backoff.

        Only transport, timeout and rejection failures are retried.

        Args:
            profile: Resolved network profile
            request: Verification request
            policy: Retry policy (defaults to the explorer's policy)

        Returns:
            Result of the last attempt
        """
        if policy is None:
            policy = profile.explorer.retry if profile.explorer else RetryPolicy(max_attempts=1)

        result = self.submit(profile, request)
        for attempt, delay in enumerate(policy.delays(), start=2):
            if result.ok or not result.reason.retryable:
                break
            logger.info(
                "Retrying %s in %.1fs (attempt %d/%d)",
                request.address,
                delay,
                attempt,
                policy.max_attempts,
            )
            self._sleep(delay)
            result = self.submit(profile, request)
        return result

    def submit_many(
        self,
        profile: NetworkProfile,
        requests: Sequence[VerificationRequest],
        max_workers: int = 4,
        retry: bool = False,
    ) -> List[VerificationResult]:
        """
        Submit independent verification jobs concurrently.

        Args:
            profile: Resolved network profile
            requests: Verification requests
            max_workers: Thread pool size
            retry: Use submit_with_retry for each job

        Returns:
            Results in the same order as requests
        """
        submit_one = self.submit_with_retry if retry else self.submit

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(lambda request: submit_one(profile, request), requests))

    def check_status(self, profile: NetworkProfile, guid: str) -> VerificationStatus:
        """
        Ask the explorer for the state of a submitted job.

        Args:
            profile: Resolved network profile
            guid: Identifier returned by the submission

        Returns:
            VerificationStatus

        Raises:
            VerificationUnsupportedError: If the network has no explorer
            TransportError: If the status call fails
        """
        if profile.explorer is None:
            raise VerificationUnsupportedError(
                f"Network '{profile.id}' has no explorer configured for verification"
            )

        call = build_status_query(profile, guid)
        body = self._transport.request(call.method, call.url, params=call.params)
        return interpret_status(profile.explorer.protocol, body)

    def wait_for_verification(
        self,
        profile: NetworkProfile,
        guid: str,
        policy: Optional[RetryPolicy] = None,
    ) -> VerificationStatus:
        """
        Poll check_status until the job leaves the pending state.

        Args:
            profile: Resolved network profile
            guid: Identifier returned by the submission
            policy: Polling schedule (defaults to the explorer's retry policy)

        Returns:
            Last observed status (PENDING if polls ran out)
        """
        if policy is None and profile.explorer is not None:
            policy = profile.explorer.retry
        policy = policy or RetryPolicy()

        status = self.check_status(profile, guid)
        for delay in policy.delays():
            if status is not VerificationStatus.PENDING:
                break
            self._sleep(delay)
            status = self.check_status(profile, guid)
        return status


def verify_contract(
    registry: NetworkRegistry,
    network_id: str,
    address: str,
    contract_ref: str,
    constructor_args: Sequence[Any] = (),
    constructor_types: Optional[Sequence[str]] = None,
    source_code: Optional[Any] = None,
    submitter: Optional[VerificationSubmitter] = None,
    retry: bool = False,
) -> VerificationResult:
    """
    Resolve a network and submit one contract for verification.

    Never raises: an unknown network is reported as a failure result.

    Args:
        registry: Network registry to resolve network_id against
        network_id: Network name (e.g. "zkSyncSepoliaTestnet")
        address: Deployed contract address
        contract_ref: "path/to/File.sol:ContractName"
        constructor_args: Constructor arguments in declaration order
        constructor_types: ABI types of constructor_args (optional)
        source_code: Standard JSON input or flattened source (optional)
        submitter: Submitter to use (a default one is created if None)
        retry: Retry transient failures using the explorer's retry policy

    Returns:
        VerificationSuccess or VerificationFailure
    """
    request = VerificationRequest(
        address=address,
        contract_ref=contract_ref,
        constructor_args=tuple(constructor_args),
        constructor_types=tuple(constructor_types) if constructor_types is not None else None,
        source_code=source_code,
    )

    if submitter is None:
        submitter = VerificationSubmitter()

    try:
        profile = registry.resolve(network_id)
    except UnknownNetworkError as e:
        return _failure(network_id, request, FailureReason.UNKNOWN_NETWORK, e)

    if retry:
        return submitter.submit_with_retry(profile, request)
    return submitter.submit(profile, request)
