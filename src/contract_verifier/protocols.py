"""Explorer verification API flavours for contract-verifier library."""

import json
import logging
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

from .exceptions import ConstructorEncodingError, ExplorerRejectedError
from .parsers import parse_contract_ref
from .types import ExplorerProtocol, NetworkProfile, VerificationRequest, VerificationStatus

ALREADY_VERIFIED = "already_verified"

STANDARD_JSON_FORMAT = "solidity-standard-json-input"
SINGLE_FILE_FORMAT = "solidity-single-file"

logger = logging.getLogger(__name__)


class ExplorerCall(NamedTuple):
    """An HTTP call to issue against an explorer."""

    method: str
    url: str
    params: Optional[Dict[str, Any]] = None
    data: Optional[Dict[str, Any]] = None
    json: Optional[Any] = None


def _code_format(source_code: Any) -> str:
    return STANDARD_JSON_FORMAT if isinstance(source_code, Mapping) else SINGLE_FILE_FORMAT


def _version_tag(version: Optional[str]) -> Optional[str]:
    # Explorers expect "v0.8.33", configs usually say "0.8.33"
    if version and not version.startswith("v"):
        return f"v{version}"
    return version


def _is_already_verified(message: Any) -> bool:
    return message is not None and "already verified" in str(message).lower()


def _untyped_args(profile: NetworkProfile, request: VerificationRequest) -> List[Any]:
    """
    Return constructor args to forward without ABI encoding.

    Raises:
        ConstructorEncodingError: If the args cannot be sent as a JSON list
    """
    args = list(request.constructor_args)
    try:
        json.dumps(args)
    except (TypeError, ValueError) as e:
        raise ConstructorEncodingError(
            f"Untyped constructor arguments must be JSON values: {e}"
        ) from e

    logger.warning(
        "Forwarding %d untyped constructor arguments for %s to %s; "
        "pass constructor_types so the explorer can match the bytecode",
        len(args),
        request.address,
        profile.id,
    )
    return args


def _build_etherscan_submission(
    profile: NetworkProfile, request: VerificationRequest, encoded_args: Optional[str]
) -> ExplorerCall:
    explorer = profile.explorer
    compiler = profile.compiler
    source_code = request.source_code

    if _code_format(source_code) == STANDARD_JSON_FORMAT:
        contract_name = request.contract_ref
        source_code = json.dumps(source_code)
    else:
        contract_name = parse_contract_ref(request.contract_ref)[1]

    data: Dict[str, Any] = {
        "module": "contract",
        "action": "verifysourcecode",
        "chainid": profile.chain_id,
        "contractaddress": request.address,
        "contractname": contract_name,
        "compilerversion": _version_tag(compiler.version),
        "optimizationUsed": "1" if compiler.optimizer_enabled else "0",
        "codeformat": _code_format(request.source_code),
    }
    if compiler.optimizer_runs is not None:
        data["runs"] = str(compiler.optimizer_runs)
    if source_code is not None:
        data["sourceCode"] = source_code

    # Etherscan spells the field this way
    if encoded_args is not None:
        data["constructorArguements"] = encoded_args[2:]
    elif request.constructor_args:
        data["constructorArgs"] = json.dumps(_untyped_args(profile, request))

    if explorer.requires_api_key:
        data["apikey"] = explorer.api_key

    return ExplorerCall("POST", explorer.verify_url, data=data)


def _build_zksync_submission(
    profile: NetworkProfile, request: VerificationRequest, encoded_args: Optional[str]
) -> ExplorerCall:
    explorer = profile.explorer
    compiler = profile.compiler

    body: Dict[str, Any] = {
        "contractAddress": request.address,
        "contractName": request.contract_ref,
        "codeFormat": _code_format(request.source_code),
        "compilerZksolcVersion": _version_tag(compiler.version),
        "compilerSolcVersion": compiler.solc_version,
        "optimizationUsed": compiler.optimizer_enabled,
    }
    if request.source_code is not None:
        body["sourceCode"] = request.source_code

    if encoded_args is not None:
        body["constructorArguments"] = encoded_args
    elif request.constructor_args:
        body["constructorArgs"] = _untyped_args(profile, request)
    else:
        body["constructorArguments"] = "0x"

    if explorer.requires_api_key:
        body["apiKey"] = explorer.api_key

    return ExplorerCall("POST", explorer.verify_url, json=body)


def build_submission(
    profile: NetworkProfile, request: VerificationRequest, encoded_args: Optional[str]
) -> ExplorerCall:
    """
    Build the verification call for the network's explorer.

    Args:
        profile: Network profile with an explorer configured
        request: Verification request
        encoded_args: 0x-prefixed ABI-encoded constructor arguments,
                      or None to forward request.constructor_args as-is

    Returns:
        ExplorerCall targeting profile.explorer.verify_url

    Raises:
        ConstructorEncodingError: If untyped args cannot be sent as JSON
    """
    match profile.explorer.protocol:
        case ExplorerProtocol.ETHERSCAN:
            return _build_etherscan_submission(profile, request, encoded_args)
        case ExplorerProtocol.ZKSYNC:
            return _build_zksync_submission(profile, request, encoded_args)
        case _:
            raise ValueError(f"Unsupported explorer protocol: {profile.explorer.protocol}")


def interpret_submission(body: Any) -> Tuple[Optional[str], str]:
    """
    Read the explorer's answer to a verification submission.

    Handles Etherscan-style envelopes ({"status": "1", "result": guid}),
    plain objects carrying a guid or id, and bare ids (zkSync answers with
    a number).

    Args:
        body: Decoded response body

    Returns:
        Tuple of (guid, status); guid may be None

    Raises:
        ExplorerRejectedError: If the body signals a refusal
    """
    if isinstance(body, Mapping):
        status = body.get("status")
        message = body.get("result") or body.get("message") or body.get("error")

        if str(status) == "0" or body.get("error"):
            if _is_already_verified(message):
                return None, ALREADY_VERIFIED
            raise ExplorerRejectedError(f"Explorer rejected verification: {message}")

        guid = body.get("guid", body.get("id"))
        if guid is None and str(status) == "1" and isinstance(body.get("result"), str):
            guid = body["result"]

        return (
            str(guid) if guid is not None else None,
            str(status) if status is not None else "submitted",
        )

    if isinstance(body, bool) or body is None:
        return None, "submitted"

    if isinstance(body, int):
        return str(body), "submitted"

    text = str(body).strip()
    if _is_already_verified(text):
        return None, ALREADY_VERIFIED
    return text or None, "submitted"


def build_status_query(profile: NetworkProfile, guid: str) -> ExplorerCall:
    """Build the call asking the explorer for the state of a verification job."""
    explorer = profile.explorer

    if explorer.protocol is ExplorerProtocol.ZKSYNC:
        return ExplorerCall("GET", f"{explorer.verify_url.rstrip('/')}/{guid}")

    params: Dict[str, Any] = {
        "module": "contract",
        "action": "checkverifystatus",
        "guid": guid,
    }
    if explorer.requires_api_key:
        params["apikey"] = explorer.api_key
    return ExplorerCall("GET", explorer.verify_url, params=params)


def interpret_status(protocol: ExplorerProtocol, body: Any) -> VerificationStatus:
    """
    Map an explorer status answer to a VerificationStatus.

    Args:
        protocol: Explorer protocol that produced the answer
        body: Decoded response body

    Returns:
        VerificationStatus
    """
    if not isinstance(body, Mapping):
        return VerificationStatus.FAILED

    if protocol is ExplorerProtocol.ZKSYNC:
        state = str(body.get("status", "")).lower()
        if state == "successful":
            return VerificationStatus.VERIFIED
        if state in ("queued", "in_progress"):
            return VerificationStatus.PENDING
        return VerificationStatus.FAILED

    result = str(body.get("result", "")).lower()
    if "pending" in result:
        return VerificationStatus.PENDING
    if "pass" in result or _is_already_verified(result):
        return VerificationStatus.VERIFIED
    return VerificationStatus.FAILED
