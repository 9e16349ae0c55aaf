"""Static configuration parsers for contract-verifier library."""

import os
from typing import Any, Dict, Mapping, Optional, Tuple

from .constants import EMPTY_API_KEY
from .exceptions import InvalidProfileError
from .types import (
    CompilerKind,
    CompilerProfile,
    ExplorerProfile,
    ExplorerProtocol,
    NetworkProfile,
    RetryPolicy,
)


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the value of the first key present in data, or None."""
    for key in keys:
        if key in data:
            return data[key]
    return None


def parse_contract_ref(contract_ref: str) -> Tuple[str, str]:
    """
    Split a fully-qualified contract reference.

    Args:
        contract_ref: Reference in "path/to/File.sol:ContractName" form

    Returns:
        Tuple of (source_path, contract_name)

    Raises:
        InvalidProfileError: If the reference is not in path:Name form
    """
    path, sep, name = contract_ref.rpartition(":")
    if not sep or not path or not name:
        raise InvalidProfileError(
            f"Contract reference '{contract_ref}' must be in 'path:ContractName' form"
        )
    return path, name


def parse_compiler_profile(network_id: str, entry: Mapping[str, Any]) -> CompilerProfile:
    """
    Parse the compiler part of a network entry.

    Accepts an explicit compilerProfile block, or the hardhat zkSync form
    where the entry itself carries zksync: true and ethNetwork.

    Args:
        network_id: Network name (for error messages)
        entry: Network configuration entry

    Returns:
        CompilerProfile

    Raises:
        InvalidProfileError: If kind is unknown or base-layer rules are broken
    """
    data = entry.get("compilerProfile")
    if data is None:
        data = {
            "kind": "alternative" if entry.get("zksync") else "standard",
            "ethNetwork": entry.get("ethNetwork"),
        }

    try:
        kind = CompilerKind(data.get("kind", "standard"))
    except ValueError as e:
        raise InvalidProfileError(
            f"Network '{network_id}' has unknown compiler kind {data.get('kind')!r}"
        ) from e

    settings = _first(data, "settings", "optimizerSettings") or {}
    if "optimizer" not in settings and "enabled" in settings:
        # Bare optimizer block
        settings = {"optimizer": settings}

    try:
        return CompilerProfile(
            kind=kind,
            version=data.get("version"),
            settings=settings,
            eth_network=data.get("ethNetwork"),
            solc_version=data.get("solcVersion"),
        )
    except InvalidProfileError as e:
        raise InvalidProfileError(f"Network '{network_id}': {e}") from e


def parse_retry_policy(data: Optional[Mapping[str, Any]]) -> RetryPolicy:
    """Parse a retry block, falling back to library defaults for missing keys."""
    if not data:
        return RetryPolicy()

    kwargs: Dict[str, Any] = {}
    for key, name in (
        ("maxAttempts", "max_attempts"),
        ("initialDelay", "initial_delay"),
        ("backoff", "backoff"),
        ("maxDelay", "max_delay"),
    ):
        value = _first(data, key, name)
        if value is not None:
            kwargs[name] = value
    return RetryPolicy(**kwargs)


def parse_explorer_profile(
    network_id: str, entry: Mapping[str, Any], compiler: CompilerProfile
) -> Optional[ExplorerProfile]:
    """
    Parse the explorer part of a network entry.

    Args:
        network_id: Network name (for error messages)
        entry: Network configuration entry
        compiler: Already parsed compiler profile (selects the default protocol)

    Returns:
        ExplorerProfile, or None if the network has no explorer configured

    Raises:
        InvalidProfileError: If the explorer block lacks a verify URL
    """
    data = entry.get("explorerProfile")
    if data is None:
        # Hardhat zkSync networks put verifyURL on the network itself
        verify_url = _first(entry, "verifyURL", "verifyUrl")
        if verify_url is None:
            return None
        data = {"verifyUrl": verify_url}

    protocol_name = data.get("protocol")
    try:
        protocol = (
            ExplorerProtocol(protocol_name)
            if protocol_name is not None
            else compiler.kind.default_protocol
        )
    except ValueError as e:
        raise InvalidProfileError(
            f"Network '{network_id}' has unknown explorer protocol {protocol_name!r}"
        ) from e

    api_key = data.get("apiKey")
    api_key_env = data.get("apiKeyEnv")
    if api_key_env:
        api_key = os.environ.get(api_key_env, api_key)

    try:
        return ExplorerProfile(
            verify_url=_first(data, "verifyUrl", "verifyURL"),
            protocol=protocol,
            api_url=_first(data, "apiUrl", "apiURL"),
            browser_url=_first(data, "browserUrl", "browserURL"),
            api_key=api_key or EMPTY_API_KEY,
            retry=parse_retry_policy(data.get("retry")),
        )
    except InvalidProfileError as e:
        raise InvalidProfileError(f"Network '{network_id}': {e}") from e


def parse_network_config(network_id: str, entry: Mapping[str, Any]) -> NetworkProfile:
    """
    Parse one entry of the static network configuration.

    Args:
        network_id: Network name (configuration key)
        entry: Mapping with rpcUrl/url, chainId, compilerProfile, explorerProfile

    Returns:
        NetworkProfile

    Raises:
        InvalidProfileError: If a required field is missing or malformed
    """
    if not isinstance(entry, Mapping):
        raise InvalidProfileError(f"Network '{network_id}' entry must be a mapping")

    rpc_url = _first(entry, "rpcUrl", "url")
    rpc_url_env = entry.get("rpcUrlEnv")
    if rpc_url_env:
        rpc_url = os.environ.get(rpc_url_env, rpc_url)
    if not rpc_url:
        raise InvalidProfileError(f"Network '{network_id}' is missing rpcUrl")

    chain_id = entry.get("chainId")
    if chain_id is None:
        raise InvalidProfileError(f"Network '{network_id}' is missing chainId")

    compiler = parse_compiler_profile(network_id, entry)
    explorer = parse_explorer_profile(network_id, entry, compiler)

    return NetworkProfile(
        id=network_id,
        rpc_url=rpc_url,
        chain_id=chain_id,
        compiler=compiler,
        explorer=explorer,
    )
