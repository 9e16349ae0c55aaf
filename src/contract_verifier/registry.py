"""Network registry for contract-verifier library."""

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from .constants import NETWORK_CONFIG
from .exceptions import (
    ConfigNotFoundError,
    DuplicateChainIdError,
    InvalidProfileError,
    UnknownNetworkError,
)
from .parsers import parse_network_config
from .paths import get_config_path
from .types import NetworkProfile


class NetworkRegistry:
    """Immutable table of deployment targets keyed by network id."""

    def __init__(self, profiles: Iterable[NetworkProfile]):
        """
        Build the registry.

        Args:
            profiles: Network profiles to register

        Raises:
            InvalidProfileError: If two profiles share an id
            DuplicateChainIdError: If two profiles share a chain ID
        """
        by_id: Dict[str, NetworkProfile] = {}
        by_chain: Dict[int, NetworkProfile] = {}

        for profile in profiles:
            if profile.id in by_id:
                raise InvalidProfileError(f"Network '{profile.id}' is registered twice")

            other = by_chain.get(profile.chain_id)
            if other is not None:
                raise DuplicateChainIdError(
                    f"Chain ID {profile.chain_id} is used by both "
                    f"'{other.id}' and '{profile.id}'"
                )

            by_id[profile.id] = profile
            by_chain[profile.chain_id] = profile

        self._profiles: Mapping[str, NetworkProfile] = MappingProxyType(by_id)
        self._by_chain: Mapping[int, NetworkProfile] = MappingProxyType(by_chain)

    @classmethod
    def from_config(cls, config: Mapping[str, Mapping[str, Any]]) -> "NetworkRegistry":
        """
        Build a registry from a static configuration mapping.

        Args:
            config: Mapping of network id -> network entry

        Returns:
            NetworkRegistry

        Raises:
            InvalidProfileError: If an entry is malformed
            DuplicateChainIdError: If two entries share a chain ID
        """
        return cls(
            parse_network_config(network_id, entry) for network_id, entry in config.items()
        )

    @classmethod
    def from_json_file(cls, config_path: Optional[Union[Path, str]] = None) -> "NetworkRegistry":
        """
        Build a registry from a JSON configuration file.

        Args:
            config_path: Path to networks JSON file
                         If None, uses $CONTRACT_VERIFIER_CONFIG or
                         ./.contract-verifier/networks.json

        Raises:
            ConfigNotFoundError: If the file does not exist
            InvalidProfileError: If the file is not a JSON object of entries
        """
        path = get_config_path(config_path)
        if not path.exists():
            raise ConfigNotFoundError(f"Network configuration not found at {path}")

        with open(path) as f:
            try:
                config = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidProfileError(f"Network configuration at {path} is not valid JSON") from e

        # Allow {"networks": {...}} as well as a bare mapping
        if isinstance(config, dict) and isinstance(config.get("networks"), dict):
            config = config["networks"]
        if not isinstance(config, dict):
            raise InvalidProfileError(f"Network configuration at {path} must be a JSON object")

        return cls.from_config(config)

    @classmethod
    def default(cls) -> "NetworkRegistry":
        """Build a registry from the built-in network table."""
        return cls.from_config(NETWORK_CONFIG)

    def resolve(self, network_id: str) -> NetworkProfile:
        """
        Get the profile of a network.

        Args:
            network_id: Network name (e.g. "somnia-testnet")

        Returns:
            NetworkProfile

        Raises:
            UnknownNetworkError: If network_id is empty or not registered
        """
        if not network_id:
            raise UnknownNetworkError("Network id must not be empty")

        try:
            return self._profiles[network_id]
        except KeyError:
            raise UnknownNetworkError(
                f"Network '{network_id}' not found in registry "
                f"(known: {', '.join(self.networks())})"
            ) from None

    def by_chain_id(self, chain_id: int) -> NetworkProfile:
        """
        Get the profile registered for a chain ID.

        Raises:
            UnknownNetworkError: If no network uses this chain ID
        """
        try:
            return self._by_chain[chain_id]
        except KeyError:
            raise UnknownNetworkError(f"No network registered for chain ID {chain_id}") from None

    def has_network(self, network_id: str) -> bool:
        return network_id in self._profiles

    def networks(self) -> List[str]:
        """Sorted list of registered network ids."""
        return sorted(self._profiles)

    def verifiable_networks(self) -> List[str]:
        """Sorted list of network ids that have an explorer configured."""
        return sorted(
            network_id
            for network_id, profile in self._profiles.items()
            if profile.supports_verification
        )

    def __contains__(self, network_id: object) -> bool:
        return network_id in self._profiles

    def __iter__(self) -> Iterator[NetworkProfile]:
        return iter(self._profiles.values())

    def __len__(self) -> int:
        return len(self._profiles)

    def __repr__(self) -> str:
        return f"NetworkRegistry({self.networks()!r})"
