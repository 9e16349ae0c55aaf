"""Shared pytest fixtures for contract-verifier tests."""

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from contract_verifier import NetworkRegistry, VerificationRequest
from contract_verifier.types import NetworkProfile

ADMIN = "0xe95fd7f2ee7262e2338f015d04db352d9bcb0e6f"
CONTRACT_ADDRESS = "0xcc757016c0d0025831181c4c2da05981bf917e4c"


class FakeTransport:
    """Transport double that records calls and plays back scripted outcomes."""

    def __init__(self, *outcomes: Any):
        self.outcomes: List[Any] = list(outcomes)
        self.calls: List[Dict[str, Any]] = []

    def request(self, method, url, params=None, data=None, json=None):
        self.calls.append(
            {"method": method, "url": url, "params": params, "data": data, "json": json}
        )
        outcome = self.outcomes.pop(0) if self.outcomes else {"status": "ok"}
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def fake_transport_cls():
    """Return the FakeTransport class so tests can script outcomes."""
    return FakeTransport


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Static network configuration covering every profile shape."""
    return {
        "testnet-A": {
            "rpcUrl": "https://rpc.testnet-a.example.com",
            "chainId": 50312,
            "compilerProfile": {
                "kind": "standard",
                "version": "0.8.33",
                "settings": {"optimizer": {"enabled": True, "runs": 200}},
            },
            "explorerProfile": {
                "apiUrl": "https://x/api",
                "browserUrl": "https://x",
                "verifyUrl": "https://x/api",
                "apiKey": "empty",
                "retry": {"maxAttempts": 3, "initialDelay": 1, "backoff": 2},
            },
        },
        "rollup-B": {
            "url": "https://rpc.rollup-b.example.com",
            "chainId": 300,
            "zksync": True,
            "ethNetwork": "sepolia",
            "verifyURL": "https://rollup-b.example.com/contract_verification",
        },
        "no-explorer-C": {
            "rpcUrl": "https://rpc.c.example.com",
            "chainId": 77,
        },
        "keyed-D": {
            "rpcUrl": "https://rpc.d.example.com",
            "chainId": 1,
            "compilerProfile": {"kind": "standard", "version": "0.8.19"},
            "explorerProfile": {
                "verifyUrl": "https://api.d.example.com/api",
                "browserUrl": "https://d.example.com",
                "apiKey": "SECRET",
            },
        },
    }


@pytest.fixture
def registry(sample_config: Dict[str, Any]) -> NetworkRegistry:
    """Registry built from the sample configuration."""
    return NetworkRegistry.from_config(sample_config)


@pytest.fixture
def testnet_profile(registry: NetworkRegistry) -> NetworkProfile:
    return registry.resolve("testnet-A")


@pytest.fixture
def rollup_profile(registry: NetworkRegistry) -> NetworkProfile:
    return registry.resolve("rollup-B")


@pytest.fixture
def bare_profile(registry: NetworkRegistry) -> NetworkProfile:
    return registry.resolve("no-explorer-C")


@pytest.fixture
def keyed_profile(registry: NetworkRegistry) -> NetworkProfile:
    return registry.resolve("keyed-D")


@pytest.fixture
def sample_request() -> VerificationRequest:
    """Untyped request shaped like a hardhat verify script."""
    return VerificationRequest(
        address="0xABC0000000000000000000000000000000000001",
        contract_ref="Foo.sol:Foo",
        constructor_args=["0xAdmin", "Name", "SYM", "0xRoyalty", "500"],
    )


@pytest.fixture
def typed_request() -> VerificationRequest:
    """Request with declared ABI types for its constructor arguments."""
    return VerificationRequest(
        address=CONTRACT_ADDRESS,
        contract_ref="contracts/BuyChestTestContract.sol:ChestBuyTest",
        constructor_args=[ADMIN, "500"],
        constructor_types=["address", "uint256"],
    )


@pytest.fixture
def temp_config_file(tmp_path: Path, sample_config: Dict[str, Any]) -> Path:
    """Write the sample configuration to a temporary networks.json."""
    config_path = tmp_path / ".contract-verifier" / "networks.json"
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        json.dump(sample_config, f, indent=2)
    return config_path


@pytest.fixture
def recorded_sleeps() -> List[float]:
    """List that collects the delays passed to a fake sleep function."""
    return []


@pytest.fixture
def fake_sleep(recorded_sleeps: List[float]):
    return recorded_sleeps.append
