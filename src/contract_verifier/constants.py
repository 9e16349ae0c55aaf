"""Configuration constants for contract-verifier library."""

# Explorers that accept any key are configured with this placeholder
EMPTY_API_KEY = "empty"

# Seconds allowed for a single explorer call
DEFAULT_TIMEOUT = 30.0

# Explorers usually need a short while after deployment before the bytecode
# is indexed, so the first retry waits a few seconds
DEFAULT_RETRY = {
    "max_attempts": 3,
    "initial_delay": 5.0,
    "backoff": 2.0,
    "max_delay": 60.0,
}

DEFAULT_SOLC_VERSION = "0.8.33"
DEFAULT_ZKSOLC_VERSION = "1.4.1"

# Built-in deployment targets
# Same shape as a networks.json file, see parsers.parse_network_config
NETWORK_CONFIG = {
    "somnia-testnet": {
        "rpcUrl": "https://dream-rpc.somnia.network",
        "chainId": 50312,
        "compilerProfile": {
            "kind": "standard",
            "version": DEFAULT_SOLC_VERSION,
            "settings": {"optimizer": {"enabled": True, "runs": 200}},
        },
        "explorerProfile": {
            "apiUrl": "https://somnia.w3us.site/api",
            "browserUrl": "https://somnia.w3us.site",
            "verifyUrl": "https://somnia.w3us.site/api",
            "apiKey": EMPTY_API_KEY,
        },
    },
    "zkSyncSepoliaTestnet": {
        "rpcUrl": "https://sepolia.era.zksync.dev",
        "chainId": 300,
        "compilerProfile": {
            "kind": "alternative",
            "ethNetwork": "sepolia",
            "version": DEFAULT_ZKSOLC_VERSION,
            "solcVersion": DEFAULT_SOLC_VERSION,
            "settings": {"optimizer": {"enabled": True}},
        },
        "explorerProfile": {
            "browserUrl": "https://sepolia.explorer.zksync.io",
            "verifyUrl": "https://explorer.sepolia.era.zksync.dev/contract_verification",
        },
    },
    "zkSyncMainnet": {
        "rpcUrl": "https://mainnet.era.zksync.io",
        "chainId": 324,
        "compilerProfile": {
            "kind": "alternative",
            "ethNetwork": "mainnet",
            "version": DEFAULT_ZKSOLC_VERSION,
            "solcVersion": DEFAULT_SOLC_VERSION,
            "settings": {"optimizer": {"enabled": True}},
        },
        "explorerProfile": {
            "browserUrl": "https://explorer.zksync.io",
            "verifyUrl": "https://zksync2-mainnet-explorer.zksync.io/contract_verification",
        },
    },
}
