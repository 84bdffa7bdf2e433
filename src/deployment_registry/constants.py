"""Configuration constants for deployment-registry library."""

# EIP-1967 storage slots: keccak256("eip1967.proxy.<name>") - 1
IMPLEMENTATION_SLOT = "0x360894a13ba1a3210667c828492db98dca3e2076cc3735a920a3ca505d382bbc"
ADMIN_SLOT = "0xb53127684a568b3173ae13b9f8a6016e243e63b6e8ee1178d6a717850b5d6103"

ZERO_WORD = b"\x00" * 32

# Reserved registry key holding the numeric chain id (never a record)
CHAIN_ID_KEY = "chainId"

# Records forced to match the bridge authority config
NTT_MANAGER = "NttManager"
NTT_TRANSCEIVER = "NttTransceiver"

# Human-readable labels for log output and authority-injected records
CONTRACT_DISPLAY_NAMES = {
    "WCT": "WCT Token",
    "L2WCT": "L2WCT Token",
    "AdminTimelock": "Admin Timelock",
    "ManagerTimelock": "Manager Timelock",
    NTT_MANAGER: "NTT Manager",
    NTT_TRANSCEIVER: "NTT Transceiver",
    "LockedTokenStakerBackers": "LockedTokenStaker Backers",
    "LockedTokenStakerReown": "LockedTokenStaker Reown",
    "LockedTokenStakerWalletConnect": "LockedTokenStaker WalletConnect",
    "MerkleVesterBackers": "MerkleVester Backers",
    "MerkleVesterReown": "MerkleVester Reown",
    "MerkleVesterWalletConnect": "MerkleVester WalletConnect",
    "StakingRewardsCalculator": "StakingRewardCalculator",
}

# Chain table keyed by chain id
# authority_chain_name is the chain's key in the bridge authority config
CHAIN_CONFIG = {
    1: {
        "name": "Ethereum",
        "rpc_env": "ETH_RPC_URL",
        "default_rpc_url": "https://ethereum-rpc.publicnode.com",
        "authority_chain_name": "Ethereum",
    },
    10: {
        "name": "OP Mainnet",
        "rpc_env": "OP_RPC_URL",
        "default_rpc_url": "https://mainnet.optimism.io",
        "authority_chain_name": "Optimism",
    },
    8453: {
        "name": "Base",
        "rpc_env": "BASE_RPC_URL",
        "default_rpc_url": "https://mainnet.base.org",
        "authority_chain_name": None,
    },
}
