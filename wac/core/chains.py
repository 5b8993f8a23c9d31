"""Chain metadata, protocol and bridge tables shared by the analyzers."""

from typing import Any, Dict, List, Optional, Tuple

ETHEREUM = 1
POLYGON = 137
ARBITRUM = 42161
OPTIMISM = 10
BASE = 8453

CHAIN_METADATA: Dict[int, Dict[str, Any]] = {
    ETHEREUM: {
        'name': 'Ethereum',
        'aliases': ['ethereum', 'eth mainnet', 'mainnet', 'main net', 'l1'],
        'native_symbol': 'ETH',
        'gas_multiplier': 1.0,
    },
    POLYGON: {
        'name': 'Polygon',
        'aliases': ['polygon', 'matic'],
        'native_symbol': 'MATIC',
        'gas_multiplier': 0.1,
    },
    ARBITRUM: {
        'name': 'Arbitrum',
        'aliases': ['arbitrum', 'arb'],
        'native_symbol': 'ETH',
        'gas_multiplier': 0.3,
    },
    OPTIMISM: {
        'name': 'Optimism',
        'aliases': ['optimism', 'op'],
        'native_symbol': 'ETH',
        'gas_multiplier': 0.3,
    },
    BASE: {
        'name': 'Base',
        'aliases': ['base', 'base mainnet'],
        'native_symbol': 'ETH',
        'gas_multiplier': 0.2,
    },
}

# Order in which balances are inspected.
PORTFOLIO_CHAINS: Tuple[int, ...] = (ETHEREUM, POLYGON, ARBITRUM, OPTIMISM, BASE)

CHAIN_ALIAS_TO_ID: Dict[str, int] = {
    alias: chain_id
    for chain_id, details in CHAIN_METADATA.items()
    for alias in details.get('aliases', [])
}

BASE_SWAP_GAS_USD = 50.0
BRIDGE_FEE_USD = 10.0
CHEAP_GAS_THRESHOLD_USD = 20.0

# (protocol, confidence) per chain
CHAIN_PROTOCOLS: Dict[int, List[Tuple[str, float]]] = {
    ETHEREUM: [
        ('Uniswap V3', 0.95),
        ('Uniswap V2', 0.9),
        ('1inch', 0.9),
        ('SushiSwap', 0.85),
    ],
    POLYGON: [
        ('QuickSwap', 0.9),
        ('SushiSwap', 0.85),
        ('1inch', 0.9),
    ],
    ARBITRUM: [
        ('Uniswap V3', 0.95),
        ('SushiSwap', 0.85),
        ('Balancer', 0.8),
    ],
    OPTIMISM: [
        ('Velodrome', 0.9),
        ('Uniswap V3', 0.95),
    ],
    BASE: [
        ('Aerodrome', 0.9),
        ('Uniswap V3', 0.95),
    ],
}

BRIDGES: List[Tuple[str, float]] = [
    ('Hop Protocol', 0.9),
    ('Across', 0.85),
    ('Synapse', 0.8),
]

DESTINATION_SWAP_PROTOCOL = ('Uniswap V3', 0.9)


def chain_name(chain_id: int) -> str:
    details = CHAIN_METADATA.get(chain_id)
    if details:
        return details['name']
    return f"Chain {chain_id}"


def gas_multiplier(chain_id: int) -> float:
    return CHAIN_METADATA.get(chain_id, {}).get('gas_multiplier', 1.0)


def resolve_chain(name: str) -> Optional[int]:
    """Map a user supplied chain name or alias to its chain id."""
    if not name:
        return None
    return CHAIN_ALIAS_TO_ID.get(name.strip().lower())


def protocols_for(chain_id: int) -> List[Tuple[str, float]]:
    return list(CHAIN_PROTOCOLS.get(chain_id, []))


__all__ = [
    'ETHEREUM',
    'POLYGON',
    'ARBITRUM',
    'OPTIMISM',
    'BASE',
    'CHAIN_METADATA',
    'CHAIN_ALIAS_TO_ID',
    'PORTFOLIO_CHAINS',
    'CHAIN_PROTOCOLS',
    'BRIDGES',
    'DESTINATION_SWAP_PROTOCOL',
    'BASE_SWAP_GAS_USD',
    'BRIDGE_FEE_USD',
    'CHEAP_GAS_THRESHOLD_USD',
    'chain_name',
    'gas_multiplier',
    'resolve_chain',
    'protocols_for',
]
