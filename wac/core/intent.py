"""Keyword and regex based swap intent parsing."""

from __future__ import annotations

import logging
import re
from typing import Optional, Tuple

from ..types.intent import RoutePreference, SwapIntent
from .chains import resolve_chain

logger = logging.getLogger(__name__)

SWAP_KEYWORDS: Tuple[str, ...] = (
    'swap',
    'exchange',
    'trade',
    'convert',
    'buy',
    'sell',
)

DEFAULT_AMOUNT = 100.0
DEFAULT_FROM_TOKEN = 'ETH'
DEFAULT_TO_TOKEN = 'USDC'

_NUMBER = r'(\d+(?:\.\d+)?)'

# Tried in order; the first that matches wins.
_USD_AMOUNT_RE = re.compile(_NUMBER + r'\s*(?:dollars?|usd|usdc)', re.IGNORECASE)
_TOKEN_AMOUNT_RE = re.compile(_NUMBER + r'\s*(eth|ethereum|btc|bitcoin)', re.IGNORECASE)

_SWAP_FOR_USD_RE = re.compile(r'swap\s+(\w+)\s+for\s+' + _NUMBER + r'\s*(?:dollars?|usd|usdc)', re.IGNORECASE)
_SWAP_AMOUNT_TO_RE = re.compile(r'swap\s+' + _NUMBER + r'\s*(\w+)\s+to\s+(\w+)', re.IGNORECASE)

_CROSS_CHAIN_RE = re.compile(r'\bfrom\s+([a-z]+)\s+to\s+([a-z]+)')
_ON_CHAIN_RE = re.compile(r'\bon\s+([a-z]+)')


def normalize_token(symbol: str) -> str:
    """Collapse the spellings users type into the symbols the analyzers know."""
    token = symbol.upper()
    if token == 'ETHEREUM':
        return 'ETH'
    if token == 'BITCOIN':
        return 'BTC'
    if 'DOLLAR' in token or 'USD' in token:
        return 'USDC'
    return token


def is_swap_request(prompt: str) -> bool:
    lowered = prompt.lower()
    return any(keyword in lowered for keyword in SWAP_KEYWORDS)


def detect_preference(lowered: str) -> RoutePreference:
    if 'fastest' in lowered or 'quickest' in lowered:
        return 'fastest'
    if 'balanced' in lowered:
        return 'balanced'
    return 'cheapest'


def detect_chains(lowered: str) -> Tuple[Optional[int], Optional[int]]:
    """Return (from_chain, to_chain) mentioned in the prompt, if any."""
    for match in _CROSS_CHAIN_RE.finditer(lowered):
        source = resolve_chain(match.group(1))
        target = resolve_chain(match.group(2))
        if source is not None and target is not None:
            return source, target

    for match in _ON_CHAIN_RE.finditer(lowered):
        chain_id = resolve_chain(match.group(1))
        if chain_id is not None:
            return chain_id, chain_id

    return None, None


def parse_user_intent(prompt: str) -> SwapIntent:
    """
    Parse a free-text prompt into a `SwapIntent`.

    Never raises: anything the patterns do not pin down falls back to swapping
    100 ETH for USDC on the cheapest route.
    """
    lowered = prompt.lower()

    if not is_swap_request(prompt):
        return SwapIntent(type='general', prompt=prompt)

    amount = DEFAULT_AMOUNT
    from_token = DEFAULT_FROM_TOKEN
    to_token = DEFAULT_TO_TOKEN

    usd_match = _USD_AMOUNT_RE.search(prompt)
    if usd_match:
        amount = float(usd_match.group(1))
    else:
        token_match = _TOKEN_AMOUNT_RE.search(prompt)
        if token_match:
            amount = float(token_match.group(1))
            from_token = token_match.group(2).upper()

    if 'swap' in lowered and 'for' in lowered:
        # "swap eth for 100 dollars": sell ETH, receive 100 USD worth of USDC
        for_match = _SWAP_FOR_USD_RE.search(prompt)
        if for_match:
            from_token = for_match.group(1).upper()
            to_token = 'USDC'
            amount = float(for_match.group(2))
    elif 'swap' in lowered and 'to' in lowered:
        # "swap 100 usdc to eth"
        to_match = _SWAP_AMOUNT_TO_RE.search(prompt)
        if to_match:
            amount = float(to_match.group(1))
            from_token = to_match.group(2).upper()
            to_token = to_match.group(3).upper()
    elif 'buy' in lowered or 'purchase' in lowered:
        if 'dollar' in lowered or 'usd' in lowered:
            from_token = 'USDC'
            to_token = 'ETH'

    from_chain, to_chain = detect_chains(lowered)

    intent = SwapIntent(
        type='swap',
        prompt=prompt,
        from_token=normalize_token(from_token),
        to_token=normalize_token(to_token),
        amount=amount,
        preference=detect_preference(lowered),
        from_chain=from_chain,
        to_chain=to_chain,
    )
    logger.debug(
        f"Parsed swap intent: {intent.amount} {intent.from_token} -> {intent.to_token} ({intent.preference})"
    )
    return intent
