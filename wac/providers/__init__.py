from .backend import ApiStatus, BackendClient
from .base import BridgeQuote, ProtocolQuote, QuoteSource, SwapQuote
from .errors import (
    BackendError,
    BackendPayloadError,
    BackendResponseError,
    BackendUnavailableError,
)
from .quotes import RandomQuoteSource, StaticQuoteSource

__all__ = [
    "ApiStatus",
    "BackendClient",
    "BridgeQuote",
    "ProtocolQuote",
    "QuoteSource",
    "SwapQuote",
    "BackendError",
    "BackendPayloadError",
    "BackendResponseError",
    "BackendUnavailableError",
    "RandomQuoteSource",
    "StaticQuoteSource",
]
