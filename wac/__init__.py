"""wac.ai Talk-to-Invest chat backend."""

__version__ = "0.1.0"
