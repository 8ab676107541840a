"""Reply producers."""

from .base import BaseProvider, ProviderConfig
from .ollama import OllamaProvider
from .replay import ReplayProvider

__all__ = [
    "BaseProvider",
    "ProviderConfig",
    "OllamaProvider",
    "ReplayProvider",
]
