"""Base provider interface: anything that streams an assistant reply."""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


@dataclass
class ProviderConfig:
    """Configuration for a provider."""
    model: str
    base_url: Optional[str] = None
    api_key: str = ""
    temperature: float = 0.7
    max_tokens: Optional[int] = None
    options: Dict[str, Any] = field(default_factory=dict)


class BaseProvider(ABC):
    """Abstract base class for reply producers."""

    def __init__(self, config: ProviderConfig):
        self.config = config
        self.name = self.__class__.__name__
        self._last_usage: Optional[tuple[int, int]] = None

    @property
    def last_usage(self) -> Optional[tuple[int, int]]:
        """Token usage from last stream call: (input_tokens, output_tokens)."""
        return self._last_usage

    @abstractmethod
    def stream(
        self,
        prompt: str,
        system: Optional[str] = None,
        history: Optional[List[Dict[str, str]]] = None,
        stop_event: Optional[threading.Event] = None,
    ) -> Iterator[str]:
        """Stream reply text.

        Implementations must return promptly once ``stop_event`` is set.
        """

    def ask(self, prompt: str, system: Optional[str] = None) -> str:
        """Collect a complete reply."""
        return "".join(self.stream(prompt, system))

    def validate(self) -> bool:
        """Validate provider configuration."""
        return bool(self.config.model)

    def close(self) -> None:
        """Release any held resources."""


def build_messages(
    prompt: str,
    system: Optional[str] = None,
    history: Optional[List[Dict[str, str]]] = None,
) -> List[Dict[str, str]]:
    """Chat-style message list: system, prior turns, then the new prompt."""
    messages: List[Dict[str, str]] = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.extend(history or [])
    messages.append({"role": "user", "content": prompt})
    return messages
