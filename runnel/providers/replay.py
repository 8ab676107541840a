"""Replay provider: streams canned text in fixed-size chunks.

Useful for demos and for exercising the renderer without a model server.
The text comes from ``options.path`` (a file) or ``options.text``.
"""

import threading
import time
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from ..errors import ProviderError
from .base import BaseProvider, ProviderConfig
from .registry import register_provider

DEFAULT_CHUNK_SIZE = 4


@register_provider("replay")
class ReplayProvider(BaseProvider):
    """Replays a fixed reply regardless of the prompt."""

    def __init__(self, config: ProviderConfig):
        super().__init__(config)
        self.chunk_size = max(1, int(config.options.get("chunk_size", DEFAULT_CHUNK_SIZE)))
        self.delay = float(config.options.get("delay", 0.0))

    def _load(self) -> str:
        path = self.config.options.get("path")
        if path:
            try:
                return Path(path).expanduser().read_text(encoding="utf-8")
            except OSError as e:
                raise ProviderError("replay", f"cannot read {path}: {e}") from e
        return self.config.options.get("text", "")

    def stream(
        self,
        prompt: str,
        system: Optional[str] = None,
        history: Optional[List[Dict[str, str]]] = None,
        stop_event: Optional[threading.Event] = None,
    ) -> Iterator[str]:
        text = self._load()
        for i in range(0, len(text), self.chunk_size):
            if stop_event is not None and stop_event.is_set():
                break
            yield text[i:i + self.chunk_size]
            if self.delay:
                time.sleep(self.delay)
        self._last_usage = (len(prompt.split()), len(text.split()))

    def validate(self) -> bool:
        return bool(self.config.options.get("path") or self.config.options.get("text"))
