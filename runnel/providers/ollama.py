"""Ollama provider: streams /api/chat as newline-delimited JSON."""

import json
import logging
import threading
from typing import Dict, Iterator, List, Optional

import httpx

from ..errors import ProviderError
from .base import BaseProvider, ProviderConfig, build_messages
from .registry import register_provider

_log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"


@register_provider("ollama")
class OllamaProvider(BaseProvider):
    """Provider for a local Ollama server."""

    def __init__(self, config: ProviderConfig, client: Optional[httpx.Client] = None):
        super().__init__(config)
        self.base_url = (config.base_url or DEFAULT_BASE_URL).rstrip("/")
        self.client = client or httpx.Client(timeout=httpx.Timeout(60.0, read=None))

    def _payload(self, messages: List[Dict[str, str]]) -> dict:
        options: dict = {"temperature": self.config.temperature}
        if self.config.max_tokens:
            options["num_predict"] = self.config.max_tokens
        options.update(self.config.options.get("model_options", {}))
        return {
            "model": self.config.model,
            "messages": messages,
            "stream": True,
            "options": options,
        }

    def stream(
        self,
        prompt: str,
        system: Optional[str] = None,
        history: Optional[List[Dict[str, str]]] = None,
        stop_event: Optional[threading.Event] = None,
    ) -> Iterator[str]:
        """Stream tokens from Ollama until ``done`` or a stop request."""
        self._last_usage = None
        url = f"{self.base_url}/api/chat"
        payload = self._payload(build_messages(prompt, system, history))
        try:
            with self.client.stream("POST", url, json=payload) as response:
                response.raise_for_status()
                for line in response.iter_lines():
                    if stop_event is not None and stop_event.is_set():
                        _log.debug("stop requested, closing ollama stream")
                        break
                    if not line.strip():
                        continue
                    try:
                        data = json.loads(line)
                    except json.JSONDecodeError:
                        _log.debug("skipping undecodable line: %r", line[:80])
                        continue
                    if data.get("error"):
                        raise ProviderError("ollama", str(data["error"]))
                    message = data.get("message") or {}
                    content = message.get("content") or data.get("response") or ""
                    if content:
                        yield content
                    if data.get("done"):
                        self._last_usage = (
                            data.get("prompt_eval_count", 0),
                            data.get("eval_count", 0),
                        )
                        break
        except httpx.HTTPError as e:
            raise ProviderError("ollama", str(e)) from e

    def _get(self, path: str) -> dict:
        try:
            response = self.client.get(f"{self.base_url}{path}")
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise ProviderError("ollama", str(e)) from e

    def list_models(self) -> List[str]:
        """Names of locally installed models."""
        return [m.get("name", "") for m in self._get("/api/tags").get("models", [])]

    def running_models(self) -> List[str]:
        """Names of models currently loaded in memory."""
        return [m.get("name", "") for m in self._get("/api/ps").get("models", [])]

    def unload_model(self, name: str) -> None:
        """Evict ``name`` from memory (a generate call with keep_alive 0)."""
        payload = {"model": name, "prompt": "", "keep_alive": 0, "stream": False}
        try:
            response = self.client.post(f"{self.base_url}/api/generate", json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ProviderError("ollama", f"failed to unload {name}: {e}") from e
        _log.debug("unloaded model %s", name)

    def close(self) -> None:
        self.client.close()
