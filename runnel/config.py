"""Configuration management for Runnel."""

import copy
import logging
import os
from pathlib import Path
from typing import Optional, Dict, Any, FrozenSet

import yaml

from .follow import DEFAULT_TOLERANCE
from .providers.base import ProviderConfig
from .segments import DEFAULT_THRESHOLDS, ReclassifyThresholds, language_set

_log = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "providers": {
        "ollama": {
            "enabled": True,
            "base_url": "${OLLAMA_HOST}",
            "model": "llama3.1",
            "temperature": 0.7,
        },
        "replay": {
            "enabled": False,
            "path": "",
            "chunk_size": 4,
            "delay": 0.02,
        },
    },
    "defaults": {
        "provider": "ollama",
        "system_prompt": "",
    },
    "render": {
        "follow_tolerance": DEFAULT_TOLERANCE,
        "symbol_density": DEFAULT_THRESHOLDS.symbol_density,
        "min_sentence_words": DEFAULT_THRESHOLDS.min_sentence_words,
        "lead_ins": list(DEFAULT_THRESHOLDS.lead_ins),
        "extra_languages": [],
    },
    "logging": {
        "level": "WARNING",
        "file": "",
    },
}

# Keys under a provider entry that map straight onto ProviderConfig fields.
_PROVIDER_FIELDS = ("model", "base_url", "api_key", "temperature", "max_tokens")


class ConfigManager:
    """Manage Runnel configuration from YAML."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path or "~/.config/runnel/config.yaml").expanduser()
        self.data = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            self._create_default_config()
        return self._read_yaml()

    def _read_yaml(self) -> Dict[str, Any]:
        """Read and parse YAML file."""
        try:
            with open(self.config_path, "r") as f:
                content = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            _log.warning("error reading config %s: %s", self.config_path, e)
            return {}
        if content is not None and not isinstance(content, dict):
            _log.warning("ignoring config %s: top level is not a mapping", self.config_path)
            return {}
        return content or {}

    def _create_default_config(self) -> None:
        """Create default configuration file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w") as f:
            yaml.dump(DEFAULT_CONFIG, f, default_flow_style=False, sort_keys=False)

    def _section(self, name: str) -> Dict[str, Any]:
        defaults = copy.deepcopy(DEFAULT_CONFIG.get(name, {}))
        config = self.data.get(name) or {}
        return {**defaults, **config}

    def _resolve_env_var(self, value: Any) -> Any:
        """Resolve environment variable references like ${VAR_NAME}."""
        if not isinstance(value, str) or not value.startswith("${") or not value.endswith("}"):
            return value
        var_name = value[2:-1]
        return os.getenv(var_name, "")

    # -- Providers ---------------------------------------------------------

    def get_provider_config(self, provider_name: str) -> Optional[ProviderConfig]:
        """Get configuration for a specific provider, or None if disabled."""
        provider_data = self.data.get("providers", {}).get(provider_name, {})
        if not provider_data.get("enabled", False):
            return None

        resolved = {k: self._resolve_env_var(v) for k, v in provider_data.items()}
        options = {k: v for k, v in resolved.items()
                   if k not in _PROVIDER_FIELDS and k != "enabled"}
        return ProviderConfig(
            model=resolved.get("model") or "",
            base_url=resolved.get("base_url") or None,
            api_key=resolved.get("api_key") or "",
            temperature=float(resolved.get("temperature", 0.7)),
            max_tokens=resolved.get("max_tokens"),
            options=options,
        )

    def get_default_provider(self) -> str:
        """Get the default provider name."""
        return self.data.get("defaults", {}).get("provider", "ollama")

    def get_system_prompt(self) -> str:
        return self._section("defaults").get("system_prompt") or ""

    def get_enabled_providers(self) -> list[str]:
        """Get list of enabled provider names."""
        providers = self.data.get("providers", {})
        return [name for name, config in providers.items() if config.get("enabled", False)]

    def set_provider_option(self, provider_name: str, key: str, value: Any) -> None:
        """Override one provider setting in memory (CLI flags)."""
        entry = self.data.setdefault("providers", {}).setdefault(provider_name, {})
        entry[key] = value

    # -- Rendering ---------------------------------------------------------

    def get_render_config(self) -> Dict[str, Any]:
        """Get the render section merged over defaults."""
        return self._section("render")

    def get_thresholds(self) -> ReclassifyThresholds:
        """Trailing-prose heuristic settings."""
        render = self.get_render_config()
        return ReclassifyThresholds(
            symbol_density=float(render["symbol_density"]),
            min_sentence_words=int(render["min_sentence_words"]),
            lead_ins=tuple(render["lead_ins"] or ()),
        )

    def get_languages(self) -> FrozenSet[str]:
        """Language allow-list: the built-in set plus configured extras."""
        return language_set(self.get_render_config().get("extra_languages") or ())

    def get_follow_tolerance(self) -> int:
        return int(self.get_render_config()["follow_tolerance"])

    # -- Logging -----------------------------------------------------------

    def get_logging_config(self) -> Dict[str, Any]:
        return self._section("logging")

    def save(self) -> None:
        """Save configuration to file."""
        with open(self.config_path, "w") as f:
            yaml.dump(self.data, f, default_flow_style=False, sort_keys=False)
