"""Name -> provider class lookup.

Provider modules add themselves with @register_provider("name") at import
time, so discover_providers() only has to import every module in this
package once before the registry is read.
"""

import importlib
import logging
import pkgutil
import sys
from typing import Dict, Type

from ..errors import ProviderError
from .base import BaseProvider, ProviderConfig

_log = logging.getLogger(__name__)

_REGISTRY: Dict[str, Type[BaseProvider]] = {}
_NOT_PROVIDERS = frozenset({"base", "registry"})


def register_provider(name: str):
    """Class decorator: make ``cls`` constructible as provider ``name``."""
    def decorator(cls: Type[BaseProvider]):
        if not (isinstance(cls, type) and issubclass(cls, BaseProvider)):
            raise TypeError(f"{cls!r} is not a BaseProvider subclass")
        _REGISTRY[name] = cls
        return cls
    return decorator


def discover_providers() -> None:
    """Import every provider module in this package.

    Modules that were imported before a clear_registry() are reloaded so
    their decorators run again.
    """
    package = sys.modules[__package__]
    for info in pkgutil.iter_modules(package.__path__):
        if info.name in _NOT_PROVIDERS or info.name.startswith("_"):
            continue
        fqn = f"{__package__}.{info.name}"
        module = sys.modules.get(fqn)
        if module is None:
            importlib.import_module(fqn)
        else:
            importlib.reload(module)
    _log.debug("registered providers: %s", sorted(_REGISTRY))


def get_registry() -> Dict[str, Type[BaseProvider]]:
    """Snapshot of the registry; mutating it leaves the registry alone."""
    return dict(_REGISTRY)


def create_provider(name: str, config: ProviderConfig) -> BaseProvider:
    """Instantiate the provider registered as ``name``."""
    cls = _REGISTRY.get(name)
    if cls is None:
        raise ProviderError(name, f"unknown provider (known: {', '.join(sorted(_REGISTRY)) or 'none'})")
    return cls(config)


def clear_registry() -> None:
    _REGISTRY.clear()
