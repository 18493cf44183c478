"""Signal providers for the extraction endpoint.

Provides an abstraction for named providers that can be called directly
(as a pipeline step) or selected by configuration from the API layer.
"""

from .base import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    SignalProvider,
    get_provider,
    list_providers,
    normalize_limit,
    register_provider,
)
from .hackernews import HackerNewsProvider
from .stub import StubProvider

# Register built-in providers
_hackernews = HackerNewsProvider()
register_provider(_hackernews)

_stub = StubProvider()
register_provider(_stub)

__all__ = [
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "SignalProvider",
    "get_provider",
    "list_providers",
    "normalize_limit",
    "register_provider",
    "HackerNewsProvider",
    "StubProvider",
]
