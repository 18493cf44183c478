"""Base abstraction for signal providers.

Each provider has a unique name and an async ``extract`` method that
returns an :class:`~founder_signal.models.ExtractionResult`.  Providers
are registered in a module-level registry so the API layer can pick one
by name from configuration.
"""

import math
from abc import ABC, abstractmethod
from typing import Any, Sequence

from ...models import ExtractionResult

DEFAULT_LIMIT = 25
MAX_LIMIT = 100


def normalize_limit(value: Any) -> int:
    """Coerce a caller-supplied limit into ``1..MAX_LIMIT``.

    Missing, non-numeric, non-finite and non-positive values fall back to
    ``DEFAULT_LIMIT``; everything else is floored and capped.
    """
    if isinstance(value, str):
        value = value.strip() or None
    try:
        n = float(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_LIMIT
    if not math.isfinite(n):
        return DEFAULT_LIMIT
    n = math.floor(n)
    if n <= 0:
        return DEFAULT_LIMIT
    return min(n, MAX_LIMIT)


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class SignalProvider(ABC):
    """Abstract base class for named signal providers.

    Subclasses must implement ``name`` (property) and ``extract``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name identifying this provider (e.g. ``hackernews``)."""
        ...

    @abstractmethod
    async def extract(
        self,
        fetcher,
        keywords: Sequence[str],
        limit: int = DEFAULT_LIMIT,
        subreddits: Sequence[str] | None = None,
    ) -> ExtractionResult:
        """Produce signal items matching *keywords*.

        Parameters
        ----------
        fetcher:
            A :class:`~founder_signal.lib.fetch.JsonFetcher` bound to the
            content source.
        keywords:
            Non-empty list of keywords; an item matches when its title
            contains any of them (case-insensitive).
        limit:
            Maximum number of items to return, already normalized.
        subreddits:
            Source categories requested by the caller.  Providers may
            ignore them.

        Returns
        -------
        ExtractionResult
        """
        ...


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_providers: dict[str, SignalProvider] = {}


def register_provider(provider: SignalProvider) -> None:
    """Register *provider* under its lower-cased name.

    Raises ``ValueError`` when another provider already holds the name, so
    a second registration cannot silently replace the configured source.
    """
    key = provider.name.lower()
    existing = _providers.get(key)
    if existing is not None and existing is not provider:
        raise ValueError(f"signal provider {key!r} is already registered")
    _providers[key] = provider


def get_provider(name: str) -> SignalProvider | None:
    """Provider configured as *name* (case and surrounding space ignored), or ``None``."""
    return _providers.get(name.strip().lower())


def list_providers() -> list[str]:
    return sorted(_providers)
