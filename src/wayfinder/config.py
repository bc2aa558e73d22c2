"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from wayfinder.errors import ConfigurationError

MODES = frozenset({"history", "hash", "abstract"})


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(production=True, base="/app", mode="hash")
    """

    # Diagnostics: production silences warnings without changing results
    production: bool = False

    # Upper bound on chained redirect/alias re-matches for one navigation
    max_redirects: int = 16

    # Href generation
    base: str = ""
    mode: str = "history"

    # Custom query codecs (default: wayfinder.routing.query)
    parse_query: Callable[[str], dict[str, Any]] | None = None
    stringify_query: Callable[[Mapping[str, Any]], str] | None = None

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            msg = f"Invalid router mode {self.mode!r}. Expected one of: {', '.join(sorted(MODES))}."
            raise ConfigurationError(msg)
        if self.max_redirects < 1:
            msg = f"max_redirects must be at least 1, got {self.max_redirects}."
            raise ConfigurationError(msg)

    @property
    def diagnose(self) -> bool:
        """Whether non-fatal diagnostics are logged."""
        return not self.production
