"""Shared data models used across the registry and resolution engines."""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

Provider = Callable[[Any], Awaitable[Any] | Any]


@dataclass
class ModelConfig:
    """Raw model registration input, validated by ``ModelRegistry.create_model``."""

    name: Any = None
    provider: Any = None
    key: Any = None
    children: Any = None
    aliases: Any = None
    collapsables: Any = None


@dataclass(frozen=True)
class Model:
    """A registered model.

    ``name`` is lower-cased. ``children``, ``aliases`` and ``collapsables`` are
    de-duplicated and keep declaration order and case, since they double as
    document field names. ``aliases`` always starts with the model's own name.
    """

    name: str
    provider: Provider = field(repr=False, compare=False)
    key: str | None = None
    children: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()
    collapsables: tuple[str, ...] = ()

    @property
    def is_keyless(self) -> bool:
        return self.key is None

    @property
    def collapsed_fields(self) -> tuple[str, ...]:
        """Fields kept when a child of this model is collapsed (key first)."""
        fields = (self.key,) if self.key else ()
        return fields + tuple(c for c in self.collapsables if c != self.key)

    def matches(self, name: str) -> bool:
        """True if ``name`` is this model's name or one of its aliases."""
        lowered = name.lower()
        return any(alias.lower() == lowered for alias in self.aliases)


@dataclass
class ExpandRequest:
    """Request-object form of an expand/collapse call."""

    model: str
    data: Any
    path: str | None = None
