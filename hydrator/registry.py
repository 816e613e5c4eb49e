"""Model registry for hydrator models."""

from dataclasses import fields
from typing import Any

from hydrator.config import get_logger
from hydrator.domain.errors import ModelConfigError, ModelLookupError
from hydrator.domain.field_path import last_segment
from hydrator.domain.models import Model, ModelConfig

logger = get_logger(__name__)

_CONFIG_FIELDS = {f.name for f in fields(ModelConfig)}


class ModelRegistry:
    """Registry mapping lower-cased model names to ``Model`` definitions.

    Models are registered during setup and only read afterwards, so lookups
    during expansion need no locking.

    Args:
        require_key: Reject models registered without a ``key`` field.
    """

    def __init__(self, require_key: bool = False) -> None:
        self._models: dict[str, Model] = {}
        self._require_key = require_key

    def create_model(self, config: ModelConfig | dict[str, Any] | None = None, **kwargs: Any) -> None:
        """Validate and register a model.

        Args:
            config: A ``ModelConfig`` or a dict with ``name``, ``provider`` and
                optional ``key``, ``children``, ``aliases``, ``collapsables``.
            **kwargs: The same fields as keyword arguments (merged over ``config``).

        Raises:
            ModelConfigError: If a field is missing or mistyped, the name is
                taken, or an alias is already claimed by another model. The
                registry is left unchanged.
        """
        raw = self._merge_config(config, kwargs)
        model = self._build_model(raw)
        self._check_aliases(model)
        self._models[model.name] = model
        logger.debug("Registered model %s (key=%s, children=%s, aliases=%s)",
                     model.name, model.key, list(model.children), list(model.aliases))

    def get_model(self, name: str) -> Model:
        """Look up a model by name or alias, case-insensitively.

        If ``name`` is a path (``inner.book``), only its last segment is used.

        Raises:
            ModelLookupError: If no model name or alias matches.
        """
        if not name or not isinstance(name, str):
            raise ModelLookupError("A model name was not provided.")

        lookup = last_segment(name).lower()
        model = self._models.get(lookup)
        if model is None:
            model = next((m for m in self._models.values() if m.matches(lookup)), None)
        if model is None:
            raise ModelLookupError(f"Unable to find a matching model for: {name}")
        return model

    def child_keys(self, model: Model) -> list[str]:
        """Candidate child field names: declared children, then each child's aliases.

        Raises:
            ModelLookupError: If a declared child is not registered.
        """
        keys: list[str] = list(model.children)
        for child in model.children:
            keys.extend(self.get_model(child).aliases)
        return list(dict.fromkeys(keys))

    def models(self) -> list[Model]:
        return list(self._models.values())

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str) or not name:
            return False
        try:
            self.get_model(name)
        except ModelLookupError:
            return False
        return True

    def __len__(self) -> int:
        return len(self._models)

    # ── Validation ───────────────────────────────────────────────────────

    @staticmethod
    def _merge_config(config: ModelConfig | dict[str, Any] | None, overrides: dict[str, Any]) -> dict[str, Any]:
        if config is None:
            raw: dict[str, Any] = {}
        elif isinstance(config, ModelConfig):
            raw = {f.name: getattr(config, f.name) for f in fields(config)}
        elif isinstance(config, dict):
            raw = dict(config)
        else:
            raise ModelConfigError("A model config must be a dict or ModelConfig.")
        raw.update(overrides)

        unknown = set(raw) - _CONFIG_FIELDS
        if unknown:
            raise ModelConfigError(f"Unknown model config fields: {', '.join(sorted(unknown))}")
        return raw

    def _build_model(self, raw: dict[str, Any]) -> Model:
        name = raw.get('name')
        if not name or not isinstance(name, str):
            raise ModelConfigError("A model name was not provided.")
        name = name.lower()
        if name in self._models:
            raise ModelConfigError(f"A model with this name already exists: {name}")

        provider = raw.get('provider')
        if provider is None:
            raise ModelConfigError("A model provider was not provided.")
        if not callable(provider):
            raise ModelConfigError("A model provider must be a function.")

        key = raw.get('key')
        if key is None or key == '':
            if self._require_key:
                raise ModelConfigError("A model key was not provided.")
            key = None
        elif not isinstance(key, str):
            raise ModelConfigError("A model key must be a string.")

        aliases = _sanitize(raw.get('aliases'), 'aliases')
        return Model(
            name=name,
            provider=provider,
            key=key,
            children=_sanitize(raw.get('children'), 'children'),
            aliases=tuple(dict.fromkeys((name,) + aliases)),
            collapsables=_sanitize(raw.get('collapsables'), 'collapsables'),
        )

    def _check_aliases(self, model: Model) -> None:
        for alias in model.aliases:
            for other in self._models.values():
                if other.matches(alias):
                    raise ModelConfigError(
                        f"Alias '{alias}' of model '{model.name}' is already used by model '{other.name}'."
                    )


def _sanitize(value: Any, label: str) -> tuple[str, ...]:
    """Normalize a string or iterable of strings into an ordered, de-duplicated tuple."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ModelConfigError(f"{label} must be a string or an array of strings.")
    for item in value:
        if not isinstance(item, str):
            raise ModelConfigError(f"{label} must be an array of strings.")
    # sets have no declaration order; sort for a stable one
    items = sorted(value) if isinstance(value, (set, frozenset)) else value
    return tuple(dict.fromkeys(items))
