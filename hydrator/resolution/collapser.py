"""Collapse (dehydration) of resolved children back to key-only stubs."""

import copy
from typing import Any

from hydrator.config import get_logger
from hydrator.domain.errors import ModelLookupError
from hydrator.domain.field_path import MISSING, get_path, set_path
from hydrator.domain.models import Model
from hydrator.registry import ModelRegistry

logger = get_logger(__name__)


class CollapseEngine:
    """Projects each child of a document down to its key and collapsable fields.

    The inverse of ``ExpandEngine`` with respect to the key field only: fields
    outside ``key`` + ``collapsables`` are dropped. Children whose model has
    neither are left as they are.

    Args:
        registry: Registry the model names are looked up in.
    """

    def __init__(self, registry: ModelRegistry) -> None:
        self._registry = registry

    def collapse(self, model_name: str, document: Any, path: str | None = None) -> Any:
        """Collapse the children of ``document`` (or of the part at ``path``).

        Args:
            model_name: Name or alias of the document's model.
            document: Object, or list of objects, to collapse. Never mutated.
            path: Optional dotted path to the part of ``document`` to collapse.

        Returns:
            The collapsed document. With ``path``, a copy of the whole document
            with only that part replaced.

        Raises:
            ModelLookupError: If the model or one of its children is unknown.
            ValueError: If ``document`` is None.
        """
        if not model_name:
            raise ModelLookupError("No model name was provided to collapse.")
        if document is None:
            raise ValueError("No data was provided to collapse.")

        model = self._registry.get_model(model_name)

        if not path:
            return self._collapse_value(model, document, None)
        if isinstance(document, list):
            return [self._collapse_at(model, item, path) for item in document]
        return self._collapse_at(model, document, path)

    def _collapse_at(self, model: Model, document: Any, path: str) -> Any:
        target = get_path(document, path)
        result = copy.deepcopy(document)
        if target is MISSING:
            logger.debug("Nothing to collapse for model %s at path %s", model.name, path)
            return result

        set_path(result, path, self._collapse_value(model, target, path))
        return result

    def _collapse_value(self, model: Model, value: Any, path: str | None) -> Any:
        if isinstance(value, list):
            return [self._collapse_value(model, item, None) for item in value]
        if isinstance(value, dict):
            return self._collapse_object(model, value, path)
        return copy.deepcopy(value)

    def _collapse_object(self, model: Model, data: dict[str, Any], path: str | None) -> dict[str, Any]:
        data = copy.deepcopy(data)
        child_keys = self._registry.child_keys(model)
        if path and path not in child_keys:
            child_keys.append(path)

        logger.debug("Collapsing model %s with keys: %s", model.name, ', '.join(child_keys))

        for key in child_keys:
            child = get_path(data, key)
            if child is MISSING or child is None:
                continue

            child_model = self._registry.get_model(key)
            fields = child_model.collapsed_fields
            if not fields:
                logger.warning("Model %s has no key or collapsables, leaving child %s of model %s as is",
                               child_model.name, key, model.name)
                continue

            logger.debug("Collapsing child %s of model %s to fields: %s", key, model.name, ', '.join(fields))
            if isinstance(child, list):
                set_path(data, key, [_pick(item, fields) for item in child])
            else:
                set_path(data, key, _pick(child, fields))

        return data


def _pick(value: Any, fields: tuple[str, ...]) -> Any:
    """Keep only ``fields`` of an object; non-object references are already collapsed."""
    if not isinstance(value, dict):
        return value
    return {f: value[f] for f in fields if f in value}
