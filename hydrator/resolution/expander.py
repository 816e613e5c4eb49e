"""Expansion (hydration) of child references into resolved entities.

Walks one level of a document's children and swaps every reference for what
the child model's provider returns for it. Child fields are handled one at a
time; the elements of an array-valued child are looked up concurrently.
"""

import asyncio
import copy
import inspect
from typing import Any

from hydrator.config import get_logger
from hydrator.domain.enums import ProviderErrorPolicy
from hydrator.domain.errors import ModelLookupError, ProviderError
from hydrator.domain.field_path import MISSING, get_path, set_path
from hydrator.domain.models import Model
from hydrator.registry import ModelRegistry
from hydrator.resolution.cache import ResolutionCache

logger = get_logger(__name__)


class ExpandEngine:
    """Resolves foreign-key references in documents using model providers.

    A provider result of ``None``, ``{}`` or ``[]`` counts as no match: the
    reference is kept and a warning is logged. Any other value, falsy
    scalars included, replaces the reference. With ``ABORT``, the first
    failure cancels the lookups still running for that call.

    Args:
        registry: Registry the model names are looked up in.
        on_provider_error: ``SKIP`` keeps the unresolved reference and logs the
            failure; ``ABORT`` raises ``ProviderError``.
    """

    def __init__(
        self,
        registry: ModelRegistry,
        on_provider_error: ProviderErrorPolicy = ProviderErrorPolicy.SKIP,
    ) -> None:
        self._registry = registry
        self._on_provider_error = on_provider_error

    async def expand(
        self,
        model_name: str,
        document: Any,
        path: str | None = None,
        cache: ResolutionCache | None = None,
    ) -> Any:
        """Expand the children of ``document`` (or of the part at ``path``).

        Args:
            model_name: Name or alias of the document's model.
            document: Object, or list of objects, to expand. Never mutated.
            path: Optional dotted path to the part of ``document`` to expand.
            cache: Cache to share with an enclosing call; a fresh one is used
                when omitted.

        Returns:
            The expanded document. With ``path``, a copy of the whole document
            with only that part replaced.

        Raises:
            ModelLookupError: If the model or one of its children is unknown.
            ValueError: If ``document`` is None.
            ProviderError: If a provider fails and the policy is ``ABORT``.
        """
        if not model_name:
            raise ModelLookupError("No model name was provided to expand.")
        if document is None:
            raise ValueError("No data was provided to expand.")

        model = self._registry.get_model(model_name)
        owns_cache = cache is None
        if owns_cache:
            cache = ResolutionCache()

        try:
            if not path:
                return await self._expand_value(model, document, None, cache)
            if isinstance(document, list):
                return await _gather_or_cancel(self._expand_at(model, item, path, cache) for item in document)
            return await self._expand_at(model, document, path, cache)
        except BaseException:
            if owns_cache:
                cancelled = cache.cancel_pending()
                if cancelled:
                    logger.debug("Cancelled %d pending provider calls for model %s", cancelled, model.name)
            raise

    async def _expand_at(self, model: Model, document: Any, path: str, cache: ResolutionCache) -> Any:
        target = get_path(document, path)
        result = copy.deepcopy(document)
        if target is MISSING:
            logger.debug("Nothing to expand for model %s at path %s", model.name, path)
            return result

        set_path(result, path, await self._expand_value(model, target, path, cache))
        return result

    async def _expand_value(self, model: Model, value: Any, path: str | None, cache: ResolutionCache) -> Any:
        if isinstance(value, list):
            logger.debug("Expanding %d items for model %s", len(value), model.name)
            # order of results follows input order, whatever the provider latency
            return await _gather_or_cancel(self._expand_value(model, item, None, cache) for item in value)
        if isinstance(value, dict):
            return await self._expand_object(model, value, path, cache)
        return copy.deepcopy(value)

    async def _expand_object(
        self, model: Model, data: dict[str, Any], path: str | None, cache: ResolutionCache
    ) -> dict[str, Any]:
        data = copy.deepcopy(data)
        child_keys = self._registry.child_keys(model)
        if path and path not in child_keys:
            child_keys.append(path)

        if path:
            logger.debug("Expanding model %s at path %s with keys: %s", model.name, path, ', '.join(child_keys))
        else:
            logger.debug("Expanding model %s with keys: %s", model.name, ', '.join(child_keys))

        # child fields settle strictly one at a time
        for key in child_keys:
            child = get_path(data, key)
            if child is MISSING or child is None:
                continue

            child_model = self._registry.get_model(key)
            logger.debug("Found child %s for parent model %s in field %s", child_model.name, model.name, key)

            if isinstance(child, list):
                resolved = await _gather_or_cancel(self._resolve(child_model, ref, cache) for ref in child)
                set_path(data, key, resolved)
            else:
                set_path(data, key, await self._resolve(child_model, child, cache))

        return data

    async def _resolve(self, model: Model, reference: Any, cache: ResolutionCache) -> Any:
        """Resolve one reference, returning the entity or the reference itself."""
        key_value = self._key_value(model, reference)
        if key_value is MISSING:
            logger.warning("Child of model %s has no '%s' field, leaving it unresolved: %r",
                           model.name, model.key, reference)
            return reference

        lookup, hit = cache.get_or_create(
            model.name, key_value,
            lambda: asyncio.ensure_future(self._call_provider(model, key_value)),
        )
        if hit:
            logger.debug("Object found in cache for %s using key %s and value %r", model.name, model.key, key_value)

        try:
            entity = await lookup
        except asyncio.CancelledError:
            if lookup.cancelled():
                cache.discard(model.name, key_value, lookup)
            raise
        except Exception as exc:
            cache.discard(model.name, key_value, lookup)
            return self._handle_provider_error(model, reference, key_value, exc)

        if _is_no_match(entity):
            logger.warning("Provider for model %s found no match for %r, leaving it unresolved", model.name, key_value)
            return reference
        return entity

    @staticmethod
    async def _call_provider(model: Model, key_value: Any) -> Any:
        logger.debug("Calling provider for model %s using key %s and value %r", model.name, model.key, key_value)
        result = model.provider(key_value)
        if inspect.isawaitable(result):
            result = await result
        return result

    @staticmethod
    def _key_value(model: Model, reference: Any) -> Any:
        """The value handed to the provider: ``reference[key]`` for keyed object refs, else the ref."""
        if model.key and isinstance(reference, dict):
            return reference.get(model.key, MISSING)
        return reference

    def _handle_provider_error(self, model: Model, reference: Any, key_value: Any, exc: Exception) -> Any:
        if self._on_provider_error is ProviderErrorPolicy.ABORT:
            raise ProviderError(model.name, key_value) from exc
        logger.error("Provider for model %s was unable to resolve an object for child %r. Skipping child.",
                     model.name, reference, exc_info=exc)
        return reference


async def _gather_or_cancel(aws) -> list[Any]:
    """Await concurrently, in input order; on the first failure cancel the rest before re-raising."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def _is_no_match(entity: Any) -> bool:
    return entity is None or (isinstance(entity, (dict, list)) and not entity)
