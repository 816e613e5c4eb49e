"""Expand/collapse coordinator.

Bundles a model registry with the expand and collapse engines so callers
register models and hydrate documents through a single object.
"""

from typing import Any

from hydrator.domain.enums import ProviderErrorPolicy
from hydrator.domain.models import ExpandRequest, Model, ModelConfig
from hydrator.registry import ModelRegistry
from hydrator.resolution.cache import ResolutionCache
from hydrator.resolution.collapser import CollapseEngine
from hydrator.resolution.expander import ExpandEngine


class Hydrator:
    """Registers models and expands/collapses documents against them.

    Args:
        registry: Registry to use. A new, empty one is created when omitted.
        on_provider_error: Provider failure policy passed to the expand engine.
    """

    def __init__(
        self,
        registry: ModelRegistry | None = None,
        on_provider_error: ProviderErrorPolicy = ProviderErrorPolicy.SKIP,
    ) -> None:
        self.registry = registry if registry is not None else ModelRegistry()
        self._expander = ExpandEngine(self.registry, on_provider_error=on_provider_error)
        self._collapser = CollapseEngine(self.registry)

    def create_model(self, config: ModelConfig | dict[str, Any] | None = None, **kwargs: Any) -> None:
        """Register a model. See ``ModelRegistry.create_model``."""
        self.registry.create_model(config, **kwargs)

    def get_model(self, name: str) -> Model:
        """Look up a model by name or alias. See ``ModelRegistry.get_model``."""
        return self.registry.get_model(name)

    async def expand(
        self,
        model_name: str,
        document: Any,
        path: str | None = None,
        cache: ResolutionCache | None = None,
    ) -> Any:
        """Expand one level of child references. See ``ExpandEngine.expand``."""
        return await self._expander.expand(model_name, document, path, cache)

    async def expand_request(self, request: ExpandRequest, cache: ResolutionCache | None = None) -> Any:
        """Expand using a request object instead of positional arguments."""
        return await self._expander.expand(request.model, request.data, request.path, cache)

    def collapse(self, model_name: str, document: Any, path: str | None = None) -> Any:
        """Collapse children back to key stubs. See ``CollapseEngine.collapse``."""
        return self._collapser.collapse(model_name, document, path)

    def collapse_request(self, request: ExpandRequest) -> Any:
        """Collapse using a request object instead of positional arguments."""
        return self._collapser.collapse(request.model, request.data, request.path)
