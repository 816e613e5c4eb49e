"""Error types raised by the hydrator."""
from typing import Any


class HydratorError(Exception):
    """Base class for hydrator errors."""
    pass


class ModelConfigError(HydratorError, ValueError):
    """Invalid model registration."""
    pass


class ModelLookupError(HydratorError, LookupError):
    """No registered model matches a name or alias."""
    pass


class ProviderError(HydratorError):
    """A provider failed while expansion was set to abort on provider errors."""

    def __init__(self, model_name: str, key_value: Any, message: str = '') -> None:
        self.model_name = model_name
        self.key_value = key_value
        super().__init__(
            message or f"Provider for model '{model_name}' failed for key {key_value!r}"
        )
