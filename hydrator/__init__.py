"""Expand foreign-key references in nested documents, and collapse them back."""

from hydrator.config import HydratorConfig, get_config, reset_config, set_config
from hydrator.domain.enums import ProviderErrorPolicy
from hydrator.domain.errors import HydratorError, ModelConfigError, ModelLookupError, ProviderError
from hydrator.domain.field_path import MISSING, get_path, has_path, set_path, split_path
from hydrator.domain.models import ExpandRequest, Model, ModelConfig
from hydrator.registry import ModelRegistry
from hydrator.resolution.cache import ResolutionCache
from hydrator.resolution.collapser import CollapseEngine
from hydrator.resolution.expander import ExpandEngine
from hydrator.resolution.hydrator import Hydrator

__all__ = [
    'Hydrator', 'ModelRegistry', 'ExpandEngine', 'CollapseEngine',
    'ResolutionCache', 'Model', 'ModelConfig', 'ExpandRequest',
    'ProviderErrorPolicy', 'HydratorError', 'ModelConfigError',
    'ModelLookupError', 'ProviderError', 'HydratorConfig',
    'get_config', 'set_config', 'reset_config',
    'MISSING', 'get_path', 'has_path', 'set_path', 'split_path',
]

__version__ = '1.0.0'
