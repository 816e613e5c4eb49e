"""Process-wide logging toggles.

Two switches gate the ``hydrator`` log channel: verbose debug tracing and
provider-failure reporting. They only affect what is logged, never what
expand/collapse return.
"""

import logging
import os
from dataclasses import dataclass, fields, replace

_TRUTHY = {'1', 'true', 'yes', 'on'}


def _debug_from_env() -> bool:
    return os.environ.get('HYDRATOR_DEBUG', '').strip().lower() in _TRUTHY


@dataclass(frozen=True)
class HydratorConfig:
    """Logging toggles for the hydrator log channel."""

    log_debug: bool = False
    log_errors: bool = True

    @classmethod
    def from_env(cls) -> 'HydratorConfig':
        return cls(log_debug=_debug_from_env())


class _ToggleFilter(logging.Filter):
    """Drops records the current config has switched off."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno <= logging.DEBUG:
            return _config.log_debug
        if record.levelno >= logging.ERROR:
            return _config.log_errors
        return True


_config = HydratorConfig.from_env()
_filter = _ToggleFilter()


def get_logger(name: str) -> logging.Logger:
    """Return a logger whose records honour the current toggles.

    Filters only run on the logger a record is created on, so each module
    logger carries the shared filter itself.
    """
    logger = logging.getLogger(name)
    if _filter not in logger.filters:
        logger.addFilter(_filter)
    return logger


def get_config() -> HydratorConfig:
    """Return the current process-wide config."""
    return _config


def set_config(config: HydratorConfig | dict | None = None, **kwargs) -> HydratorConfig:
    """Update the process-wide config.

    Args:
        config: A full ``HydratorConfig`` to install, or a dict of fields to merge.
        **kwargs: Individual fields to merge (``log_debug``, ``log_errors``).

    Returns:
        The config now in effect.

    Raises:
        TypeError: If an unknown field name is given.
    """
    global _config

    if isinstance(config, HydratorConfig):
        updated = config
    else:
        updated = _config
        kwargs = {**(config or {}), **kwargs}

    known = {f.name for f in fields(HydratorConfig)}
    unknown = set(kwargs) - known
    if unknown:
        raise TypeError(f"Unknown config fields: {', '.join(sorted(unknown))}")

    _config = replace(updated, **{k: bool(v) for k, v in kwargs.items()})
    return _config


def reset_config() -> HydratorConfig:
    """Restore defaults (debug tracing re-read from ``HYDRATOR_DEBUG``)."""
    return set_config(HydratorConfig.from_env())
