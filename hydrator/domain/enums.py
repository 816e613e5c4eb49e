"""Domain enums for the hydrator."""
from enum import Enum


class ProviderErrorPolicy(Enum):
    """What expansion does when a provider call fails."""
    SKIP = "skip"
    ABORT = "abort"
