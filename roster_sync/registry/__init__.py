"""User registry (source of truth) readers."""

from .errors import RegistryError
from .reader import RegistryReader

__all__ = [
    'RegistryError',
    'RegistryReader',
]
