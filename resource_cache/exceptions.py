"""Exceptions related to resource-cache."""

__all__ = [
    "ResourceCacheException",
    "InputException",
]


class ResourceCacheException(Exception):
    """Generic base exception used for this library."""


class InputException(ResourceCacheException):
    """Raised when the input files or values are not formatted as expected."""
