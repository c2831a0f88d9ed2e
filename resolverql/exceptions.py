"""Error types raised while assembling or serving a resolverql schema."""
from __future__ import annotations

from graphql import GraphQLError

__all__ = [
    "ResolverQLError",
    "MetadataError",
    "RegistrySealedError",
    "ClientSafeError",
    "TypeNotFound",
]


class ResolverQLError(Exception):
    """Base class for resolverql configuration errors."""


class MetadataError(ResolverQLError):
    """Resolver metadata is missing or malformed.

    Raised during schema assembly; a schema is never built from a resolver
    whose metadata cannot be compiled.
    """


class RegistrySealedError(ResolverQLError):
    """A type was registered after the schema had been built."""


class ClientSafeError(ResolverQLError):
    """Error raised by resolver code whose message may be shown to clients."""


class TypeNotFound(GraphQLError):
    """Raised when a type name is neither built-in nor registered."""

    def __init__(self, type_name: str):
        super().__init__(f"Type '{type_name}' is not found!")
        self.type_name = type_name
