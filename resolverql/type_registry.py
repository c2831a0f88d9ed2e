"""Name -> wire type registry shared by every resolver of a schema."""
from __future__ import annotations

import logging
from typing import Dict, Iterator, List

from graphql import GraphQLBoolean, GraphQLFloat, GraphQLInt, GraphQLNamedType, GraphQLString

from .exceptions import RegistrySealedError, TypeNotFound

__all__ = ["BUILTIN_SCALARS", "TypeRegistry"]

logger = logging.getLogger(__name__)

# Short alias and canonical graphql name for each built-in scalar.
BUILTIN_SCALARS: Dict[str, GraphQLNamedType] = {
    "string": GraphQLString,
    GraphQLString.name: GraphQLString,
    "int": GraphQLInt,
    GraphQLInt.name: GraphQLInt,
    "bool": GraphQLBoolean,
    GraphQLBoolean.name: GraphQLBoolean,
    "float": GraphQLFloat,
    GraphQLFloat.name: GraphQLFloat,
}


class TypeRegistry:
    """Holds custom named types; writable until sealed.

    Lookups are lazy: an unknown name only fails when it is resolved, not when
    a resolver referencing it is registered.
    """

    def __init__(self):
        self._types: Dict[str, GraphQLNamedType] = {}
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def register(self, type_: GraphQLNamedType) -> None:
        """Store ``type_`` under its name, replacing a previous registration."""
        if self._sealed:
            raise RegistrySealedError(f"Cannot register type '{type_.name}': schema is already built")
        if type_.name in self._types and self._types[type_.name] is not type_:
            logger.debug(f"Type '{type_.name}' re-registered, replacing previous definition")
        self._types[type_.name] = type_

    def resolve_by_name(self, name: str) -> GraphQLNamedType:
        builtin = BUILTIN_SCALARS.get(name)
        if builtin is not None:
            return builtin
        try:
            return self._types[name]
        except KeyError:
            raise TypeNotFound(name) from None

    def seal(self) -> None:
        self._sealed = True

    def types(self) -> List[GraphQLNamedType]:
        """Registered custom types in registration order."""
        return list(self._types.values())

    def __contains__(self, name: object) -> bool:
        return name in BUILTIN_SCALARS or name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)
