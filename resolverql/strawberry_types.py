"""Use ``@strawberry.type`` classes as custom wire types.

Resolvers may contribute strawberry object types instead of hand-built
graphql-core types. The classes are converted by strawberry's own schema
converter; classes referencing each other must be converted in one batch so
they share type instances.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import strawberry
from graphql import GraphQLNamedType, is_introspection_type, is_specified_scalar_type
from strawberry.schema.config import StrawberryConfig

from .exceptions import MetadataError

__all__ = ["is_strawberry_type", "to_graphql_types", "to_graphql_type_map"]

logger = logging.getLogger(__name__)


def is_strawberry_type(obj: Any) -> bool:
    return isinstance(obj, type) and getattr(obj, "__strawberry_definition__", None) is not None


def _object_definition(cls: type):
    definition = getattr(cls, "__strawberry_definition__", None)
    if definition is None:
        raise MetadataError(f"{cls!r} is not a strawberry type")
    if getattr(definition, "is_input", False) or getattr(definition, "is_interface", False):
        raise MetadataError(f"Strawberry type {cls.__name__} must be an object type")
    return definition


def to_graphql_type_map(classes: Iterable[type], config: Optional[StrawberryConfig] = None) -> Dict[str, GraphQLNamedType]:
    """Convert ``classes`` in one batch, keyed by graphql name.

    Besides the given classes, the result holds every custom type they reach
    (nested object types, enums, custom scalars), all sharing one set of
    instances.
    """
    classes = list(classes)
    if not classes:
        return {}
    for cls in classes:
        _object_definition(cls)
    # strawberry only converts types reachable from a schema; the first class
    # serves as a throwaway query root.
    st_schema = strawberry.Schema(query=classes[0], types=classes[1:], config=config or StrawberryConfig())
    type_map = {
        name: gql_type
        for name, gql_type in st_schema._schema.type_map.items()
        if not is_introspection_type(gql_type) and not is_specified_scalar_type(gql_type)
    }
    logger.debug(f"Converted strawberry types: {list(type_map)}")
    return type_map


def to_graphql_types(classes: Iterable[type], config: Optional[StrawberryConfig] = None) -> List[GraphQLNamedType]:
    """Convert strawberry object type classes to graphql-core named types.

    Returns the converted types in the order the classes were given.
    """
    classes = list(classes)
    type_map = to_graphql_type_map(classes, config)
    return [type_map[_object_definition(cls).name] for cls in classes]
