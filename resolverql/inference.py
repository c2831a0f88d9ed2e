"""Python annotation -> graphql wire type inference."""
from __future__ import annotations

import collections.abc
import inspect
import types
from dataclasses import dataclass
from typing import Annotated, Any, ForwardRef, Optional, Union, get_args, get_origin

from graphql import GraphQLList, GraphQLNonNull, GraphQLType, get_nullable_type

from .exceptions import MetadataError
from .metadata import ArgType

__all__ = [
    "DeclaredType", "declared_type", "type_name_of", "wrap_type", "infer_wire_type",
    "strip_annotated", "unwrap_optional", "UNION_ORIGINS",
]

_NONE_TYPE = type(None)

# Python builtins map onto the short scalar aliases understood by the registry.
_SCALAR_NAMES = {
    str: "string",
    int: "int",
    bool: "bool",
    float: "float",
}

UNION_ORIGINS = {Union, types.UnionType}

_LIST_ORIGINS = {
    list, tuple, set, frozenset,
    collections.abc.Sequence, collections.abc.MutableSequence,
    collections.abc.Set, collections.abc.Iterable, collections.abc.Collection,
}


@dataclass(frozen=True)
class DeclaredType:
    """What a Python annotation says about a value.

    ``name`` is ``None`` when the annotation does not name a usable type
    (missing annotation, ``Any``, bare ``list`` or a multi-member union).
    """

    name: Optional[str]
    nullable: bool
    is_list: bool = False


def strip_annotated(annotation: Any) -> Any:
    while get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    return annotation


def unwrap_optional(annotation: Any) -> Any:
    """``Optional[T]`` -> ``T``; other unions -> ``None``; anything else unchanged."""
    ann = strip_annotated(annotation)
    if get_origin(ann) in UNION_ORIGINS:
        members = [m for m in get_args(ann) if m is not _NONE_TYPE]
        return strip_annotated(members[0]) if len(members) == 1 else None
    return ann


def type_name_of(tp: Any) -> Optional[str]:
    """Graphql type name for a single (non-union, non-list) Python type."""
    if isinstance(tp, str):
        return tp or None
    if isinstance(tp, ForwardRef):
        return tp.__forward_arg__
    if tp in _SCALAR_NAMES:
        return _SCALAR_NAMES[tp]
    definition = getattr(tp, "__strawberry_definition__", None)
    if definition is not None and getattr(definition, "name", None):
        return definition.name
    if isinstance(tp, type) and tp is not _NONE_TYPE:
        return tp.__name__
    return None


def declared_type(annotation: Any) -> DeclaredType:
    """Read name, nullability and list-ness from a Python annotation."""
    ann = strip_annotated(annotation)
    if ann is inspect.Parameter.empty or ann is Any:
        return DeclaredType(None, nullable=True)
    if ann is None or ann is _NONE_TYPE:
        return DeclaredType(None, nullable=True)

    nullable = False
    if get_origin(ann) in UNION_ORIGINS:
        members = get_args(ann)
        non_null = [m for m in members if m is not _NONE_TYPE]
        nullable = len(non_null) != len(members)
        if len(non_null) != 1:
            return DeclaredType(None, nullable=nullable)
        ann = strip_annotated(non_null[0])

    origin = get_origin(ann)
    if origin in _LIST_ORIGINS or ann in _LIST_ORIGINS:
        args = [a for a in get_args(ann) if a is not Ellipsis]
        inner = declared_type(args[0]).name if args else None
        return DeclaredType(inner, nullable=nullable, is_list=True)
    return DeclaredType(type_name_of(ann), nullable=nullable)


def wrap_type(base: GraphQLType, *, is_list: bool, nullable: bool) -> GraphQLType:
    """Apply wrappers in the fixed order: base -> list-of -> non-null."""
    wire = base
    if is_list:
        wire = GraphQLList(wire)
    if not nullable:
        wire = GraphQLNonNull(wire)
    return wire


def infer_wire_type(registry, annotation: Any, arg_type: Optional[ArgType] = None, *,
                    has_default: bool = False, where: str = "") -> GraphQLType:
    """Infer the wire type of a parameter or group field.

    An explicit ``ArgType.type_name`` overrides the annotated type name; the
    annotation still decides nullability. A value with a default is always
    nullable.

    Raises:
        MetadataError: Neither the override nor the annotation names a type.
        TypeNotFound: The type name is not built-in and not registered.
    """
    declared = declared_type(annotation)
    if arg_type is not None and arg_type.type_name:
        name = arg_type.type_name
    else:
        name = declared.name
    if not name:
        raise MetadataError(
            f"Cannot infer graphql type for {where or 'argument'}: annotate it with a concrete type "
            f"or add ArgType(type_name=...)"
        )
    wire = wrap_type(
        registry.resolve_by_name(name),
        is_list=declared.is_list or bool(arg_type is not None and arg_type.is_list),
        nullable=declared.nullable,
    )
    if has_default:
        wire = get_nullable_type(wire)
    return wire
