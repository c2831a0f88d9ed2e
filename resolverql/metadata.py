"""Metadata declared on resolver code and helpers to read it back.

Operations are declared with decorators on resolver methods::

    class UserResolver(GraphQLResolver):
        @query("getUser", "User", nullable=False)
        def get_user(self, id: int): ...

Argument metadata lives inside ``typing.Annotated`` on parameters and on
fields of grouped-argument containers::

        @mutation("addAddress", "Address")
        def add_address(self, address: Annotated[AddressInput, Group()],
                        tags: Annotated[list, ArgType("string", is_list=True)] = None): ...
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Annotated, Any, Callable, List, Optional, Type, TypeVar, Union, get_args, get_origin

from graphql import GraphQLNamedType

__all__ = [
    "OperationMeta", "Query", "Mutation", "ArgType", "Group",
    "query", "mutation",
    "get_attached", "get_method_attribute", "get_argument_attribute", "get_property_attribute",
    "METADATA_ATTR",
]

# Attribute on functions holding decorator metadata, top-most decorator first.
METADATA_ATTR = "__resolverql_meta__"

M = TypeVar("M")


@dataclass(frozen=True)
class OperationMeta:
    """Operation metadata attached to a resolver method.

    Attributes:
        name: Name of the query/mutation in the schema. May differ from the
            method name.
        return_type: Registered type name (or a named graphql type instance)
            the operation returns.
        nullable: Whether the operation result may be null.
        is_list: Whether the operation returns a list of ``return_type``.
        description: Field description exposed in the schema.
    """

    name: str
    return_type: Union[str, GraphQLNamedType]
    nullable: bool = True
    is_list: bool = False
    description: str = ""


class Query(OperationMeta):
    """Marks a method as a root query field."""


class Mutation(OperationMeta):
    """Marks a method as a root mutation field."""


@dataclass(frozen=True)
class ArgType:
    """Explicit graphql type information for an argument or group field.

    When ``type_name`` is empty the type is inferred from the annotation.
    """

    type_name: str = ""
    is_list: bool = False
    description: str = ""


@dataclass(frozen=True)
class Group:
    """Collects several flat arguments into one container instance.

    ``group_class`` is the container class or its name. A dotted name is
    imported; a bare name is looked up in the resolver method's module. When
    omitted the annotated parameter type is used.
    """

    group_class: Union[Type[Any], str, None] = None


def _attach(kind: Type[OperationMeta], name: str, return_type: Union[str, GraphQLNamedType], *,
            nullable: bool = True, is_list: bool = False, description: str = "") -> Callable[[Callable], Callable]:
    meta = kind(name, return_type, nullable=nullable, is_list=is_list, description=description)

    def deco(fn):
        target = getattr(fn, "__func__", fn)
        existing = list(getattr(target, METADATA_ATTR, ()))
        # decorators apply bottom-up; keep source order
        existing.insert(0, meta)
        setattr(target, METADATA_ATTR, tuple(existing))
        return fn

    return deco


def query(name: str, return_type: Union[str, GraphQLNamedType], *, nullable: bool = True,
          is_list: bool = False, description: str = "") -> Callable[[Callable], Callable]:
    """Expose the decorated resolver method as a root query field."""
    return _attach(Query, name, return_type, nullable=nullable, is_list=is_list, description=description)


def mutation(name: str, return_type: Union[str, GraphQLNamedType], *, nullable: bool = True,
             is_list: bool = False, description: str = "") -> Callable[[Callable], Callable]:
    """Expose the decorated resolver method as a root mutation field."""
    return _attach(Mutation, name, return_type, nullable=nullable, is_list=is_list, description=description)


def _candidates(member: Any) -> List[Any]:
    if isinstance(member, inspect.Parameter):
        member = member.annotation
    if get_origin(member) is Annotated:
        return list(get_args(member)[1:])
    target = getattr(member, "__func__", member)
    if isinstance(target, property):
        target = target.fget
    return list(getattr(target, METADATA_ATTR, ()) or ())


def get_attached(member: Any, kind: Type[M]) -> Optional[M]:
    """Return the first metadata instance of ``kind`` attached to ``member``.

    ``member`` may be a function or method, an ``inspect.Parameter`` or a raw
    annotation. Further instances of the same kind are ignored.
    """
    for candidate in _candidates(member):
        if isinstance(candidate, kind):
            return candidate
    return None


def get_method_attribute(method: Callable, kind: Type[M]) -> Optional[M]:
    return get_attached(method, kind)


def get_argument_attribute(parameter: inspect.Parameter, kind: Type[M]) -> Optional[M]:
    return get_attached(parameter, kind)


def get_property_attribute(annotation: Any, kind: Type[M]) -> Optional[M]:
    return get_attached(annotation, kind)
