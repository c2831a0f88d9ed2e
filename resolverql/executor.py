"""Compilation of one resolver's decorated methods into root field descriptors."""
from __future__ import annotations

import dataclasses
import importlib
import inspect
import logging
from dataclasses import dataclass, field as dc_field
from typing import (
    TYPE_CHECKING, Any, Callable, ClassVar, Dict, List, Optional, Tuple, Type, get_origin, get_type_hints,
)

from graphql import (
    GraphQLArgument, GraphQLField, GraphQLNamedType, GraphQLResolveInfo, GraphQLType,
)

from .exceptions import MetadataError
from .inference import infer_wire_type, strip_annotated, unwrap_optional, wrap_type
from .metadata import (
    ArgType, Group, Mutation, OperationMeta, Query,
    get_argument_attribute, get_method_attribute, get_property_attribute,
)
from .naming import graphql_name

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .loader import Loader

__all__ = [
    "ArgumentDescriptor", "OperationDescriptor", "GroupPlan", "DispatchHandler", "ResolverExecutor",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArgumentDescriptor:
    type: GraphQLType
    description: Optional[str] = None


@dataclass(frozen=True)
class GroupPlan:
    """How to rebuild one grouped parameter from flat arguments."""

    group_class: type
    field_names: Tuple[str, ...]
    parameter_name: str

    def build(self, args: Dict[str, Any]) -> Any:
        """Pop this group's fields from ``args`` and return the container."""
        supplied = {name: args.pop(name) for name in self.field_names if name in args}
        if dataclasses.is_dataclass(self.group_class):
            kwargs = {}
            for f in dataclasses.fields(self.group_class):
                if not f.init:
                    continue
                if f.name in supplied:
                    kwargs[f.name] = supplied[f.name]
                elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                    kwargs[f.name] = None
            return self.group_class(**kwargs)
        instance = self.group_class()
        for name in self.field_names:
            setattr(instance, name, supplied[name] if name in supplied else getattr(self.group_class, name, None))
        return instance


class DispatchHandler:
    """graphql-core resolve function for one operation.

    Holds only compiled metadata; the argument mapping of every call is its
    own dict, so one handler serves concurrent requests.
    """

    __slots__ = ("method", "group_plans", "info_parameters", "positional_only")

    def __init__(self, method: Callable[..., Any], group_plans: Tuple[GroupPlan, ...] = (),
                 info_parameters: Tuple[str, ...] = (), positional_only: Tuple[str, ...] = ()):
        self.method = method
        self.group_plans = group_plans
        self.info_parameters = info_parameters
        self.positional_only = positional_only

    def __call__(self, _root: Any, info: Optional[GraphQLResolveInfo] = None, /, **args: Any) -> Any:
        for plan in self.group_plans:
            args[plan.parameter_name] = plan.build(args)
        for name in self.info_parameters:
            args[name] = info
        positional = []
        for name in self.positional_only:
            if name not in args:
                break
            positional.append(args.pop(name))
        return self.method(*positional, **args)

    def __repr__(self) -> str:
        return f"<DispatchHandler {getattr(self.method, '__qualname__', self.method)!r}>"


@dataclass(frozen=True)
class OperationDescriptor:
    """Compiled query or mutation, ready to become a root field."""

    name: str
    type: GraphQLType
    args: Dict[str, ArgumentDescriptor] = dc_field(default_factory=dict)
    description: Optional[str] = None
    resolve: Optional[DispatchHandler] = None

    def to_field(self, auto_camel_case: bool = False) -> GraphQLField:
        args = {}
        for python_name, arg in self.args.items():
            exposed = graphql_name(python_name, auto_camel_case)
            args[exposed] = GraphQLArgument(
                arg.type,
                description=arg.description,
                out_name=python_name if exposed != python_name else None,
            )
        return GraphQLField(self.type, args=args, resolve=self.resolve, description=self.description)


def _is_info_annotation(annotation: Any) -> bool:
    ann = unwrap_optional(annotation)
    return isinstance(ann, type) and issubclass(ann, GraphQLResolveInfo)


def _add_argument(args: Dict[str, ArgumentDescriptor], name: str, descriptor: ArgumentDescriptor, where: str) -> None:
    if name in args:
        raise MetadataError(f"Argument '{name}' of {where} is declared more than once")
    args[name] = descriptor


def _group_fields(cls: type) -> List[Tuple[str, Any, bool]]:
    """(name, annotation, has_default) for every field of a group container."""
    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as error:
        raise MetadataError(f"Cannot resolve field annotations of group class {cls.__name__}: {error}") from error
    if dataclasses.is_dataclass(cls):
        return [
            (
                f.name,
                hints.get(f.name, f.type),
                f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING,
            )
            for f in dataclasses.fields(cls)
            if f.init
        ]
    return [
        (name, annotation, hasattr(cls, name))
        for name, annotation in hints.items()
        if get_origin(strip_annotated(annotation)) is not ClassVar and not name.startswith("_")
    ]


class ResolverExecutor:
    """Compiles the operations of one resolver instance.

    Creating an executor registers the resolver's contributed types in the
    loader right away, so operations of this and later resolvers can refer to
    them by name.
    """

    def __init__(self, resolver: Any, loader: "Loader"):
        self.resolver = resolver
        self.loader = loader
        get_types = getattr(resolver, "get_types", None)
        contributed = list(get_types(loader) or []) if callable(get_types) else []
        if contributed:
            loader.register_types(contributed)
        logger.debug(f"Resolver {type(resolver).__name__} contributed {len(contributed)} type(s)")

    def get_queries(self) -> Dict[str, OperationDescriptor]:
        return self._compile_operations(Query)

    def get_mutations(self) -> Dict[str, OperationDescriptor]:
        return self._compile_operations(Mutation)

    def _methods(self) -> List[Tuple[str, Callable[..., Any]]]:
        """Functions defined on the resolver class, base classes first, in source order."""
        found: Dict[str, Callable[..., Any]] = {}
        for klass in reversed(type(self.resolver).__mro__):
            if klass is object:
                continue
            for attr, raw in vars(klass).items():
                func = raw.__func__ if isinstance(raw, (staticmethod, classmethod)) else raw
                if inspect.isfunction(func):
                    found[attr] = func
                else:
                    found.pop(attr, None)
        return list(found.items())

    def _compile_operations(self, kind: Type[OperationMeta]) -> Dict[str, OperationDescriptor]:
        operations: Dict[str, OperationDescriptor] = {}
        for attr, func in self._methods():
            meta = get_method_attribute(func, kind)
            if meta is None:
                continue
            descriptor = self._compile_method(attr, func, meta)
            if meta.name in operations:
                logger.debug(f"{type(self.resolver).__name__}.{attr} replaces earlier operation '{meta.name}'")
            operations[meta.name] = descriptor
        return operations

    def _compile_method(self, attr: str, func: Callable[..., Any], meta: OperationMeta) -> OperationDescriptor:
        where = f"{type(self.resolver).__name__}.{attr}"
        bound = getattr(self.resolver, attr)
        try:
            signature = inspect.signature(bound, eval_str=True)
        except (NameError, SyntaxError) as error:
            raise MetadataError(f"Cannot resolve annotations of {where}: {error}") from error

        args: Dict[str, ArgumentDescriptor] = {}
        plans: List[GroupPlan] = []
        info_parameters: List[str] = []
        positional_only: List[str] = []
        for param in signature.parameters.values():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if param.kind is param.POSITIONAL_ONLY:
                positional_only.append(param.name)
            if _is_info_annotation(param.annotation):
                info_parameters.append(param.name)
                continue
            group = get_argument_attribute(param, Group)
            if group is not None:
                plans.append(self._expand_group(func, param, group, args, where))
                continue
            arg_type = get_argument_attribute(param, ArgType)
            descriptor = ArgumentDescriptor(
                infer_wire_type(
                    self.loader.registry,
                    param.annotation,
                    arg_type,
                    has_default=param.default is not param.empty,
                    where=f"argument '{param.name}' of {where}",
                ),
                description=(arg_type.description or None) if arg_type is not None else None,
            )
            _add_argument(args, param.name, descriptor, where)

        for plan in plans:
            if plan.parameter_name in args and plan.parameter_name not in plan.field_names:
                raise MetadataError(f"Argument '{plan.parameter_name}' of {where} clashes with a grouped parameter")

        logger.debug(f"Compiled operation '{meta.name}' from {where} with args {list(args)}")
        return OperationDescriptor(
            name=meta.name,
            type=self._infer_return_type(meta),
            args=args,
            description=meta.description or None,
            resolve=DispatchHandler(bound, tuple(plans), tuple(info_parameters), tuple(positional_only)),
        )

    def _infer_return_type(self, meta: OperationMeta) -> GraphQLType:
        if isinstance(meta.return_type, GraphQLNamedType):
            base = meta.return_type
        else:
            base = self.loader.registry.resolve_by_name(meta.return_type)
        return wrap_type(base, is_list=meta.is_list, nullable=meta.nullable)

    def _resolve_group_class(self, func: Callable[..., Any], param: inspect.Parameter, group: Group, where: str) -> type:
        target = group.group_class
        if target is None:
            target = unwrap_optional(param.annotation)
        elif isinstance(target, str):
            name = target
            if "." in name:
                module_name, _, attr = name.rpartition(".")
                try:
                    target = getattr(importlib.import_module(module_name), attr)
                except (ImportError, AttributeError) as error:
                    raise MetadataError(f"Group class '{name}' of {where} cannot be imported") from error
            else:
                target = func.__globals__.get(name)
        if not isinstance(target, type):
            raise MetadataError(f"Parameter '{param.name}' of {where} has no usable group class")
        return target

    def _expand_group(self, func: Callable[..., Any], param: inspect.Parameter, group: Group,
                      args: Dict[str, ArgumentDescriptor], where: str) -> GroupPlan:
        group_class = self._resolve_group_class(func, param, group, where)
        fields = _group_fields(group_class)
        if not fields:
            raise MetadataError(f"Group class {group_class.__name__} used by {where} declares no fields")
        names = []
        for name, annotation, has_default in fields:
            arg_type = get_property_attribute(annotation, ArgType)
            descriptor = ArgumentDescriptor(
                infer_wire_type(
                    self.loader.registry,
                    annotation,
                    arg_type,
                    has_default=has_default,
                    where=f"field '{name}' of group {group_class.__name__}",
                ),
                description=(arg_type.description or None) if arg_type is not None else None,
            )
            _add_argument(args, name, descriptor, where)
            names.append(name)
        return GroupPlan(group_class=group_class, field_names=tuple(names), parameter_name=param.name)
