"""Schema assembly: registered resolvers -> root Query/Mutation types."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from graphql import GraphQLField, GraphQLNamedType, GraphQLObjectType

from .config import ResolverQLConfig
from .exceptions import MetadataError, RegistrySealedError
from .executor import OperationDescriptor, ResolverExecutor
from .inference import type_name_of
from .strawberry_types import is_strawberry_type, to_graphql_type_map
from .type_registry import TypeRegistry

__all__ = ["Loader"]

logger = logging.getLogger(__name__)


class Loader:
    """Collects resolvers and types and builds the root operation types.

    The schema can only be built from registered resolvers. Registration order
    matters: when two resolvers declare an operation with the same name, the
    one registered last wins.
    """

    def __init__(self, config: Optional[ResolverQLConfig] = None):
        self.config = config or ResolverQLConfig()
        self.registry = TypeRegistry()
        self._executors: List[ResolverExecutor] = []
        self._strawberry_classes: List[type] = []

    @property
    def executors(self) -> List[ResolverExecutor]:
        return list(self._executors)

    def register_resolver(self, resolver: Any) -> ResolverExecutor:
        """Register ``resolver``; its contributed types are registered at once."""
        if self.registry.sealed:
            raise RegistrySealedError(f"Cannot register {type(resolver).__name__}: schema is already built")
        executor = ResolverExecutor(resolver, self)
        self._executors.append(executor)
        logger.debug(f"Registered resolver {type(resolver).__name__}")
        return executor

    def register_type(self, type_: Any) -> None:
        """Register a graphql-core named type or a ``@strawberry.type`` class."""
        self.register_types([type_])

    def register_types(self, types: Iterable[Any]) -> None:
        """Register several types.

        Strawberry classes are converted together with every strawberry class
        registered before, so types shared between resolvers stay one instance.
        Types they reach are registered as well.
        """
        types = list(types)
        converted: Dict[str, GraphQLNamedType] = {}
        if any(is_strawberry_type(item) for item in types):
            classes = list(self._strawberry_classes)
            classes.extend(t for t in dict.fromkeys(types) if is_strawberry_type(t) and t not in classes)
            converted = to_graphql_type_map(classes, self.config.to_strawberry_config())
            self._strawberry_classes = classes
        for item in types:
            if is_strawberry_type(item):
                item = converted[type_name_of(item)]
            elif not isinstance(item, GraphQLNamedType):
                raise MetadataError(f"Cannot register {item!r}: not a named graphql type or strawberry type")
            self.registry.register(item)
            logger.debug(f"Registered type '{item.name}'")
        for gql_type in converted.values():
            self.registry.register(gql_type)

    def get_type_by_name(self, name: str) -> GraphQLNamedType:
        return self.registry.resolve_by_name(name)

    resolve_by_name = get_type_by_name

    def get_types(self) -> List[GraphQLNamedType]:
        return self.registry.types()

    def get_queries(self) -> Dict[str, OperationDescriptor]:
        return self._collect_from_resolvers(lambda executor: executor.get_queries(), "query")

    def get_mutations(self) -> Dict[str, OperationDescriptor]:
        return self._collect_from_resolvers(lambda executor: executor.get_mutations(), "mutation")

    def get_root_query(self) -> GraphQLObjectType:
        """Root ``Query`` type; fields are compiled when the engine first asks."""
        return GraphQLObjectType("Query", fields=lambda: self._to_fields(self.get_queries()))

    def get_root_mutation(self) -> GraphQLObjectType:
        return GraphQLObjectType("Mutation", fields=self._to_fields(self.get_mutations()))

    def seal(self) -> None:
        self.registry.seal()

    def _to_fields(self, operations: Dict[str, OperationDescriptor]) -> Dict[str, GraphQLField]:
        return {name: op.to_field(self.config.auto_camel_case) for name, op in operations.items()}

    def _collect_from_resolvers(
        self, handler: Callable[[ResolverExecutor], Dict[str, OperationDescriptor]], kind: str
    ) -> Dict[str, OperationDescriptor]:
        result: Dict[str, OperationDescriptor] = {}
        for executor in self._executors:
            for name, descriptor in handler(executor).items():
                if name in result:
                    logger.warning(
                        f"{kind.capitalize()} '{name}' of {type(executor.resolver).__name__} "
                        f"overrides an earlier registration"
                    )
                result[name] = descriptor
        return result
