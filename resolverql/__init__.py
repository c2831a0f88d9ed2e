"""resolverql: build graphql-core schemas from decorated resolver classes.

Exposes:
- Loader, Service, GraphQLResolver, ResolverQLConfig
- query, mutation decorators and ArgType, Group argument metadata
- TypeRegistry and the error types
"""
from __future__ import annotations

from .config import ResolverQLConfig
from .exceptions import ClientSafeError, MetadataError, RegistrySealedError, ResolverQLError, TypeNotFound
from .executor import ArgumentDescriptor, DispatchHandler, GroupPlan, OperationDescriptor, ResolverExecutor
from .loader import Loader
from .metadata import ArgType, Group, Mutation, OperationMeta, Query, get_attached, mutation, query
from .resolver import GraphQLResolver
from .service import Service
from .type_registry import BUILTIN_SCALARS, TypeRegistry

__all__ = [
    'Loader', 'Service', 'GraphQLResolver', 'ResolverQLConfig',
    'query', 'mutation', 'Query', 'Mutation', 'OperationMeta', 'ArgType', 'Group', 'get_attached',
    'TypeRegistry', 'BUILTIN_SCALARS',
    'ResolverExecutor', 'OperationDescriptor', 'ArgumentDescriptor', 'GroupPlan', 'DispatchHandler',
    'ResolverQLError', 'MetadataError', 'RegistrySealedError', 'ClientSafeError', 'TypeNotFound',
]
