"""Facade over the assembled schema and the graphql-core execution engine."""
from __future__ import annotations

import logging
import traceback
from typing import Any, Dict, Optional

from graphql import (
    ExecutionResult, GraphQLError, GraphQLSchema, graphql, graphql_sync, print_schema, validate_schema,
)

from .config import ResolverQLConfig
from .exceptions import ClientSafeError, MetadataError, ResolverQLError, TypeNotFound
from .loader import Loader

__all__ = ["Service", "INTERNAL_ERROR_MESSAGE"]

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _configuration_cause(error: BaseException) -> Optional[BaseException]:
    """Find a resolverql error wrapped by graphql-core while resolving field thunks."""
    seen = error
    while seen is not None:
        if isinstance(seen, (ResolverQLError, TypeNotFound)):
            return seen
        seen = seen.__cause__
    return None


class Service:
    """Builds the schema once and executes queries/mutations against it.

    The passed loader must already hold every resolver and type: the schema is
    built when the service is created, after which the loader is sealed.
    Only ``config.debug`` is read here; naming options such as
    ``auto_camel_case`` come from the loader's config, which shaped the fields.
    """

    def __init__(self, loader: Loader, config: Optional[ResolverQLConfig] = None):
        self._loader = loader
        self._config = config or loader.config
        if self._config.auto_camel_case != loader.config.auto_camel_case:
            logger.warning(
                f"Service config auto_camel_case={self._config.auto_camel_case} is ignored; "
                f"the loader config (auto_camel_case={loader.config.auto_camel_case}) decides field names"
            )
        self._debug_mode = self._config.debug
        self._schema: Optional[GraphQLSchema] = None
        self._init()

    @property
    def schema(self) -> GraphQLSchema:
        return self._schema

    @property
    def loader(self) -> Loader:
        return self._loader

    @property
    def debug_mode(self) -> bool:
        return self._debug_mode

    def set_debug_mode(self, value: bool) -> None:
        """Turn inclusion of internal error details on/off."""
        self._debug_mode = bool(value)

    def process_query(self, query: str, variables: Optional[Dict[str, Any]] = None, *,
                      operation_name: Optional[str] = None, context_value: Any = None,
                      root_value: Any = None) -> Dict[str, Any]:
        """Execute a query/mutation synchronously and return the serialized result.

        Schemas with ``async def`` resolver methods must use
        :meth:`process_query_async`.
        """
        result = graphql_sync(
            self._schema,
            query,
            root_value=root_value,
            context_value=context_value,
            variable_values=variables,
            operation_name=operation_name,
        )
        return self.serialize(result)

    async def process_query_async(self, query: str, variables: Optional[Dict[str, Any]] = None, *,
                                  operation_name: Optional[str] = None, context_value: Any = None,
                                  root_value: Any = None) -> Dict[str, Any]:
        """Like :meth:`process_query` but awaits async resolver methods."""
        result = await graphql(
            self._schema,
            query,
            root_value=root_value,
            context_value=context_value,
            variable_values=variables,
            operation_name=operation_name,
        )
        return self.serialize(result)

    def print_schema(self) -> str:
        return print_schema(self._schema)

    def serialize(self, result: ExecutionResult) -> Dict[str, Any]:
        payload = dict(result.formatted)
        if result.errors:
            payload["errors"] = [self._format_error(error) for error in result.errors]
        return payload

    def _format_error(self, error: GraphQLError) -> Dict[str, Any]:
        formatted = dict(error.formatted)
        original = error.original_error
        if original is None or isinstance(original, (GraphQLError, ClientSafeError)):
            return formatted
        formatted["message"] = INTERNAL_ERROR_MESSAGE
        if self._debug_mode:
            extensions = dict(formatted.get("extensions") or {})
            extensions["debugMessage"] = str(original)
            extensions["trace"] = traceback.format_tb(original.__traceback__)
            formatted["extensions"] = extensions
        return formatted

    def _init(self) -> None:
        unwrapped = None
        try:
            query = self._loader.get_root_query()
            mutation = self._loader.get_root_mutation()
            schema = GraphQLSchema(
                query=query,
                mutation=mutation if mutation.fields else None,
                types=self._loader.get_types(),
            )
            errors = validate_schema(schema)
        except (GraphQLError, TypeError) as error:
            cause = _configuration_cause(error)
            if cause is None or cause is error:
                raise
            unwrapped = cause
        if unwrapped is not None:
            raise unwrapped

        if errors:
            raise MetadataError("Invalid schema: " + "; ".join(e.message for e in errors))

        self._schema = schema
        self._loader.seal()
        logger.info(
            f"Built schema with {len(query.fields)} query field(s), "
            f"{len(mutation.fields)} mutation field(s) and {len(self._loader.get_types())} custom type(s)"
        )
