from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Union

from graphql import GraphQLNamedType

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .loader import Loader

__all__ = ["GraphQLResolver"]


class GraphQLResolver:
    """Groups related operations and the custom types they need.

    Subclasses declare operations with :func:`resolverql.query` and
    :func:`resolverql.mutation` and override :meth:`get_types` to contribute
    types the operations reference.
    """

    def get_types(self, loader: "Loader") -> Iterable[Union[GraphQLNamedType, type, Any]]:
        """Types provided by this resolver.

        Items are graphql-core named types or ``@strawberry.type`` classes.
        Called once, when the resolver is registered, before any operation is
        compiled; ``loader`` gives access to types registered so far.
        """
        return []
