"""Python identifier -> graphql name conversion."""
from __future__ import annotations

__all__ = ["snake_to_camel", "graphql_name"]


def snake_to_camel(name: str) -> str:
    """Convert ``snake_case`` to ``lowerCamelCase``.

    Leading underscores are kept; names without inner underscores are
    returned unchanged.
    """
    stripped = name.lstrip("_")
    prefix = name[: len(name) - len(stripped)]
    parts = [p for p in stripped.split("_") if p]
    if len(parts) <= 1:
        return name
    return prefix + parts[0] + "".join(p[:1].upper() + p[1:] for p in parts[1:])


def graphql_name(python_name: str, auto_camel_case: bool) -> str:
    return snake_to_camel(python_name) if auto_camel_case else python_name
