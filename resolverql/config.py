"""Runtime configuration for resolverql schemas."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from strawberry.schema.config import StrawberryConfig

__all__ = ["ResolverQLConfig"]

_TRUTHY = {"1", "true", "t", "yes", "y", "on"}
_FALSY = {"0", "false", "f", "no", "n", "off", ""}


def _as_bool(raw: str, key: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"Invalid boolean for {key}: {raw!r}")


@dataclass
class ResolverQLConfig:
    """Schema building and serving options.

    Attributes:
        debug: Include debug messages and traces of internal errors in results.
        auto_camel_case: Expose argument names (and strawberry type fields) in
            lowerCamelCase. Operation names are always used as declared.
    """

    debug: bool = False
    auto_camel_case: bool = False

    @classmethod
    def from_env(cls, prefix: str = "RESOLVERQL_", environ: Optional[Mapping[str, str]] = None) -> "ResolverQLConfig":
        """Build a config from ``<prefix>DEBUG`` and ``<prefix>AUTO_CAMEL_CASE``."""
        env = os.environ if environ is None else environ
        kwargs = {}
        for field_name in ("debug", "auto_camel_case"):
            key = prefix + field_name.upper()
            if key in env:
                kwargs[field_name] = _as_bool(env[key], key)
        return cls(**kwargs)

    def to_strawberry_config(self) -> StrawberryConfig:
        return StrawberryConfig(auto_camel_case=self.auto_camel_case)
