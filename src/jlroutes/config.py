"""Router configuration.

RouterConfig is a frozen pydantic model: validated on construction,
immutable afterwards. Override what you need::

    config = RouterConfig(treat_host_as_path_component=True, strict=True)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RouterConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    # URL decoding
    decode_plus_symbols: bool = True  # "+" -> " " in path segments and query values
    treat_host_as_path_component: bool = False  # app://user/42 -> ["user", "42"]

    # Handler parameters
    include_route_metadata: bool = False  # add route_pattern / route_url / route_scheme

    # Diagnostics
    verbose_logging: bool = False
    strict: bool = False  # validate handler signatures at registration
