"""User-Agent generation for catalog requests.

Format: provcat/{version} (external, {source})

Examples:
- CLI: provcat/0.1.0 (external, cli)
- Library: provcat/0.1.0 (external, lib)
"""

from __future__ import annotations

import os
from typing import Literal, cast

from provcat import __version__

UserAgentSource = Literal["cli", "lib"]

PROVCAT_CLIENT_SOURCE_ENV = "PROVCAT_CLIENT_SOURCE"

DEFAULT_SOURCE: UserAgentSource = "lib"


def get_client_source() -> UserAgentSource:
    """Get the client source type from environment or default."""
    source = os.environ.get(PROVCAT_CLIENT_SOURCE_ENV, "").lower()
    if source in ("cli", "lib"):
        return cast(UserAgentSource, source)
    return DEFAULT_SOURCE


def build_user_agent(source: UserAgentSource | None = None) -> str:
    """Build the User-Agent header value.

    Args:
        source: Optional source type override. If not provided, uses environment
                variable or defaults to "lib".
    """
    if source is None:
        source = get_client_source()
    return f"provcat/{__version__} (external, {source})"
