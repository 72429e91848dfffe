"""Search service layer for FileSearch.

Exposes the index-bound ``SearchClient`` and a factory building it from the
application configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from FileSearch.services.search import SearchClient, build_index_body

if TYPE_CHECKING:
    from FileSearch.config import AppConfig


def create_search_client(config: AppConfig, **kwargs: Any) -> SearchClient:
    """Create a search client for the configured engine and index.

    Args:
        config: Application configuration containing engine settings.
        **kwargs: Extra ``SearchClient`` arguments (clients, recorder,
            document factory).

    Returns:
        Connected SearchClient; the index exists once this returns.
    """
    engine = config.engine
    return SearchClient(
        engine.index_name,
        engine.node,
        path_delimiter=engine.path_delimiter,
        timeout=engine.timeout,
        **kwargs,
    )


__all__ = [
    "SearchClient",
    "build_index_body",
    "create_search_client",
]
