"""Infrastructure adapters for repository pattern implementations."""

from .dataframe_repositories import (
    DataFrameProjectionProvider,
    DataFrameRosterRepository,
    build_fixtures_by_team,
)

__all__ = [
    "DataFrameRosterRepository",
    "DataFrameProjectionProvider",
    "build_fixtures_by_team",
]
