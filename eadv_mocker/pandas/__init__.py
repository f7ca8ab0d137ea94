"""Pandas DataFrame adapters for mock data results."""

from .tables import (
    eadv_to_dataframe,
    mock_data_to_dataframes,
    rout_tables_to_dataframes,
)

__all__ = [
    "eadv_to_dataframe",
    "mock_data_to_dataframes",
    "rout_tables_to_dataframes",
]
