"""Tabular export of derived views."""

from .export import export_csv, export_json, views_to_dataframe

__all__ = [
    "export_csv",
    "export_json",
    "views_to_dataframe",
]
