"""Service module exports."""

from . import amortization, estimation, export_csv, importers, ordering, planner, summary

__all__ = [
    "amortization",
    "estimation",
    "export_csv",
    "importers",
    "ordering",
    "planner",
    "summary",
]
