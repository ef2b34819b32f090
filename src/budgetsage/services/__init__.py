"""Service module exports."""

from . import alerts, export_csv, import_csv, ledger_service, progress

__all__ = [
    "alerts",
    "export_csv",
    "import_csv",
    "ledger_service",
    "progress",
]
