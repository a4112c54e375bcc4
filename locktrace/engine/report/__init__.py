# MIT License
# Copyright (c) 2025 Hashborn

"""
Report model: assembles per-account lock outcomes into a serializable report.
"""

from .builder import ReportBuilder
from .runner import ReportRunner
from .types import LockReport, AccountReport

__all__ = ["ReportBuilder", "ReportRunner", "LockReport", "AccountReport"]
