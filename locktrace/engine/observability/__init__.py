# MIT License
# Copyright (c) 2025 Hashborn

"""
Observability Module

Prometheus metrics for report runs.
"""

from .metrics import metrics_registry, record_outcome

__all__ = ['metrics_registry', 'record_outcome']
