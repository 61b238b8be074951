"""
Monitoring module for Prometheus metrics.
"""
from .prometheus import (
    bulk_jobs_total,
    bulk_job_duration,
    bulk_active_jobs,
    bulk_items_total,
    bulk_undo_total,
    record_job_metrics,
)

__all__ = [
    'bulk_jobs_total',
    'bulk_job_duration',
    'bulk_active_jobs',
    'bulk_items_total',
    'bulk_undo_total',
    'record_job_metrics',
]
