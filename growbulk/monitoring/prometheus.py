"""
Prometheus metrics for the bulk operation engine.
"""
from prometheus_client import Counter, Histogram, Gauge, Info
import logging

logger = logging.getLogger(__name__)

# Job Metrics
bulk_jobs_total = Counter(
    'bulk_jobs_total',
    'Total bulk jobs finished',
    ['operation', 'status']  # completed/cancelled/failed
)

bulk_job_duration = Histogram(
    'bulk_job_duration_seconds',
    'Bulk job duration',
    ['operation']
)

bulk_active_jobs = Gauge(
    'bulk_active_jobs',
    'Bulk jobs currently holding a job slot'
)

# Item Metrics
bulk_items_total = Counter(
    'bulk_items_total',
    'Total items processed by bulk jobs',
    ['operation', 'result']  # success/failure/skipped
)

# Undo Metrics
bulk_undo_total = Counter(
    'bulk_undo_total',
    'Total undo attempts',
    ['result']  # success/partial/rejected
)

# System Info
app_info = Info('growbulk', 'Bulk engine information')
app_info.info({
    'name': 'growbulk',
    'version': '1.0.0'
})


def record_job_metrics(operation: str, status: str, succeeded: int, failed: int, skipped: int, duration_seconds: float):
    """Record the outcome of one finished job."""
    try:
        bulk_jobs_total.labels(operation=operation, status=status).inc()
        bulk_job_duration.labels(operation=operation).observe(duration_seconds)
        bulk_items_total.labels(operation=operation, result='success').inc(succeeded)
        bulk_items_total.labels(operation=operation, result='failure').inc(failed)
        bulk_items_total.labels(operation=operation, result='skipped').inc(skipped)
    except Exception as e:
        logger.warning(f"Failed to record bulk job metrics: {e}")
