"""
Batch executor for bulk operations on plant records.

Runs one operation over a selection:
- Batches sized by the operation descriptor, items within a batch run concurrently
- Settle-all: one item's failure never aborts its siblings or later batches
- Fixed throttle between batches
- Per-item progress, published to observers and the Redis progress cache
- Cancellation checked at batch boundaries only
- Completed jobs recorded in the undo log
"""
import asyncio
import copy
import inspect
import logging
import math
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from config import settings

from ..cache.redis_client import CacheClient, cache
from ..models.history import EntityUndo, HistoryEntry
from ..models.operation import OperationDescriptor, OperationKind
from ..models.progress import ItemStatus, JobProgress, JobStatus
from ..monitoring.prometheus import bulk_jobs_total, record_job_metrics
from ..stores.base import EntityStore
from ..utils.datetime_utils import format_duration
from .catalog import OperationCatalog
from .effects import EFFECTS, Effect
from .exceptions import ConfigurationError, ItemError, ValidationError
from .job_slot import CancellationToken, JobSlot
from .undo_manager import UndoLog
from .validation import validate_input

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Dict[str, Any]], Any]


def partition(ids: List[str], batch_size: int) -> List[List[str]]:
    """Split ``ids`` into consecutive slices of at most ``batch_size``."""
    return [ids[i:i + batch_size] for i in range(0, len(ids), batch_size)]


class BatchExecutor:
    """Executes bulk operations against an EntityStore, one job at a time."""

    def __init__(
        self,
        store: EntityStore,
        catalog: Optional[OperationCatalog] = None,
        undo_log: Optional[UndoLog] = None,
        effects: Optional[Mapping[OperationKind, Effect]] = None,
        job_slot: Optional[JobSlot] = None,
        throttle_ms: Optional[int] = None,
        display_grace_ms: Optional[int] = None,
        progress_cache: Optional[CacheClient] = None,
    ):
        self.store = store
        self.catalog = catalog if catalog is not None else OperationCatalog.from_config()
        self.undo_log = undo_log if undo_log is not None else UndoLog()
        self.effects = effects if effects is not None else EFFECTS
        self.job_slot = job_slot or JobSlot()
        self.throttle_ms = settings.batch_throttle_ms if throttle_ms is None else throttle_ms
        self.display_grace_ms = settings.display_grace_ms if display_grace_ms is None else display_grace_ms
        self.progress_cache = progress_cache or cache
        self.progress_cache_ttl = settings.progress_cache_ttl
        self._tokens: Dict[str, CancellationToken] = {}
        self._release_handle: Optional[asyncio.TimerHandle] = None

    @property
    def active_progress(self) -> Optional[JobProgress]:
        """Progress of the running (or just completed) job, if any."""
        return self.job_slot.progress

    async def run(
        self,
        kind: Union[str, OperationKind],
        input_data: Optional[Mapping[str, Any]],
        selection: Iterable[str],
        cancel_token: Optional[CancellationToken] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> HistoryEntry:
        """
        Run ``kind`` over every id in ``selection``.

        Args:
            kind: Operation kind (must be in the catalog)
            input_data: Operation input, validated against the descriptor
            selection: Entity ids (a SelectionSet or any iterable)
            cancel_token: Optional token; checked before each batch
            on_progress: Optional observer called with progress snapshots

        Returns:
            HistoryEntry recorded in the undo log

        Raises:
            ConfigurationError: Unknown kind or no effect registered
            ValidationError: Empty selection or invalid input
            ConcurrencyError: Another job is active
        """
        descriptor = self.catalog.get(kind)
        try:
            ids = list(dict.fromkeys(selection))
        except TypeError as e:
            raise ValidationError(f"Selection must contain entity ids: {e}") from e
        if not ids:
            raise ValidationError("No records selected")

        effect = self.effects.get(descriptor.kind)
        if effect is None:
            raise ConfigurationError(f"Operation {descriptor.kind.value} not implemented")

        validated = validate_input(descriptor, input_data)

        batches = partition(ids, descriptor.batch_size)
        progress = JobProgress(
            operation_kind=descriptor.kind,
            total=len(ids),
            total_batches=math.ceil(len(ids) / descriptor.batch_size),
            estimated_cost_ms=descriptor.estimated_cost_ms,
        )

        # Fails fast without touching the running job
        self.job_slot.acquire(descriptor.kind.value, progress)

        token = cancel_token or CancellationToken()
        self._tokens[progress.job_id] = token

        logger.info(
            f"Starting bulk {descriptor.kind.value} job {progress.job_id}: "
            f"{progress.total} items in {progress.total_batches} batches of {descriptor.batch_size} "
            f"(estimated {self.catalog.format_estimate(self.catalog.estimate_seconds(descriptor.kind, progress.total))})"
        )

        try:
            await self._publish(progress, on_progress)

            for index, batch in enumerate(batches):
                if token.cancelled:
                    logger.warning(f"Bulk job {progress.job_id} cancelled before batch {index + 1}")
                    for remaining in batches[index:]:
                        for item_id in remaining:
                            progress.mark_skipped(item_id, token.reason)
                    break

                progress.start_batch(index, batch)
                await self._publish(progress, on_progress)

                outcomes = await asyncio.gather(
                    *(self._settle_item(progress, descriptor, effect, item_id, validated) for item_id in batch),
                    return_exceptions=True,
                )
                for outcome in outcomes:
                    # Exceptions are recorded per item; only task cancellation gets here
                    if isinstance(outcome, BaseException):
                        raise outcome

                await self._publish(progress, on_progress)

                if index < len(batches) - 1 and self.throttle_ms > 0:
                    await asyncio.sleep(self.throttle_ms / 1000)

            status = JobStatus.CANCELLED if progress.skipped else JobStatus.COMPLETED
            progress.finish(status)

            entry = self._build_history(descriptor, progress, validated)
            self.undo_log.push(entry)

            record_job_metrics(
                operation=descriptor.kind.value,
                status=status.value,
                succeeded=entry.success_count,
                failed=entry.failure_count,
                skipped=entry.skipped_count,
                duration_seconds=progress.elapsed_ms / 1000,
            )
            logger.info(
                f"Bulk operation {descriptor.kind.value} {status.value}: "
                f"{entry.success_count} succeeded, {entry.failure_count} failed, "
                f"{entry.skipped_count} skipped in {format_duration(progress.elapsed_ms)}"
            )

            await self._publish(progress, on_progress)
            return entry

        except asyncio.CancelledError:
            logger.warning(f"Bulk job {progress.job_id} task cancelled")
            for item_id in ids:
                if progress.item_status(item_id) in (ItemStatus.PENDING, ItemStatus.PROCESSING):
                    progress.mark_skipped(item_id, "Job task cancelled")
            progress.finish(JobStatus.CANCELLED)
            bulk_jobs_total.labels(operation=descriptor.kind.value, status=JobStatus.CANCELLED.value).inc()
            raise

        except Exception as e:
            logger.error(f"Bulk operation catastrophic failure: {e}", exc_info=True)
            progress.finish(JobStatus.FAILED)
            bulk_jobs_total.labels(operation=descriptor.kind.value, status=JobStatus.FAILED.value).inc()
            raise

        finally:
            self._tokens.pop(progress.job_id, None)
            self._schedule_release(progress)

    async def _settle_item(
        self,
        progress: JobProgress,
        descriptor: OperationDescriptor,
        effect: Effect,
        item_id: str,
        input_data: Dict[str, Any],
    ):
        """Apply the effect to one item and record the outcome; never raises Exception."""
        try:
            entity = await self.store.get(item_id)
            if entity is None:
                raise ItemError(item_id, f"Entity {item_id} not found")
            result = await effect(self.store, entity, input_data)
        except Exception as e:
            logger.error(f"Bulk operation {descriptor.kind.value} failed for {item_id}: {e}")
            progress.mark_failed(item_id, str(e) or type(e).__name__)
            return

        # Never keep undo data for kinds the catalog marks non-undoable
        undo_patch = getattr(result, "undo_patch", None) if descriptor.undoable else None
        progress.mark_completed(item_id, undo_patch)

    def _build_history(
        self,
        descriptor: OperationDescriptor,
        progress: JobProgress,
        input_data: Dict[str, Any],
    ) -> HistoryEntry:
        undo_patches = None
        if descriptor.undoable:
            undo_patches = [
                EntityUndo(entity_id=c["id"], patch=c["undo_patch"])
                for c in progress.completed
                if c["undo_patch"] is not None
            ]

        return HistoryEntry(
            operation_kind=descriptor.kind,
            item_count=progress.total,
            success_count=len(progress.completed),
            failure_count=len(progress.failed),
            skipped_count=len(progress.skipped),
            cancelled=progress.status == JobStatus.CANCELLED,
            input_snapshot=copy.deepcopy(input_data),
            undoable=descriptor.undoable,
            undo_patches=undo_patches,
        )

    async def _publish(self, progress: JobProgress, on_progress: Optional[ProgressCallback]):
        """Push a progress snapshot to the cache and the observer."""
        snapshot = progress.snapshot()
        await self.progress_cache.set(
            self._progress_key(progress.job_id), snapshot, ttl=self.progress_cache_ttl
        )

        if on_progress is None:
            return
        try:
            result = on_progress(snapshot)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Progress observer failed for job {progress.job_id}: {e}")

    def _schedule_release(self, progress: JobProgress):
        """Free the job slot after the display-grace period."""
        if self.display_grace_ms <= 0:
            self.job_slot.release(progress)
            return

        grace = self.display_grace_ms / 1000
        # The deadline frees the slot even if this loop stops before the timer fires
        self.job_slot.release_after(grace)
        loop = asyncio.get_running_loop()
        self._release_handle = loop.call_later(grace, self.job_slot.release, progress)

    def dismiss(self):
        """Release the slot now instead of waiting for the grace period."""
        if self._release_handle is not None:
            self._release_handle.cancel()
            self._release_handle = None
        if self.active_progress is not None and self.active_progress.is_terminal:
            self.job_slot.release()

    def cancel(self, job_id: str) -> bool:
        """Request cancellation of a running job. Takes effect at the next batch boundary."""
        token = self._tokens.get(job_id)
        if token is None:
            return False
        token.cancel()
        return True

    async def get_progress(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Progress snapshot of a job, from memory or the progress cache."""
        progress = self.active_progress
        if progress is not None and progress.job_id == job_id:
            return progress.snapshot()
        return await self.progress_cache.get(self._progress_key(job_id))

    @staticmethod
    def _progress_key(job_id: str) -> str:
        return f"bulk:progress:{job_id}"
