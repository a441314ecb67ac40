# File: filesize_recon/tasks/file_size_count.py

"""
File size count task.

Keeps the file_count_by_size table in step with the key table by counting
objects per size bucket (1 KB, 2 KB, ..., 4 MB, ..., 1 TB, ..., 1 PB and
one overflow bucket above the configured upper bound).

``reprocess`` rebuilds the counts from a full catalog scan. ``process``
loads the persisted counts and applies a batch of PUT / DELETE / UPDATE
events on top. Both paths bucket sizes through ``_apply_size`` and write
through the same store call, and neither writes anything unless the whole
run succeeded.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from filesize_recon.services.bucketer import Bucketer
from filesize_recon.services.file_count_store import FileCountBySizeStore
from filesize_recon.services.histogram import HistogramState
from filesize_recon.tasks.base import ReconTask, TaskResult
from filesize_recon.tasks.catalog import CatalogTable
from filesize_recon.tasks.events import KEY_TABLE, EventAction, UpdateEvent, UpdateEventBatch

logger = logging.getLogger(__name__)


class FileSizeCountTask(ReconTask):
    def __init__(
        self,
        store: FileCountBySizeStore,
        max_file_size_upper_bound: Optional[int] = None,
    ) -> None:
        self.store = store
        self.bucketer = Bucketer(max_file_size_upper_bound)

    @property
    def task_name(self) -> str:
        return "FileSizeCountTask"

    @property
    def task_tables(self) -> List[str]:
        return [KEY_TABLE]

    def new_state(self) -> HistogramState:
        return HistogramState(self.bucketer.bucket_count)

    # -----------------------------
    # Full rebuild
    # -----------------------------
    def reprocess(
        self, catalog: CatalogTable, state: Optional[HistogramState] = None
    ) -> TaskResult:
        state = self._check_state(state)
        state.reset()
        try:
            with catalog.iterator() as entries:
                for entry in entries:
                    self._apply_size(state, entry.value.data_size, +1)
        except Exception:
            logger.exception("Unable to populate file size counts from the catalog.")
            return self.task_name, False

        if not self._write_counts(state):
            return self.task_name, False
        logger.info("Completed a 'reprocess' run of %s.", self.task_name)
        return self.task_name, True

    # -----------------------------
    # Incremental update
    # -----------------------------
    def process(
        self, batch: UpdateEventBatch, state: Optional[HistogramState] = None
    ) -> TaskResult:
        state = self._check_state(state)
        if not self._read_counts(state):
            return self.task_name, False

        for event in batch:
            try:
                self._apply_event(state, event)
            except Exception:
                logger.exception(
                    "Unexpected exception while processing key %s.", event.key
                )
                return self.task_name, False

        if not self._write_counts(state):
            return self.task_name, False
        logger.info(
            "Completed a 'process' run of %s: %d events, %d anomalies.",
            self.task_name,
            len(batch),
            state.anomalies,
        )
        return self.task_name, True

    def _apply_event(self, state: HistogramState, event: UpdateEvent) -> None:
        if event.action == EventAction.PUT:
            self._handle_put(state, event.value)
        elif event.action == EventAction.DELETE:
            self._handle_delete(state, event.key, event.value)
        elif event.action == EventAction.UPDATE:
            self._handle_delete(state, event.key, event.old_value)
            self._handle_put(state, event.value)
        else:
            logger.debug("Skipping DB update event: %s", event.action)

    def _handle_put(self, state: HistogramState, value) -> None:
        self._apply_size(state, value.data_size, +1)

    def _handle_delete(self, state: HistogramState, key: str, value) -> None:
        if value is None:
            logger.warning(
                "Unexpected error while handling DELETE key event. "
                "Key not found in catalog: %s",
                key,
            )
            state.record_anomaly()
            return
        index, applied = self._apply_size(state, value.data_size, -1)
        if not applied:
            # Default count is 0; a delete here never saw its matching put.
            logger.warning(
                "Unexpected error while updating bin count. Found 0 count for "
                "index: %d while processing DELETE event for %s",
                index,
                key,
            )

    def _apply_size(
        self, state: HistogramState, size: int, delta: int
    ) -> Tuple[int, bool]:
        """
        Add ``delta`` (+1 or -1) to the bucket ``size`` falls into.

        Returns the bucket index and whether the counter moved. A decrement
        of an empty bucket does not move it.
        """
        index = self.bucketer.bucket_index(size)
        if delta > 0:
            state.increment(index)
            return index, True
        return index, state.decrement_if_positive(index)

    # -----------------------------
    # Persistence
    # -----------------------------
    def _read_counts(self, state: HistogramState) -> bool:
        try:
            rows = self.store.read_all()
        except SQLAlchemyError:
            logger.exception("Unable to read file size counts for %s.", self.task_name)
            return False

        # Rows are matched by upper bound so positions always line up with bucket indices.
        counts = [0] * len(state)
        for file_size, count in rows:
            index = self.bucketer.index_for_upper_bound(file_size)
            if index is None:
                logger.warning(
                    "Ignoring file size row with unknown upper bound %d (count %d).",
                    file_size,
                    count,
                )
                continue
            counts[index] = count
        state.load(counts)
        return True

    def _write_counts(self, state: HistogramState) -> bool:
        try:
            self.store.write_all(self.bucketer.upper_bounds(), state.counts)
        except SQLAlchemyError:
            logger.exception("Unable to write file size counts for %s.", self.task_name)
            return False
        return True

    def _check_state(self, state: Optional[HistogramState]) -> HistogramState:
        if state is None:
            return self.new_state()
        if len(state) != self.bucketer.bucket_count:
            raise ValueError(
                f"Histogram has {len(state)} buckets, expected {self.bucketer.bucket_count}"
            )
        return state
