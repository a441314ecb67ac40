# File: filesize_recon/tasks/base.py

"""
Interface shared by every recon aggregation task.

A driver calls ``reprocess`` once to rebuild a task's aggregate from a full
catalog snapshot, then ``process`` for each batch of change events. Both
report back the task name and whether the run succeeded.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple

from filesize_recon.tasks.catalog import CatalogTable
from filesize_recon.tasks.events import UpdateEventBatch

TaskResult = Tuple[str, bool]


class ReconTask(ABC):
    @property
    @abstractmethod
    def task_name(self) -> str:
        ...

    @property
    @abstractmethod
    def task_tables(self) -> List[str]:
        """Catalog tables whose events this task needs to see."""

    @abstractmethod
    def reprocess(self, catalog: CatalogTable) -> TaskResult:
        ...

    @abstractmethod
    def process(self, batch: UpdateEventBatch) -> TaskResult:
        ...
