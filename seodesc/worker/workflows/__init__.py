"""Batch workflows."""

from seodesc.worker.workflows.batch import BatchOrchestrator
from seodesc.worker.workflows.parallel import SubTaskOutcome, chunked, run_in_groups, run_named
from seodesc.worker.workflows.schemas import BatchOptions, BatchResult, PageRequest, PageResult

__all__ = [
    "BatchOrchestrator",
    "BatchOptions",
    "BatchResult",
    "PageRequest",
    "PageResult",
    "SubTaskOutcome",
    "chunked",
    "run_in_groups",
    "run_named",
]
