"""Publish a single package to an npm registry with rollback on failure."""

from npmpush.services.publish.errors import PublishError, RollbackError
from npmpush.services.publish.model import Package, PublishConfig, PublishReceipt, Snapshot
from npmpush.services.publish.workflow import PublishWorkflow

__all__ = [
    "Package",
    "PublishConfig",
    "PublishError",
    "PublishReceipt",
    "PublishWorkflow",
    "RollbackError",
    "Snapshot",
]
