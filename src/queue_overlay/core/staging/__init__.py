from .changes import (
    EffectiveQueue,
    QueueBlueprint,
    StagedAdd,
    StagedChange,
    StagedDelete,
    StagedUpdate,
)
from .store import StagedChangeStore

__all__ = [
    "EffectiveQueue",
    "QueueBlueprint",
    "StagedAdd",
    "StagedChange",
    "StagedDelete",
    "StagedUpdate",
    "StagedChangeStore",
]
