# src/queue_overlay/core/view/models.py
"""
Estruturas de saída do View-Data Formatter.

Todas as estruturas são construídas do zero a cada leitura e expõem
`to_dict()` para consumo pela camada externa de renderização.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from ..constants import CapacityMode, ChangeStatus, QueueType
from .capacity import ResourceEntry

ACTION_DELETE = "Delete Queue"
ACTION_UNDO_DELETE = "Undo Delete"


@dataclass(frozen=True)
class DeletionEligibility:
    can_delete: bool
    reason: str = ""
    action_label: str = ACTION_DELETE

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class UILabel:
    text: str
    css_class: str
    title: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class FormattedQueue:
    """
    Estado de exibição de uma fila, pronto para a camada de renderização.

    `children` só é preenchido na montagem da hierarquia
    (`get_formatted_queue_hierarchy`), já com os Adds pendentes enxertados.
    """

    path: str
    name: str
    parent_path: Optional[str]
    level: int
    change_status: ChangeStatus
    effective_capacity_mode: CapacityMode
    properties: Dict[str, str]
    capacity: str
    maximum_capacity: str
    state: str
    is_new: bool = False
    is_deleted: bool = False
    has_pending_changes: bool = False
    is_root: bool = False
    status_class: str = ""
    queue_type: QueueType = QueueType.LEAF
    capacity_details: List[ResourceEntry] = field(default_factory=list)
    max_capacity_details: List[ResourceEntry] = field(default_factory=list)
    ui_labels: List[UILabel] = field(default_factory=list)
    deletion: DeletionEligibility = field(default_factory=lambda: DeletionEligibility(can_delete=False))
    children: Dict[str, "FormattedQueue"] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.name or self.path.split(".")[-1]

    def iter_tree(self):
        """Percorre a subárvore em pré-ordem."""
        yield self
        for child in self.children.values():
            yield from child.iter_tree()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "name": self.name,
            "display_name": self.display_name,
            "parent_path": self.parent_path,
            "level": self.level,
            "change_status": self.change_status.value,
            "effective_capacity_mode": self.effective_capacity_mode.value,
            "properties": dict(self.properties),
            "capacity": self.capacity,
            "maximum_capacity": self.maximum_capacity,
            "state": self.state,
            "is_new": self.is_new,
            "is_deleted": self.is_deleted,
            "has_pending_changes": self.has_pending_changes,
            "is_root": self.is_root,
            "status_class": self.status_class,
            "queue_type": self.queue_type.value,
            "capacity_details": [e.to_dict() for e in self.capacity_details],
            "max_capacity_details": [e.to_dict() for e in self.max_capacity_details],
            "ui_labels": [label.to_dict() for label in self.ui_labels],
            "deletion": self.deletion.to_dict(),
            "children": {name: child.to_dict() for name, child in self.children.items()},
        }
