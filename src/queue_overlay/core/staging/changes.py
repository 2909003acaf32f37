# src/queue_overlay/core/staging/changes.py
"""
Tipos de alteração pendente (staging) e a fila efetiva resolvida.

`StagedChange` é uma união marcada sobre {Add, Update, Delete}, indexada
pelo path absoluto da fila. `EffectiveQueue` é o resultado (baseline ⊕
delta) de uma leitura do Store, construído do zero a cada consulta.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..constants import CapacityMode, ChangeStatus, ROOT_QUEUE


@dataclass
class QueueBlueprint:
    """Conjunto de propriedades que descreve uma fila nova (ainda não aplicada)."""

    name: str
    path: str
    parent_path: str
    properties: Dict[str, str] = field(default_factory=dict)
    capacity_mode: Optional[CapacityMode] = None

    @classmethod
    def create(
        cls,
        parent_path: str,
        name: str,
        properties: Optional[Dict[str, str]] = None,
        *,
        capacity_mode: Any = None,
    ) -> "QueueBlueprint":
        return cls(
            name=name,
            path=f"{parent_path}.{name}",
            parent_path=parent_path,
            properties=dict(properties or {}),
            capacity_mode=CapacityMode.coerce(capacity_mode),
        )


@dataclass
class StagedAdd:
    path: str
    blueprint: QueueBlueprint
    operation: ChangeStatus = field(default=ChangeStatus.ADD, init=False)


@dataclass
class StagedUpdate:
    path: str
    # mapa cumulativo: sempre o conjunto completo de modificações pendentes
    modifications: Dict[str, str] = field(default_factory=dict)
    capacity_mode_hint: Optional[CapacityMode] = None
    operation: ChangeStatus = field(default=ChangeStatus.UPDATE, init=False)


@dataclass
class StagedDelete:
    path: str
    operation: ChangeStatus = field(default=ChangeStatus.DELETE, init=False)


StagedChange = Union[StagedAdd, StagedUpdate, StagedDelete]


@dataclass
class EffectiveQueue:
    """
    Estado resolvido de uma fila (baseline ⊕ alteração pendente).

    `properties` é indexado pelo nome local da propriedade (ex.: `capacity`).
    `child_names` lista apenas os filhos do Trie; filhos pendentes são
    enxertados pelo Formatter.
    """

    path: str
    name: str
    parent_path: Optional[str]
    level: int
    properties: Dict[str, str]
    change_status: ChangeStatus = ChangeStatus.UNCHANGED
    capacity_mode_hint: Optional[CapacityMode] = None
    child_names: List[str] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.path == ROOT_QUEUE

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.properties.get(key, default)


def split_path(path: str) -> Dict[str, Optional[str]]:
    """Quebra um queue path em `name` e `parent_path` (None para root)."""
    if "." not in path:
        return {"name": path, "parent_path": None}
    parent, _, name = path.rpartition(".")
    return {"name": name, "parent_path": parent}
