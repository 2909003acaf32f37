"""Visão tabular das alterações pendentes e da hierarquia formatada (v1).

Responsabilidades:
- Achatar o delta do Store em registros `{operation, queue_path,
  property_key, old_value, new_value}`.
- Derivar DataFrames (pandas) para inspeção em notebook ou relatório.

Princípios:
- OBSERVAR sem mutar: nenhuma função deste módulo altera o Store.
- Chaves de propriedade sempre completas (mesmo formato da API de commit).

Limites explícitos (v1):
- NÃO aplica o lote.
- NÃO valida valores.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd

from queue_overlay.core.staging import StagedChangeStore
from queue_overlay.core.view import FormattedQueue

CHANGE_COLUMNS = ["operation", "queue_path", "property_key", "old_value", "new_value"]
HIERARCHY_COLUMNS = [
    "path",
    "level",
    "parent_path",
    "queue_type",
    "change_status",
    "capacity_mode",
    "capacity",
    "maximum_capacity",
    "state",
    "can_delete",
]


def _baseline_value(store: StagedChangeStore, queue_path: str, full_key: str) -> Optional[str]:
    trie = store.trie
    if trie is None:
        return None
    node = trie.get_queue_node(queue_path)
    if node is None:
        return None
    return node.properties.get(store.codec.localize_key(queue_path, full_key))


def build_change_records(store: StagedChangeStore) -> List[Dict[str, Any]]:
    """Uma linha por propriedade (Add/Update), uma por Delete e uma por chave global."""
    records: List[Dict[str, Any]] = []

    for entry in store.get_staged_additions_for_api():
        for full_key, value in entry["params"].items():
            records.append(
                {
                    "operation": "ADD",
                    "queue_path": entry["queueName"],
                    "property_key": full_key,
                    "old_value": None,
                    "new_value": value,
                }
            )

    for entry in store.get_staged_updates_for_api():
        path = entry["queueName"]
        for full_key, value in entry["params"].items():
            records.append(
                {
                    "operation": "UPDATE",
                    "queue_path": path,
                    "property_key": full_key,
                    "old_value": _baseline_value(store, path, full_key),
                    "new_value": value,
                }
            )

    for path in store.get_staged_deletions():
        records.append(
            {
                "operation": "DELETE",
                "queue_path": path,
                "property_key": None,
                "old_value": None,
                "new_value": None,
            }
        )

    baseline_globals = store.trie.global_properties if store.trie is not None else {}
    prefix = store.codec.prefix
    for full_key, value in store.get_staged_global_updates_for_api().items():
        records.append(
            {
                "operation": "GLOBAL_UPDATE",
                "queue_path": None,
                "property_key": full_key,
                "old_value": baseline_globals.get(full_key[len(prefix):]),
                "new_value": value,
            }
        )

    return records


def change_preview_frame(store: StagedChangeStore) -> pd.DataFrame:
    return pd.DataFrame(build_change_records(store), columns=CHANGE_COLUMNS)


def hierarchy_frame(formatted_root: Optional[FormattedQueue]) -> pd.DataFrame:
    """Uma linha por fila da hierarquia formatada, em pré-ordem."""
    rows: List[Dict[str, Any]] = []
    if formatted_root is not None:
        for queue in formatted_root.iter_tree():
            rows.append(
                {
                    "path": queue.path,
                    "level": queue.level,
                    "parent_path": queue.parent_path,
                    "queue_type": queue.queue_type.value,
                    "change_status": queue.change_status.value,
                    "capacity_mode": queue.effective_capacity_mode.value,
                    "capacity": queue.capacity,
                    "maximum_capacity": queue.maximum_capacity,
                    "state": queue.state,
                    "can_delete": queue.deletion.can_delete,
                }
            )
    return pd.DataFrame(rows, columns=HIERARCHY_COLUMNS)
