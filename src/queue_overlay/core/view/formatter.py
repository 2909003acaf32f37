# src/queue_overlay/core/view/formatter.py
"""
View-Data Formatter — estado de exibição de filas e montagem da hierarquia.

Este módulo resolve o estado efetivo e pronto para exibição de uma fila
(modo de capacidade, normalização de valores, vetor de recursos,
elegibilidade de remoção, labels) e monta recursivamente a hierarquia
completa, enxertando filas pendentes sob o pai registrado no blueprint.

Decisões arquiteturais:
    - Toda leitura passa pelo Store (`get_queue`); o Formatter não guarda
      `change_status` nem acessa o mapa interno de staging
    - `queue_type` é decidido somente após o enxerto dos filhos pendentes
    - Dados malformados são mascarados com defaults e registrados como
      diagnóstico `INVALID_CAPACITY_FORMAT` (nunca bloqueiam a exibição)

Invariantes:
    - O cache da hierarquia é indexado pela `revision` do Store
    - Resultados retornados são sempre cópias independentes

Limites explícitos:
    - Não renderiza (layout, canvas, componentes)
    - Não valida regras de negócio dos valores
"""

from __future__ import annotations

import copy
from typing import Dict, List, Optional, Set, Tuple

from ..constants import ROOT_QUEUE, CapacityMode, ChangeStatus, QueueType
from ..errors import invalid_capacity_format
from ..metadata import PropertyMetadataCatalog
from ..staging import EffectiveQueue, StagedChangeStore
from ..traceability import EventLog
from .capacity import (
    detect_capacity_mode,
    normalize_capacity,
    normalize_max_capacity,
    parse_resource_vector,
)
from .models import (
    ACTION_DELETE,
    ACTION_UNDO_DELETE,
    DeletionEligibility,
    FormattedQueue,
    UILabel,
)

SOURCE = "view.formatter"

CAPACITY_KEY = "capacity"
MAX_CAPACITY_KEY = "maximum-capacity"
STATE_KEY = "state"
AUTO_CREATE_KEYS = ("auto-create-child-queue.enabled", "auto-queue-creation-v2.enabled")

_STATUS_CLASS = {
    ChangeStatus.DELETE: "to-be-deleted",
    ChangeStatus.ADD: "new-queue",
    ChangeStatus.UPDATE: "pending-changes",
}


class QueueViewDataFormatter:
    def __init__(
        self,
        store: StagedChangeStore,
        catalog: Optional[PropertyMetadataCatalog] = None,
        *,
        events: Optional[EventLog] = None,
        cache_enabled: bool = True,
    ):
        self.store = store
        self.catalog = catalog if catalog is not None else store.codec.catalog
        self.events = events if events is not None else store.events
        self.cache_enabled = cache_enabled
        self._cache: Optional[FormattedQueue] = None
        self._cache_revision: Optional[int] = None
        self._reported: Set[Tuple[str, str, str]] = set()

    # ------------------------------------------------------------------
    # API pública
    # ------------------------------------------------------------------

    def get_formatted_queue(self, queue_path: str) -> Optional[FormattedQueue]:
        """
        Formata uma única fila (sem filhos) a partir da visão efetiva do Store.

        Args:
            queue_path (str): Queue path.

        Returns:
            Optional[FormattedQueue]: Dados de exibição, ou None se a fila não existe.
        """
        queue = self.store.get_queue(queue_path)
        if queue is None:
            return None
        return self._format(queue)

    def get_formatted_queue_hierarchy(self) -> Optional[FormattedQueue]:
        """
        Monta a hierarquia formatada a partir de `root`.

        Filhos do Trie são formatados recursivamente; em seguida, cada Add
        pendente cujo `parent_path` aponta para a fila é enxertado (se o
        nome ainda não existir entre os filhos do Trie).
        """
        revision = self.store.revision
        if self.cache_enabled and self._cache is not None and self._cache_revision == revision:
            return copy.deepcopy(self._cache)

        hierarchy = self._format_recursive(ROOT_QUEUE)

        if self.cache_enabled:
            self._cache = hierarchy
            self._cache_revision = revision
        return copy.deepcopy(hierarchy)

    def invalidate_cache(self) -> None:
        """Descarta a hierarquia em cache e permite re-reportar valores mascarados."""
        self._cache = None
        self._cache_revision = None
        self._reported.clear()

    def check_deletability(self, queue_path: str) -> DeletionEligibility:
        """
        Decide se a fila pode ser marcada para remoção.

        Regras:
            - `root` nunca pode ser removida
            - fila já marcada: removível, com ação "Undo Delete"
            - fila com filhos ativos (Trie não removidos + Adds pendentes): não removível

        Args:
            queue_path (str): Queue path.

        Returns:
            DeletionEligibility: Decisão, motivo e rótulo da ação.
        """
        if queue_path == ROOT_QUEUE:
            return DeletionEligibility(can_delete=False, reason="Cannot delete root queue.")

        queue = self.store.get_queue(queue_path)
        if queue is None:
            return DeletionEligibility(can_delete=False, reason="Queue not found.")

        return self._eligibility(queue)

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------

    def _eligibility(self, queue: EffectiveQueue) -> DeletionEligibility:
        if queue.is_root:
            return DeletionEligibility(can_delete=False, reason="Cannot delete root queue.")

        if queue.change_status == ChangeStatus.DELETE:
            return DeletionEligibility(
                can_delete=True,
                reason="Marked for deletion.",
                action_label=ACTION_UNDO_DELETE,
            )

        active = self._active_child_names(queue)
        if active:
            names = ", ".join(active[:3]) + ("..." if len(active) > 3 else "")
            return DeletionEligibility(
                can_delete=False,
                reason=f"Cannot delete: has active child queues ({names}).",
            )

        return DeletionEligibility(can_delete=True, reason="", action_label=ACTION_DELETE)

    def _format_recursive(self, queue_path: str) -> Optional[FormattedQueue]:
        formatted = self.get_formatted_queue(queue_path)
        if formatted is None:
            return None

        for child_path in self.store.trie_child_paths(queue_path):
            child = self._format_recursive(child_path)
            if child is not None:
                formatted.children[child.name] = child

        for addition in self.store.iter_pending_additions(parent_path=queue_path):
            name = addition.blueprint.name
            if name in formatted.children:
                continue
            child = self._format_recursive(addition.path)
            if child is not None:
                formatted.children[name] = child

        has_active = any(not child.is_deleted for child in formatted.children.values())
        formatted.queue_type = QueueType.PARENT if has_active else QueueType.LEAF
        return formatted

    def _active_child_names(self, queue: EffectiveQueue) -> List[str]:
        names: List[str] = []
        for name in queue.child_names:
            if not self.store.is_state_delete(f"{queue.path}.{name}"):
                names.append(name)
        for addition in self.store.iter_pending_additions(parent_path=queue.path):
            if addition.blueprint.name in names or self.store.is_state_delete(addition.path):
                continue
            names.append(addition.blueprint.name)
        return names

    def _report_masked(self, queue_path: str, key: str, raw_value: str, fallback: str) -> None:
        marker = (queue_path, key, raw_value)
        if marker in self._reported:
            return
        self._reported.add(marker)
        self.events.record(
            source=SOURCE,
            diagnostic=invalid_capacity_format(
                queue_path=queue_path,
                property_key=key,
                raw_value=raw_value,
                fallback=fallback,
            ),
        )

    def _format(self, queue: EffectiveQueue) -> FormattedQueue:
        raw = queue.properties
        mode = detect_capacity_mode(raw.get(CAPACITY_KEY), queue.capacity_mode_hint)

        capacity, masked = normalize_capacity(raw.get(CAPACITY_KEY), mode)
        if masked:
            self._report_masked(queue.path, CAPACITY_KEY, raw[CAPACITY_KEY], capacity)

        max_capacity, masked = normalize_max_capacity(raw.get(MAX_CAPACITY_KEY))
        if masked:
            self._report_masked(queue.path, MAX_CAPACITY_KEY, raw[MAX_CAPACITY_KEY], max_capacity)

        properties: Dict[str, str] = {}
        for definition in self.catalog.definitions():
            key = definition.simple_key
            if key == CAPACITY_KEY:
                properties[key] = capacity
            elif key == MAX_CAPACITY_KEY:
                properties[key] = max_capacity
            elif key in raw:
                properties[key] = raw[key]
            else:
                properties[key] = definition.default_value or ""
        for key, value in raw.items():
            properties.setdefault(key, value)
        properties.setdefault(CAPACITY_KEY, capacity)
        properties.setdefault(MAX_CAPACITY_KEY, max_capacity)

        state = properties.get(STATE_KEY) or "RUNNING"
        status = queue.change_status

        formatted = FormattedQueue(
            path=queue.path,
            name=queue.name,
            parent_path=queue.parent_path,
            level=queue.level,
            change_status=status,
            effective_capacity_mode=mode,
            properties=properties,
            capacity=capacity,
            maximum_capacity=max_capacity,
            state=state,
            is_new=status == ChangeStatus.ADD,
            is_deleted=status == ChangeStatus.DELETE,
            has_pending_changes=status == ChangeStatus.UPDATE,
            is_root=queue.path == ROOT_QUEUE,
            status_class=_STATUS_CLASS.get(status, ""),
        )

        if mode in (CapacityMode.ABSOLUTE, CapacityMode.VECTOR):
            formatted.capacity_details = parse_resource_vector(capacity)
        if max_capacity.startswith("["):
            formatted.max_capacity_details = parse_resource_vector(max_capacity)

        formatted.queue_type = QueueType.PARENT if self._active_child_names(queue) else QueueType.LEAF
        formatted.ui_labels = self._labels(mode, state, properties)
        formatted.deletion = self._eligibility(queue)
        return formatted

    @staticmethod
    def _labels(mode: CapacityMode, state: str, properties: Dict[str, str]) -> List[UILabel]:
        mode_text = mode.value.capitalize()
        labels = [
            UILabel(
                text=mode_text,
                css_class="queue-tag tag-mode",
                title=f"Capacity Mode: {mode_text}",
            )
        ]
        if state == "STOPPED":
            labels.append(UILabel(text="Stopped", css_class="queue-tag tag-state tag-stopped", title="Queue State: Stopped"))
        else:
            labels.append(UILabel(text="Running", css_class="queue-tag tag-state tag-running", title="Queue State: Running"))

        if any(properties.get(key) == "true" for key in AUTO_CREATE_KEYS):
            labels.append(
                UILabel(text="Auto-Create", css_class="queue-tag tag-auto-create", title="Auto Queue Creation Enabled")
            )
        return labels
