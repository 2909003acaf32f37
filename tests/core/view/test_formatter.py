# tests/core/view/test_formatter.py
"""
Testes do View-Data Formatter para uma única fila (get_formatted_queue).

Este módulo valida a resolução do estado pronto para exibição de uma
fila a partir do Store: modo de capacidade, normalização de valores,
vetor de recursos, flags de status, labels e elegibilidade de remoção.

Os testes asseguram que:
- `change_status` é sempre uma projeção fresca do Store
- a dica de modo de um Update pendente tem prioridade
- valores malformados são mascarados e registrados como diagnóstico
- a elegibilidade de remoção considera filhos ativos do Trie e pendentes

Limites explícitos:
    - Não valida a montagem recursiva (ver test_hierarchy.py)
"""

import pytest

try:
    from queue_overlay.core.constants import CapacityMode, ChangeStatus, QueueType
    from queue_overlay.core.errors import INVALID_CAPACITY_FORMAT
    from queue_overlay.core.staging import StagedChangeStore
    from queue_overlay.core.view import QueueViewDataFormatter
except Exception as e:  # noqa: BLE001
    QueueViewDataFormatter = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None

P = "yarn.scheduler.capacity."


def _require_imports():
    """
    Garante que o Formatter e suas dependências estejam disponíveis.

    Falha imediatamente quando `core.view` ou `core.staging` não podem
    ser importados, com mensagem que descreve os módulos esperados.
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing view modules. Implement:\n"
            "- src/queue_overlay/core/view/formatter.py (QueueViewDataFormatter)\n"
            "- src/queue_overlay/core/view/models.py (FormattedQueue)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_percentage_queue_is_normalized(nested_formatter):
    _require_imports()
    fq = nested_formatter.get_formatted_queue("root.analytics")

    assert fq.effective_capacity_mode == CapacityMode.PERCENTAGE
    assert fq.capacity == "60.0%"
    assert fq.maximum_capacity == "100.0%"
    assert fq.properties["capacity"] == "60.0%"
    assert fq.properties["maximum-capacity"] == "100.0%"
    assert fq.change_status == ChangeStatus.UNCHANGED
    assert fq.status_class == ""
    assert fq.queue_type == QueueType.PARENT


def test_catalog_defaults_and_raw_extras(nested_formatter):
    """
    Verifica o mapa de propriedades exibido.

    Invariantes:
        - Toda propriedade do catálogo aparece (valor bruto ou default)
        - Propriedades fora do catálogo aparecem inalteradas
    """
    _require_imports()
    fq = nested_formatter.get_formatted_queue("root.analytics")

    assert fq.properties["state"] == "RUNNING"
    assert fq.properties["user-limit-factor"] == "1"
    assert fq.properties["ordering-policy"] == "fifo"
    assert fq.properties["max-parallel-apps"] == ""
    assert fq.properties["accessible-node-labels.GPU.capacity"] == "50"
    assert fq.properties["queues"] == "batch,adhoc"


def test_absolute_queue_has_resource_breakdown(nested_formatter):
    _require_imports()
    fq = nested_formatter.get_formatted_queue("root.default")

    assert fq.effective_capacity_mode == CapacityMode.ABSOLUTE
    assert fq.capacity == "[memory=2048,vcores=2]"
    assert [e.to_dict() for e in fq.capacity_details] == [
        {"key": "memory", "value": "2048", "unit": ""},
        {"key": "vcores", "value": "2", "unit": ""},
    ]
    assert [e.key for e in fq.max_capacity_details] == ["memory", "vcores"]
    assert fq.queue_type == QueueType.LEAF


def test_labels(nested_formatter):
    _require_imports()
    batch = nested_formatter.get_formatted_queue("root.analytics.batch")
    analytics = nested_formatter.get_formatted_queue("root.analytics")

    assert [label.text for label in batch.ui_labels] == ["Weight", "Stopped"]
    assert batch.state == "STOPPED"
    assert [label.text for label in analytics.ui_labels] == ["Percentage", "Running", "Auto-Create"]


def test_pending_update_hint_drives_mode(nested_store, nested_formatter):
    """
    Verifica que a dica de modo de um Update pendente tem prioridade.

    O valor bruto `60` seria detectado como percentual; a dica `weight`
    força o modo peso e a normalização correspondente.
    """
    _require_imports()
    nested_store.do_update("root.analytics", {"_ui_capacityMode": "weight"})
    fq = nested_formatter.get_formatted_queue("root.analytics")

    assert fq.effective_capacity_mode == CapacityMode.WEIGHT
    assert fq.capacity == "60.0w"
    assert fq.has_pending_changes is True
    assert fq.status_class == "pending-changes"


def test_status_flags_follow_the_store(nested_store, nested_formatter, blueprint_factory):
    _require_imports()
    nested_store.do_delete("root.default")
    nested_store.do_add("root.fresh", blueprint_factory("root", "fresh", {"capacity": "5"}))

    deleted = nested_formatter.get_formatted_queue("root.default")
    assert deleted.is_deleted is True
    assert deleted.status_class == "to-be-deleted"
    assert deleted.deletion.can_delete is True
    assert deleted.deletion.action_label == "Undo Delete"
    assert deleted.deletion.reason == "Marked for deletion."

    fresh = nested_formatter.get_formatted_queue("root.fresh")
    assert fresh.is_new is True
    assert fresh.status_class == "new-queue"
    assert fresh.capacity == "5.0%"

    nested_store.delete_change("root.default")
    assert nested_formatter.get_formatted_queue("root.default").is_deleted is False


def test_missing_queue_returns_none(nested_formatter):
    _require_imports()
    assert nested_formatter.get_formatted_queue("root.nope") is None


def test_root_flags(nested_formatter):
    _require_imports()
    root = nested_formatter.get_formatted_queue("root")
    assert root.is_root is True
    assert root.parent_path is None
    assert root.level == 0
    assert root.capacity == "100.0%"
    assert root.deletion.can_delete is False
    assert root.deletion.reason == "Cannot delete root queue."


def test_deletability_with_one_active_and_one_deleted_child(nested_store, nested_formatter):
    _require_imports()
    nested_store.do_delete("root.analytics.batch")

    result = nested_formatter.check_deletability("root.analytics")
    assert result.can_delete is False
    assert result.reason == "Cannot delete: has active child queues (adhoc)."
    assert result.action_label == "Delete Queue"


def test_deletability_counts_pending_children(nested_store, nested_formatter, blueprint_factory):
    _require_imports()
    assert nested_formatter.check_deletability("root.default").can_delete is True

    nested_store.do_add("root.default.child", blueprint_factory("root.default", "child"))
    result = nested_formatter.check_deletability("root.default")
    assert result.can_delete is False
    assert "child" in result.reason


def test_deletability_truncates_child_list(make_trie):
    _require_imports()
    trie = make_trie(
        [
            {"name": P + "root.queues", "value": "p"},
            {"name": P + "root.p.queues", "value": "c1,c2,c3,c4"},
        ]
    )
    formatter = QueueViewDataFormatter(StagedChangeStore(trie))
    result = formatter.check_deletability("root.p")
    assert result.reason == "Cannot delete: has active child queues (c1, c2, c3...)."


def test_deletability_edge_cases(nested_formatter):
    _require_imports()
    assert nested_formatter.check_deletability("root").reason == "Cannot delete root queue."
    missing = nested_formatter.check_deletability("root.nope")
    assert missing.can_delete is False
    assert missing.reason == "Queue not found."


def test_invalid_capacity_is_masked_and_reported(make_trie, events):
    """
    Verifica que valores não interpretáveis nunca bloqueiam a exibição.

    Invariantes:
        - O valor exibido é o default documentado
        - Um diagnóstico INVALID_CAPACITY_FORMAT é registrado uma única vez
    """
    _require_imports()
    trie = make_trie(
        [
            {"name": P + "root.queues", "value": "bad"},
            {"name": P + "root.bad.capacity", "value": "lots"},
            {"name": P + "root.bad.maximum-capacity", "value": "??"},
        ]
    )
    formatter = QueueViewDataFormatter(StagedChangeStore(trie, events=events))

    fq = formatter.get_formatted_queue("root.bad")
    formatter.get_formatted_queue("root.bad")

    assert fq.capacity == "0.0%"
    assert fq.maximum_capacity == "100.0%"
    diags = events.diagnostics(INVALID_CAPACITY_FORMAT)
    assert sorted(d["details"]["property_key"] for d in diags) == ["capacity", "maximum-capacity"]
    assert "view.formatter" in events.warnings


def test_invalidate_cache_resets_masked_value_reports(make_trie, events):
    _require_imports()
    trie = make_trie(
        [
            {"name": P + "root.queues", "value": "bad"},
            {"name": P + "root.bad.capacity", "value": "lots"},
        ]
    )
    formatter = QueueViewDataFormatter(StagedChangeStore(trie, events=events))

    formatter.get_formatted_queue("root.bad")
    formatter.invalidate_cache()
    formatter.get_formatted_queue("root.bad")

    assert len(events.diagnostics(INVALID_CAPACITY_FORMAT)) == 2


def test_to_dict_is_serializable(nested_formatter):
    _require_imports()
    import json

    data = nested_formatter.get_formatted_queue("root.default").to_dict()
    assert data["effective_capacity_mode"] == "absolute"
    assert data["change_status"] == "UNCHANGED"
    assert data["display_name"] == "default"
    json.dumps(data)
