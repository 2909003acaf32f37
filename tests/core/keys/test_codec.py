# tests/core/keys/test_codec.py
"""
Testes do codec de chaves de propriedade (PropertyKeyCodec).

Os testes asseguram que:
- a substituição de placeholder usa o catálogo de metadata
- o fallback `<prefix><path>.<chave>` nunca falha
- nomes multi-segmento e palavras-chave estruturais são reconhecidos
  antes do corte ingênuo no último segmento
- chaves fora do prefixo de filas resultam em None

Limites explícitos:
    - Não valida a construção do Trie
    - Não valida o catálogo além do necessário para o codec
"""

import pytest

try:
    from queue_overlay.core.keys import PropertyKeyCodec
    from queue_overlay.core.metadata import PropertyMetadataCatalog
except Exception as e:  # noqa: BLE001
    PropertyKeyCodec = None
    PropertyMetadataCatalog = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None

P = "yarn.scheduler.capacity."


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing codec module. Implement:\n"
            "- src/queue_overlay/core/keys/codec.py (PropertyKeyCodec)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_to_full_key_uses_catalog_placeholder():
    _require_imports()
    codec = PropertyKeyCodec()
    assert codec.to_full_key("root.a", "capacity") == P + "root.a.capacity"
    assert (
        codec.to_full_key("root.a", "auto-queue-creation-v2.enabled")
        == P + "root.a.auto-queue-creation-v2.enabled"
    )


def test_to_full_key_falls_back_for_unknown_key():
    """
    Verifica que chaves fora do catálogo usam o fallback determinístico.

    Invariantes:
        - `to_full_key` nunca levanta exceção
        - O formato do fallback é `<prefix><queue_path>.<simple_key>`
    """
    _require_imports()
    codec = PropertyKeyCodec()
    assert codec.to_full_key("root.x", "acl_submit_applications") == P + "root.x.acl_submit_applications"


def test_to_full_key_respects_custom_prefix():
    _require_imports()
    codec = PropertyKeyCodec(prefix="custom.scheduler")
    assert codec.prefix == "custom.scheduler."
    assert codec.to_full_key("root.a", "capacity") == "custom.scheduler.root.a.capacity"


def test_extract_queue_path_simple_and_multi_segment():
    """
    Verifica o reconhecimento de nomes multi-segmento antes do fallback.

    A divisão ingênua por último segmento retornaria
    `root.a.auto-queue-creation-v2` para a chave multi-segmento; o codec
    deve retornar `root.a`.
    """
    _require_imports()
    codec = PropertyKeyCodec()
    assert codec.extract_queue_path(P + "root.a.capacity") == "root.a"
    assert codec.extract_queue_path(P + "root.a.auto-queue-creation-v2.enabled") == "root.a"
    assert codec.extract_queue_path(P + "root.a.b.auto-create-child-queue.enabled") == "root.a.b"
    assert codec.extract_queue_path(P + "root.capacity") == "root"


def test_extract_queue_path_stops_before_structural_keywords():
    _require_imports()
    codec = PropertyKeyCodec()
    assert codec.extract_queue_path(P + "root.a.accessible-node-labels.GPU.capacity") == "root.a"
    assert codec.extract_queue_path(P + "root.p.leaf-queue-template.capacity") == "root.p"


@pytest.mark.parametrize("scope", ["template", "parent-template", "leaf-template"])
def test_auto_creation_v2_template_scopes(scope):
    """
    Verifica as chaves de template do auto-creation v2.

    Formato: `<queue>.auto-queue-creation-v2.<escopo>.<chave>`; o queue
    path termina antes de `auto-queue-creation-v2`.
    """
    _require_imports()
    codec = PropertyKeyCodec()
    key = P + f"root.parent.auto-queue-creation-v2.{scope}.capacity"

    assert codec.extract_queue_path(key) == "root.parent"
    assert codec.to_simple_key(key) == f"auto-queue-creation-v2.{scope}.capacity"

    nested = P + f"root.a.b.auto-queue-creation-v2.{scope}.maximum-capacity"
    assert codec.extract_queue_path(nested) == "root.a.b"


def test_template_scope_alone_is_not_structural():
    _require_imports()
    codec = PropertyKeyCodec()
    assert codec.extract_queue_path(P + "root.template.capacity") == "root.template"
    assert codec.to_simple_key(P + "root.template.capacity") == "capacity"
    assert codec.extract_queue_path(P + "root.p.leaf-template.state") == "root.p.leaf-template"


def test_declared_queue_named_like_a_keyword():
    _require_imports()
    codec = PropertyKeyCodec()
    key = P + "root.accessible-node-labels.capacity"
    declared = {"root", "root.accessible-node-labels"}

    assert codec.extract_queue_path(key) == "root"
    assert codec.extract_queue_path(key, declared) == "root.accessible-node-labels"
    assert codec.to_simple_key(key, declared) == "capacity"


def test_extract_queue_path_outside_queue_prefix_is_none():
    _require_imports()
    codec = PropertyKeyCodec()
    assert codec.extract_queue_path("yarn.resourcemanager.scheduler.class") is None
    assert codec.extract_queue_path(P + "maximum-applications") is None
    assert codec.extract_queue_path(P + "root") is None


def test_multi_segment_names_come_from_the_catalog():
    """Um catálogo customizado com nome multi-segmento altera a extração."""
    _require_imports()
    catalog = PropertyMetadataCatalog.from_mapping(
        {P + "<queue_path>.ordering-policy.fair.enable-size-based-weight": {"displayName": "Size based"}}
    )
    codec = PropertyKeyCodec(catalog)
    key = P + "root.a.ordering-policy.fair.enable-size-based-weight"
    assert codec.extract_queue_path(key) == "root.a"
    assert codec.to_simple_key(key) == "ordering-policy.fair.enable-size-based-weight"


def test_is_global_property():
    _require_imports()
    codec = PropertyKeyCodec()
    assert codec.is_global_property(P + "maximum-applications") is True
    assert codec.is_global_property(P + "resource-calculator") is True
    assert codec.is_global_property(P + "root.a.capacity") is False
    assert codec.is_global_property("yarn.resourcemanager.scheduler.class") is False


def test_to_simple_key_and_localize_key():
    _require_imports()
    codec = PropertyKeyCodec()
    assert codec.to_simple_key(P + "root.a.capacity") == "capacity"
    assert codec.to_simple_key(P + "root.a.auto-queue-creation-v2.max-queues") == "auto-queue-creation-v2.max-queues"
    assert codec.to_simple_key("other.key") is None

    assert codec.localize_key("root.a", P + "root.a.capacity") == "capacity"
    assert codec.localize_key("root.a", "capacity") == "capacity"
    # chave de outra fila não é localizada
    assert codec.localize_key("root.a", P + "root.b.capacity") == P + "root.b.capacity"


def test_convert_to_full_keys_skips_ui_hint():
    _require_imports()
    codec = PropertyKeyCodec()
    out = codec.convert_to_full_keys(
        {"capacity": "30%", "state": "STOPPED", "_ui_capacityMode": "percentage"},
        "root.a",
    )
    assert out == {
        P + "root.a.capacity": "30%",
        P + "root.a.state": "STOPPED",
    }
