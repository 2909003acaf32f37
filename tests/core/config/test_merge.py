# tests/core/config/test_merge.py
"""
Testes das políticas de merge de configuração.

Este módulo valida:
- `deep_merge`: resolução dos settings do motor a partir dos defaults
  embutidos e de overrides explícitos
- `overlay_flat`: sobrescrita chave a chave usada pelo Store para aplicar
  modificações pendentes sobre a baseline

Os testes asseguram que:
- valores escalares são sobrescritos corretamente
- dicionários são mesclados de forma recursiva
- listas são sobrescritas integralmente
- conflitos de tipo são detectados e rejeitados explicitamente
- objetos de entrada não são mutados

Limites explícitos:
    - Não valida carregamento de arquivos YAML
    - Não valida hashing
"""

import pytest

try:
    from queue_overlay.core.config.merge import deep_merge, overlay_flat
    from queue_overlay.core.config.errors import ConfigTypeConflictError
except Exception as e:  # noqa: BLE001
    deep_merge = None
    overlay_flat = None
    ConfigTypeConflictError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que `deep_merge`, `overlay_flat` e `ConfigTypeConflictError` estejam disponíveis.

    Invariantes:
        - Se os módulos existem, a função não produz efeitos colaterais
        - Se algum módulo está ausente, o teste falha imediatamente
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing merge/errors modules. Implement:\n"
            "- src/queue_overlay/core/config/merge.py (deep_merge, overlay_flat)\n"
            "- src/queue_overlay/core/config/errors.py (ConfigTypeConflictError)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_merge_simple_override():
    """
    Verifica o override de valores escalares sem mutar as entradas.

    Invariantes:
        - Apenas chaves presentes no override são alteradas
        - `base` e `override` permanecem inalterados
    """
    _require_imports()
    base = {"prefix": "yarn.scheduler.capacity.", "reconciliation": {"policy": "drop"}}
    override = {"prefix": "custom."}

    out = deep_merge(base, override)
    assert out == {"prefix": "custom.", "reconciliation": {"policy": "drop"}}
    assert base == {"prefix": "yarn.scheduler.capacity.", "reconciliation": {"policy": "drop"}}
    assert override == {"prefix": "custom."}


def test_merge_nested_dict():
    _require_imports()
    base = {"hierarchy": {"cache_enabled": True}, "reconciliation": {"policy": "drop"}}
    override = {"reconciliation": {"policy": "keep"}}

    out = deep_merge(base, override)
    assert out == {"hierarchy": {"cache_enabled": True}, "reconciliation": {"policy": "keep"}}


def test_merge_list_override_total():
    _require_imports()
    out = deep_merge({"extra": {"paths": ["a", "b"]}}, {"extra": {"paths": ["c"]}})
    assert out == {"extra": {"paths": ["c"]}}


def test_merge_type_conflict_raises():
    """
    Verifica que conflitos de tipo são rejeitados explicitamente.

    Um dicionário na base não pode ser substituído por um escalar.
    """
    _require_imports()
    with pytest.raises(ConfigTypeConflictError):
        deep_merge({"hierarchy": {"cache_enabled": True}}, {"hierarchy": "off"})


def test_merge_none_base_accepts_any_type():
    _require_imports()
    out = deep_merge({"catalog": {"path": None}}, {"catalog": {"path": "catalog.yaml"}})
    assert out == {"catalog": {"path": "catalog.yaml"}}


def test_overlay_flat_overwrites_key_by_key():
    _require_imports()
    base = {"capacity": "40%", "state": "RUNNING"}
    out = overlay_flat(base, {"capacity": "55%", "_ui_capacityMode": "percentage"}, skip=["_ui_capacityMode"])

    assert out == {"capacity": "55%", "state": "RUNNING"}
    assert base == {"capacity": "40%", "state": "RUNNING"}
