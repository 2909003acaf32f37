# tests/core/config/test_hashing.py
"""
Testes do hashing canônico de configuração (compute_config_hash).

Os testes asseguram que:
- o hash é determinístico e independente da ordem das chaves
- o hash corresponde ao SHA-256 do JSON canônico
- qualquer alteração de valor altera o hash

Limites explícitos:
    - Não valida o Trie (ver `snapshot_hash` em test_trie_build.py)
"""

import hashlib
import json

import pytest

try:
    from queue_overlay.core.config.hashing import compute_config_hash
except Exception as e:  # noqa: BLE001
    compute_config_hash = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing hashing module. Implement:\n"
            "- src/queue_overlay/core/config/hashing.py (compute_config_hash)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_hash_is_deterministic():
    """
    Verifica que mapas equivalentes (em qualquer ordem) produzem o mesmo hash.

    Invariantes:
        - O hash é uma string hexadecimal de 64 caracteres
    """
    _require_imports()
    a = {"yarn.scheduler.capacity.root.queues": "a,b", "yarn.scheduler.capacity.root.a.capacity": "50"}
    b = {"yarn.scheduler.capacity.root.a.capacity": "50", "yarn.scheduler.capacity.root.queues": "a,b"}

    h1 = compute_config_hash(a)
    h2 = compute_config_hash(b)
    assert h1 == h2
    assert isinstance(h1, str)
    assert len(h1) == 64


def test_hash_matches_sha256_of_canonical_json():
    _require_imports()
    cfg = {"prefix": "yarn.scheduler.capacity.", "reconciliation": {"policy": "drop"}}
    canonical = json.dumps(cfg, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    expected = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    assert compute_config_hash(cfg) == expected


def test_hash_changes_on_override():
    _require_imports()
    base = {"reconciliation": {"policy": "drop"}}
    changed = {"reconciliation": {"policy": "keep"}}
    assert compute_config_hash(base) != compute_config_hash(changed)


def test_hash_rejects_non_dict():
    _require_imports()
    with pytest.raises(TypeError):
        compute_config_hash(["not", "a", "dict"])
