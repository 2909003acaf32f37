# src/queue_overlay/core/config/settings.py
"""
Settings resolvidos do motor de overlay.

Este módulo define os defaults embutidos do Queue Overlay e a estrutura
imutável (`EngineSettings`) que os componentes do core recebem por
injeção explícita.

Chaves reconhecidas (v1):
    prefix: prefixo fixo das propriedades do scheduler
    reconciliation.policy: "drop" | "keep" — o que fazer com alterações
        pendentes que deixam de resolver após uma recarga
    hierarchy.cache_enabled: habilita cache da hierarquia formatada
    catalog.path: caminho opcional para um catálogo de metadata em YAML/JSON
    events.max_events: limite opcional de eventos retidos por sessão

Invariantes:
    - `DEFAULT_SETTINGS` é sempre a base do merge
    - `EngineSettings` é imutável e hashable
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..constants import PROPERTY_PREFIX
from .errors import InvalidSettingsError


RECONCILIATION_DROP = "drop"
RECONCILIATION_KEEP = "keep"
RECONCILIATION_POLICIES = (RECONCILIATION_DROP, RECONCILIATION_KEEP)


DEFAULT_SETTINGS: Dict[str, Any] = {
    "prefix": PROPERTY_PREFIX,
    "reconciliation": {"policy": RECONCILIATION_DROP},
    "hierarchy": {"cache_enabled": True},
    "catalog": {"path": None},
    "events": {"max_events": None},
}


@dataclass(frozen=True)
class EngineSettings:
    prefix: str = PROPERTY_PREFIX
    reconciliation_policy: str = RECONCILIATION_DROP
    hierarchy_cache_enabled: bool = True
    catalog_path: Optional[str] = None
    max_events: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineSettings":
        """
        Constrói settings a partir de um dicionário já resolvido (pós-merge).

        Raises:
            InvalidSettingsError: Se algum valor estiver fora do domínio aceito.
        """
        prefix = data.get("prefix", PROPERTY_PREFIX)
        if not isinstance(prefix, str) or not prefix.strip():
            raise InvalidSettingsError("prefix deve ser uma string não vazia")
        if not prefix.endswith("."):
            prefix = prefix + "."

        reconciliation = data.get("reconciliation") or {}
        policy = reconciliation.get("policy", RECONCILIATION_DROP)
        if policy not in RECONCILIATION_POLICIES:
            raise InvalidSettingsError(
                f"reconciliation.policy inválida: {policy!r} (esperado: {', '.join(RECONCILIATION_POLICIES)})"
            )

        hierarchy = data.get("hierarchy") or {}
        cache_enabled = hierarchy.get("cache_enabled", True)
        if not isinstance(cache_enabled, bool):
            raise InvalidSettingsError("hierarchy.cache_enabled deve ser booleano")

        catalog = data.get("catalog") or {}
        catalog_path = catalog.get("path")
        if catalog_path is not None and not isinstance(catalog_path, str):
            raise InvalidSettingsError("catalog.path deve ser string ou null")

        events = data.get("events") or {}
        max_events = events.get("max_events")
        if max_events is not None and (
            isinstance(max_events, bool) or not isinstance(max_events, int) or max_events < 1
        ):
            raise InvalidSettingsError("events.max_events deve ser inteiro positivo ou null")

        return cls(
            prefix=prefix,
            reconciliation_policy=policy,
            hierarchy_cache_enabled=cache_enabled,
            catalog_path=catalog_path,
            max_events=max_events,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prefix": self.prefix,
            "reconciliation": {"policy": self.reconciliation_policy},
            "hierarchy": {"cache_enabled": self.hierarchy_cache_enabled},
            "catalog": {"path": self.catalog_path},
            "events": {"max_events": self.max_events},
        }
