# src/queue_overlay/core/traceability/event_log.py
"""
Event Log estruturado de uma sessão de edição.

Este módulo define o `EventLog`, o ponto central de observabilidade do
Queue Overlay. Em vez de handlers de logging globais, cada sessão de
edição acumula eventos estruturados e warnings não fatais agrupados
pela origem que os emitiu (ex.: `trie.build`, `view.formatter`).

Princípios fundamentais:
    - Logs não são strings livres, mas eventos estruturados
    - Warnings são sinais não fatais e não interrompem o fluxo
    - Isolamento por sessão (nenhum estado global compartilhado)

Invariantes:
    - Todo evento contém `session_id`, `source`, `level`, `message` e `timestamp`
    - Warnings são agrupados por `source`, preservando ordem de inserção
    - Diagnósticos tipados são serializados via `to_dict()`

Limites explícitos:
    - Não persiste eventos
    - Não decide políticas de severidade
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..errors import DiagnosticPayload


@dataclass
class EventLog:
    """
    Coletor de eventos e warnings de uma sessão de edição.

    Campos canônicos:
    - session_id: identificador da sessão à qual os eventos pertencem
    - events: log estruturado de eventos (ordem real de emissão)
    - warnings: mensagens de warning por origem
    - max_events: limite opcional de eventos retidos (os mais antigos saem primeiro)
    """

    session_id: str = "default"
    events: List[Dict[str, Any]] = field(default_factory=list)
    warnings: Dict[str, List[str]] = field(default_factory=dict)
    max_events: Optional[int] = None

    def log(self, *, source: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "session_id": self.session_id,
            "source": source,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)
        if self.max_events is not None and len(self.events) > self.max_events:
            del self.events[: len(self.events) - self.max_events]

    def add_warning(self, *, source: str, message: str) -> None:
        if source not in self.warnings:
            self.warnings[source] = []
        self.warnings[source].append(message)

    def record(self, *, source: str, diagnostic: DiagnosticPayload) -> None:
        """Registra um diagnóstico tipado como warning e como evento estruturado."""
        self.add_warning(source=source, message=f"{diagnostic.type}: {diagnostic.message}")
        self.log(
            source=source,
            level="warning",
            message=diagnostic.message,
            diagnostic=diagnostic.to_dict(),
        )

    def diagnostics(self, type_: Optional[str] = None) -> List[Dict[str, Any]]:
        """Retorna os diagnósticos registrados, opcionalmente filtrados por código."""
        out = []
        for event in self.events:
            diag = event.get("diagnostic")
            if diag is None:
                continue
            if type_ is not None and diag.get("type") != type_:
                continue
            out.append(diag)
        return out

    def clear(self) -> None:
        self.events.clear()
        self.warnings.clear()
