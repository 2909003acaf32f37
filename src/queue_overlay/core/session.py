# src/queue_overlay/core/session.py
"""
Sessão de edição — contexto explícito que amarra Codec, Trie, Store e Formatter.

Uma sessão corresponde a exatamente um Store (um ator lógico). Não existe
estado global de processo: hosts com várias sessões concorrentes criam
uma `EditSession` por sessão.

Recarga (`reload`):
    - Reconstrói o Trie a partir do novo snapshot
    - Troca o Trie no Store (invalida caches pela `revision`)
    - Reconcilia alterações pendentes que deixaram de resolver

Política de reconciliação (settings `reconciliation.policy`):
    - "drop" (default): descarta a alteração e registra warning
    - "keep": mantém a alteração e apenas registra warning

Entradas não resolvíveis:
    - Update/Delete cujo path não existe mais no Trie
    - Add cujo path passou a existir no Trie
    - Add cujo pai não resolve nem no Trie nem entre os Adds sobreviventes

Invariantes:
    - Snapshot com o mesmo hash não dispara reconciliação
    - Toda entrada não resolvível gera um diagnóstico
      `STAGED_CHANGE_UNRESOLVABLE`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from .config.settings import RECONCILIATION_DROP, EngineSettings
from .errors import staged_change_unresolvable
from .keys import PropertyKeyCodec
from .metadata import PropertyMetadataCatalog, default_catalog, load_catalog
from .staging import StagedAdd, StagedChangeStore
from .traceability import EventLog
from .trie import SchedulerConfigTrie
from .view import QueueViewDataFormatter

SOURCE = "session.reload"


@dataclass
class ReconciliationReport:
    policy: str
    snapshot_hash: str
    skipped: bool = False
    unresolved: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def dropped(self) -> List[str]:
        return [entry["queue_path"] for entry in self.unresolved if entry["dropped"]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "policy": self.policy,
            "snapshot_hash": self.snapshot_hash,
            "skipped": self.skipped,
            "unresolved": [dict(entry) for entry in self.unresolved],
        }


class EditSession:
    def __init__(
        self,
        trie: SchedulerConfigTrie,
        *,
        catalog: Optional[PropertyMetadataCatalog] = None,
        settings: Optional[EngineSettings] = None,
        events: Optional[EventLog] = None,
        codec: Optional[PropertyKeyCodec] = None,
    ):
        self.settings = settings if settings is not None else EngineSettings()
        self.events = events if events is not None else _new_event_log(self.settings)
        if catalog is None:
            catalog = _catalog_from_settings(self.settings)
        self.codec = codec if codec is not None else PropertyKeyCodec(catalog, prefix=self.settings.prefix)
        self.trie = trie
        self.store = StagedChangeStore(trie, codec=self.codec, events=self.events)
        self.formatter = QueueViewDataFormatter(
            self.store,
            self.codec.catalog,
            events=self.events,
            cache_enabled=self.settings.hierarchy_cache_enabled,
        )

    @classmethod
    def from_properties(
        cls,
        properties: Iterable[Any],
        *,
        catalog: Optional[PropertyMetadataCatalog] = None,
        settings: Optional[EngineSettings] = None,
        events: Optional[EventLog] = None,
    ) -> "EditSession":
        settings = settings if settings is not None else EngineSettings()
        events = events if events is not None else _new_event_log(settings)
        if catalog is None:
            catalog = _catalog_from_settings(settings)
        codec = PropertyKeyCodec(catalog, prefix=settings.prefix)
        trie = SchedulerConfigTrie.build(properties, prefix=codec.prefix, events=events, codec=codec)
        return cls(trie, catalog=catalog, settings=settings, events=events, codec=codec)

    def reload(self, properties: Iterable[Any]) -> ReconciliationReport:
        trie = SchedulerConfigTrie.build(properties, prefix=self.codec.prefix, events=self.events, codec=self.codec)
        policy = self.settings.reconciliation_policy

        if trie.snapshot_hash == self.trie.snapshot_hash:
            self.events.log(
                source=SOURCE,
                level="info",
                message="Snapshot inalterado; reconciliação ignorada",
                snapshot_hash=trie.snapshot_hash,
            )
            return ReconciliationReport(policy=policy, snapshot_hash=trie.snapshot_hash, skipped=True)

        self.trie = trie
        self.store.set_trie(trie)
        self.formatter.invalidate_cache()

        report = ReconciliationReport(policy=policy, snapshot_hash=trie.snapshot_hash)
        self._reconcile(trie, report)

        self.events.log(
            source=SOURCE,
            level="info",
            message="Configuração recarregada",
            snapshot_hash=trie.snapshot_hash,
            unresolved=len(report.unresolved),
            dropped=len(report.dropped),
        )
        return report

    def _reconcile(self, trie: SchedulerConfigTrie, report: ReconciliationReport) -> None:
        drop = report.policy == RECONCILIATION_DROP
        unresolved: Dict[str, str] = {}
        additions: List[StagedAdd] = []

        for change in self.store.iter_staged_changes():
            if isinstance(change, StagedAdd):
                if change.path in trie:
                    unresolved[change.path] = "fila pendente já existe na configuração recarregada"
                else:
                    additions.append(change)
            elif change.path not in trie:
                unresolved[change.path] = "fila não existe mais na configuração recarregada"

        # Adds cujo pai some em cascata (pais pendentes também podem cair)
        surviving = {add.path for add in additions}
        changed = True
        while changed:
            changed = False
            for add in additions:
                if add.path not in surviving:
                    continue
                parent = add.blueprint.parent_path
                if parent in trie or parent in surviving:
                    continue
                surviving.discard(add.path)
                unresolved[add.path] = f"pai {parent!r} não resolve na configuração recarregada"
                changed = True

        operations = {c.path: c.operation.value for c in self.store.iter_staged_changes()}
        for path, reason in unresolved.items():
            diagnostic = staged_change_unresolvable(
                queue_path=path,
                operation=operations[path],
                reason=reason,
                dropped=drop,
            )
            self.events.record(source=SOURCE, diagnostic=diagnostic)
            report.unresolved.append(dict(diagnostic.details))
            if drop:
                self.store.delete_change(path)


def _new_event_log(settings: EngineSettings) -> EventLog:
    return EventLog(session_id=str(uuid4()), max_events=settings.max_events)


def _catalog_from_settings(settings: EngineSettings) -> PropertyMetadataCatalog:
    if settings.catalog_path:
        return load_catalog(settings.catalog_path)
    return default_catalog()
