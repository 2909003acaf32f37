# src/queue_overlay/core/staging/store.py
"""
Staged Change Store — delta de alterações pendentes sobre o Trie.

O Store mantém, para uma única sessão de edição, um mapa explícito
`path -> StagedChange` e resolve a visão efetiva de cada fila sob demanda
(copy-on-read): o Trie é a baseline, o mapa de staging é o delta.

Decisões arquiteturais:
    - No máximo uma alteração pendente por path
    - Delete sobre um Add pendente remove o Add (a fila nunca existiu)
    - Update sobre um Add pendente é incorporado ao blueprint (segue Add)
    - Update vazio limpa um Update existente
    - `change_status` é projeção pura, re-derivada a cada leitura
    - Acesso ao estado interno apenas por acessores estreitos

Invariantes:
    - O Trie e os payloads internos nunca são mutados por leituras
    - Toda leitura retorna cópias independentes
    - `revision` cresce a cada mutação e a cada troca de Trie

Limites explícitos:
    - Não valida valores submetidos (faixas, sintaxe de ACL)
    - Não garante que o pai de um Add exista (responsabilidade do chamador)
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterator, List, Mapping, Optional

from ..constants import PROPERTY_PREFIX, CapacityMode, ChangeStatus, UI_CAPACITY_MODE_HINT
from ..config.merge import overlay_flat
from ..exceptions import InvalidBlueprintError, TrieNotSetError
from ..keys import PropertyKeyCodec
from ..traceability import EventLog
from ..trie import SchedulerConfigTrie
from .changes import (
    EffectiveQueue,
    QueueBlueprint,
    StagedAdd,
    StagedChange,
    StagedDelete,
    StagedUpdate,
    split_path,
)

SOURCE = "staging.store"


class StagedChangeStore:
    """Mapa `path -> StagedChange` de uma sessão de edição, com resolução overlay."""

    def __init__(
        self,
        trie: Optional[SchedulerConfigTrie] = None,
        *,
        codec: Optional[PropertyKeyCodec] = None,
        events: Optional[EventLog] = None,
    ):
        self._trie = trie
        self.codec = codec if codec is not None else PropertyKeyCodec(
            prefix=trie.prefix if trie is not None else PROPERTY_PREFIX
        )
        self.events = events if events is not None else EventLog()
        self._changes: Dict[str, StagedChange] = {}
        self._global_updates: Dict[str, str] = {}
        self._revision = 0

    # ------------------------------------------------------------------
    # Trie / revisão
    # ------------------------------------------------------------------

    @property
    def trie(self) -> Optional[SchedulerConfigTrie]:
        return self._trie

    @property
    def revision(self) -> int:
        return self._revision

    def set_trie(self, trie: SchedulerConfigTrie) -> None:
        """Troca a baseline; alterações pendentes são mantidas (ver `EditSession.reload`)."""
        self._trie = trie
        self._bump()

    def _bump(self) -> None:
        self._revision += 1

    def _require_trie(self, operation: str) -> SchedulerConfigTrie:
        if self._trie is None:
            raise TrieNotSetError(operation)
        return self._trie

    # ------------------------------------------------------------------
    # Mutações
    # ------------------------------------------------------------------

    def do_add(self, path: str, blueprint: QueueBlueprint) -> None:
        """
        Registra uma nova fila pendente em `path`.

        Chaves do blueprint podem ser completas ou locais; são armazenadas
        como nomes locais. A dica `_ui_capacityMode` vira `capacity_mode`.

        Args:
            path (str): Queue path da nova fila.
            blueprint (QueueBlueprint): Nome, pai e propriedades iniciais.

        Raises:
            InvalidBlueprintError: Se o blueprint não corresponder a `path`.
        """
        if blueprint.path != path:
            raise InvalidBlueprintError(
                f"Blueprint com path {blueprint.path!r} registrado em {path!r}"
            )
        if f"{blueprint.parent_path}.{blueprint.name}" != path:
            raise InvalidBlueprintError(
                f"Blueprint inconsistente: parent_path={blueprint.parent_path!r}, name={blueprint.name!r}"
            )

        staged = copy.deepcopy(blueprint)
        properties: Dict[str, str] = {}
        for key, value in blueprint.properties.items():
            if key == UI_CAPACITY_MODE_HINT:
                staged.capacity_mode = CapacityMode.coerce(value)
                continue
            properties[self.codec.localize_key(path, key)] = value
        staged.properties = properties

        self._changes[path] = StagedAdd(path=path, blueprint=staged)
        self._bump()
        self.events.log(source=SOURCE, level="info", message="Add registrado", queue_path=path)

    def do_update(self, path: str, modifications: Optional[Mapping[str, Any]]) -> None:
        """
        Registra o conjunto cumulativo de modificações de uma fila.

        - Add pendente em `path`: modificações são incorporadas ao blueprint
        - Modificações vazias: limpam um Update existente
        - Caso contrário: cria/substitui o Update (inclusive sobre um Delete)
        """
        mods = {k: "" if v is None else str(v) for k, v in (modifications or {}).items()}
        existing = self._changes.get(path)

        if isinstance(existing, StagedAdd):
            blueprint = existing.blueprint
            for key, value in mods.items():
                if key == UI_CAPACITY_MODE_HINT:
                    blueprint.capacity_mode = CapacityMode.coerce(value)
                else:
                    blueprint.properties[self.codec.localize_key(path, key)] = value
            self._bump()
            return

        if not mods:
            if isinstance(existing, StagedUpdate):
                del self._changes[path]
                self._bump()
            return

        self._changes[path] = StagedUpdate(
            path=path,
            modifications=mods,
            capacity_mode_hint=CapacityMode.coerce(mods.get(UI_CAPACITY_MODE_HINT)),
        )
        self._bump()

    def do_delete(self, path: str) -> None:
        """
        Marca `path` para remoção.

        Um Add pendente em `path` é descartado (junto com Adds pendentes
        descendentes); caso contrário registra um Delete, substituindo
        qualquer Update anterior.

        Args:
            path (str): Queue path da fila.
        """
        existing = self._changes.get(path)
        if isinstance(existing, StagedAdd):
            del self._changes[path]
            # descendentes pendentes perdem o pai junto com o Add
            orphans = [
                p for p, c in self._changes.items()
                if p.startswith(path + ".") and isinstance(c, StagedAdd)
            ]
            for child_path in orphans:
                del self._changes[child_path]
            self._bump()
            self.events.log(source=SOURCE, level="info", message="Add pendente descartado", queue_path=path)
            return

        self._changes[path] = StagedDelete(path=path)
        self._bump()

    def delete_change(self, path: str) -> None:
        """Descarta a alteração pendente de `path` (Add, Update ou Delete), se houver."""
        if self._changes.pop(path, None) is not None:
            self._bump()

    def clear(self) -> None:
        self._changes.clear()
        self._global_updates.clear()
        self._bump()

    # ------------------------------------------------------------------
    # Propriedades globais
    # ------------------------------------------------------------------

    def stage_global_update(self, modifications: Mapping[str, Any]) -> None:
        """Acumula modificações globais; chaves podem ser completas ou sem prefixo."""
        for key, value in modifications.items():
            if key == UI_CAPACITY_MODE_HINT:
                continue
            full_key = key if key.startswith(self.codec.prefix) else self.codec.prefix + key
            self._global_updates[full_key] = "" if value is None else str(value)
        self._bump()

    def clear_global_updates(self) -> None:
        if self._global_updates:
            self._global_updates.clear()
            self._bump()

    def get_effective_global_properties(self) -> Dict[str, str]:
        """
        Propriedades globais da baseline com as atualizações pendentes aplicadas.

        Returns:
            Dict[str, str]: Mapa de chaves sem prefixo para valores.

        Raises:
            TrieNotSetError: Se nenhum Trie foi configurado.
        """
        trie = self._require_trie("get_effective_global_properties")
        prefix_len = len(self.codec.prefix)
        pending = {key[prefix_len:]: value for key, value in self._global_updates.items()}
        return overlay_flat(trie.global_properties, pending)

    def get_staged_global_updates_for_api(self) -> Dict[str, str]:
        return dict(self._global_updates)

    # ------------------------------------------------------------------
    # Leitura (copy-on-read)
    # ------------------------------------------------------------------

    def get_queue(self, path: str) -> Optional[EffectiveQueue]:
        """
        Resolve a visão efetiva de uma fila (baseline + delta pendente).

        Args:
            path (str): Queue path.

        Returns:
            Optional[EffectiveQueue]: Cópia independente com `change_status`
            derivado, ou None se a fila não existe nem está pendente de Add.

        Raises:
            TrieNotSetError: Se nenhum Trie foi configurado.
        """
        trie = self._require_trie("get_queue")
        change = self._changes.get(path)

        if isinstance(change, StagedAdd):
            blueprint = copy.deepcopy(change.blueprint)
            return EffectiveQueue(
                path=path,
                name=blueprint.name,
                parent_path=blueprint.parent_path,
                level=path.count("."),
                properties=blueprint.properties,
                change_status=ChangeStatus.ADD,
                capacity_mode_hint=blueprint.capacity_mode,
            )

        node = trie.get_queue_node(path)
        if node is None:
            return None

        parts = split_path(path)
        queue = EffectiveQueue(
            path=path,
            name=parts["name"],
            parent_path=parts["parent_path"],
            level=path.count("."),
            properties=dict(node.properties),
            child_names=list(node.children),
        )

        if isinstance(change, StagedUpdate):
            localized = {self.codec.localize_key(path, k): v for k, v in change.modifications.items()}
            queue.properties = overlay_flat(queue.properties, localized, skip=(UI_CAPACITY_MODE_HINT,))
            queue.change_status = ChangeStatus.UPDATE
            queue.capacity_mode_hint = change.capacity_mode_hint
        elif isinstance(change, StagedDelete):
            queue.change_status = ChangeStatus.DELETE

        return queue

    def get_all_queues(self) -> List[EffectiveQueue]:
        """Visão efetiva de todas as filas do Trie (pré-ordem) seguidas dos Adds pendentes."""
        trie = self._require_trie("get_all_queues")
        paths = list(trie.iter_queue_paths())
        seen = set(paths)
        for path, change in self._changes.items():
            if isinstance(change, StagedAdd) and path not in seen:
                paths.append(path)
                seen.add(path)

        queues = []
        for path in paths:
            queue = self.get_queue(path)
            if queue is not None:
                queues.append(queue)
        return queues

    # ------------------------------------------------------------------
    # Acessores estreitos
    # ------------------------------------------------------------------

    def get_staged_change(self, path: str) -> Optional[StagedChange]:
        """Cópia da alteração pendente de `path`, ou None."""
        change = self._changes.get(path)
        return copy.deepcopy(change) if change is not None else None

    def iter_staged_changes(self) -> Iterator[StagedChange]:
        for change in list(self._changes.values()):
            yield copy.deepcopy(change)

    def iter_pending_additions(self, parent_path: Optional[str] = None) -> Iterator[StagedAdd]:
        """Cópias dos Adds pendentes, opcionalmente filtrados pelo pai direto."""
        for change in list(self._changes.values()):
            if not isinstance(change, StagedAdd):
                continue
            if parent_path is not None and change.blueprint.parent_path != parent_path:
                continue
            yield copy.deepcopy(change)

    def get_capacity_mode_hint(self, path: str) -> Optional[CapacityMode]:
        change = self._changes.get(path)
        if isinstance(change, StagedAdd):
            return change.blueprint.capacity_mode
        if isinstance(change, StagedUpdate):
            return change.capacity_mode_hint
        return None

    def trie_child_paths(self, path: str) -> List[str]:
        trie = self._require_trie("trie_child_paths")
        node = trie.get_queue_node(path)
        if node is None:
            return []
        return [child.full_path for child in node.children.values()]

    def is_state_add(self, path: str) -> bool:
        return isinstance(self._changes.get(path), StagedAdd)

    def is_state_update(self, path: str) -> bool:
        return isinstance(self._changes.get(path), StagedUpdate)

    def is_state_delete(self, path: str) -> bool:
        return isinstance(self._changes.get(path), StagedDelete)

    def count_add(self) -> int:
        return sum(1 for c in self._changes.values() if isinstance(c, StagedAdd))

    def count_update(self) -> int:
        return sum(1 for c in self._changes.values() if isinstance(c, StagedUpdate))

    def count_delete(self) -> int:
        return sum(1 for c in self._changes.values() if isinstance(c, StagedDelete))

    def size(self) -> int:
        return len(self._changes)

    def has_pending_changes(self) -> bool:
        return bool(self._changes) or bool(self._global_updates)

    def get_changes_summary(self) -> Dict[str, int]:
        """
        Contagem das alterações pendentes.

        Returns:
            Dict[str, int]: Chaves `add`, `update`, `delete`, `global` e `total`.
        """
        summary = {
            "add": self.count_add(),
            "update": self.count_update(),
            "delete": self.count_delete(),
            "global": len(self._global_updates),
        }
        summary["total"] = sum(summary.values())
        return summary

    # ------------------------------------------------------------------
    # Exportação para a API de commit
    # ------------------------------------------------------------------

    def _full_key(self, path: str, key: str) -> str:
        if key.startswith(self.codec.prefix):
            return key
        return self.codec.to_full_key(path, key)

    def get_staged_additions_for_api(self) -> List[Dict[str, Any]]:
        """
        Exporta os Adds pendentes no formato da API de commit.

        Returns:
            List[Dict[str, Any]]: Entradas `{"queueName": path, "params": {chave completa: valor}}`.
        """
        out = []
        for path, change in self._changes.items():
            if not isinstance(change, StagedAdd):
                continue
            params = {
                self._full_key(path, key): value
                for key, value in change.blueprint.properties.items()
            }
            out.append({"queueName": path, "params": params})
        return out

    def get_staged_updates_for_api(self) -> List[Dict[str, Any]]:
        """
        Exporta os Updates pendentes no formato da API de commit.

        A dica `_ui_capacityMode` é removida; Updates sem nenhuma
        propriedade real são omitidos.

        Returns:
            List[Dict[str, Any]]: Entradas `{"queueName": path, "params": {chave completa: valor}}`.
        """
        out = []
        for path, change in self._changes.items():
            if not isinstance(change, StagedUpdate):
                continue
            params = {
                self._full_key(path, key): value
                for key, value in change.modifications.items()
                if key != UI_CAPACITY_MODE_HINT
            }
            if params:
                out.append({"queueName": path, "params": params})
        return out

    def get_staged_deletions(self) -> List[str]:
        """Paths marcados para remoção, na ordem de registro."""
        return [path for path, change in self._changes.items() if isinstance(change, StagedDelete)]
