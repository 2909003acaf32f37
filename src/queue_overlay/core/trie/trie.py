# src/queue_overlay/core/trie/trie.py
"""
Config Trie do scheduler (árvore por segmentos de path, não por caracteres).

Este módulo reconstrói a hierarquia de filas a partir de uma lista plana
de propriedades `{name, value}` prefixadas.

Algoritmo (duas passagens, independente da ordem de entrada):
    1. Particiona propriedades globais (resto após o prefixo não começa com
       `root`) e propriedades de fila; coleta as declarações `.queues`
    2. Constrói o esqueleto de cima para baixo a partir de `root`, criando
       exatamente um nó por nome listado em cada `.queues`
    3. Atribui cada propriedade ao nó-fila confirmado mais profundo cujo
       path é prefixo da chave; o resto não consumido vira o nome local

Invariantes:
    - Uma fila existe se e somente se algum `.queues` ancestral a nomeia
      (ou se é `root`)
    - Propriedades sozinhas nunca criam filas
    - O Trie é imutável após o build para um dado snapshot

Política de falhas:
    - `.queues` com path pai malformado: ignorado com warning
    - Propriedade que não corresponde a uma fila confirmada: anexada ao
      ancestral confirmado mais profundo, com diagnóstico
    - Nenhuma entrada de origem interrompe o build
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..config.hashing import compute_config_hash
from ..constants import PROPERTY_PREFIX, QUEUES_SUFFIX, ROOT_QUEUE
from ..errors import malformed_config_entry, unresolvable_property
from ..keys import PropertyKeyCodec
from ..traceability import EventLog

SOURCE = "trie.build"


@dataclass
class TrieNode:
    segment: str
    full_path: str
    is_queue: bool = False
    properties: Dict[str, str] = field(default_factory=dict)
    children: Dict[str, "TrieNode"] = field(default_factory=dict)

    @property
    def level(self) -> int:
        return self.full_path.count(".")


def _iter_entries(properties: Iterable[Any]) -> Iterator[Tuple[str, str]]:
    for entry in properties:
        if isinstance(entry, Mapping):
            name, value = entry.get("name"), entry.get("value")
        else:
            name, value = entry
        if not isinstance(name, str):
            continue
        yield name, "" if value is None else str(value)


def _split_child_names(value: str) -> List[str]:
    names: List[str] = []
    for raw in value.split(","):
        name = raw.strip()
        if name and name not in names:
            names.append(name)
    return names


class SchedulerConfigTrie:
    """
    Baseline imutável da hierarquia de filas de um snapshot.

    Construído via `SchedulerConfigTrie.build(...)`; consultas são O(profundidade).
    """

    def __init__(
        self,
        root: TrieNode,
        global_properties: Dict[str, str],
        *,
        prefix: str = PROPERTY_PREFIX,
        snapshot_hash: str = "",
    ):
        self.root = root
        self.prefix = prefix
        self._global_properties = dict(global_properties)
        self.snapshot_hash = snapshot_hash

    @property
    def global_properties(self) -> Mapping[str, str]:
        return MappingProxyType(self._global_properties)

    @classmethod
    def build(
        cls,
        properties: Iterable[Any],
        *,
        prefix: str = PROPERTY_PREFIX,
        events: Optional[EventLog] = None,
        codec: Optional[PropertyKeyCodec] = None,
    ) -> "SchedulerConfigTrie":
        """
        Constrói o Trie a partir de um snapshot plano.

        Args:
            properties: Entradas `{name, value}` ou pares `(name, value)`.
            prefix: Prefixo fixo das propriedades; chaves fora dele são ignoradas.
            events: Event Log para warnings e diagnósticos do build.
            codec: Codec usado para detectar propriedades não resolvidas.

        Returns:
            SchedulerConfigTrie: Baseline construída.
        """
        events = events if events is not None else EventLog()
        codec = codec if codec is not None else PropertyKeyCodec(prefix=prefix)
        prefix = codec.prefix

        global_properties: Dict[str, str] = {}
        queue_properties: List[Tuple[str, str, str]] = []
        declarations: Dict[str, List[str]] = {}
        hashed: Dict[str, str] = {}

        # Passo 1: particionamento e coleta de `.queues`
        for name, value in _iter_entries(properties):
            if not name.startswith(prefix):
                continue
            hashed[name] = value
            remainder = name[len(prefix):]

            if not remainder.startswith(ROOT_QUEUE):
                global_properties[remainder] = value
                continue

            if remainder.endswith(QUEUES_SUFFIX):
                parent_path = remainder[: -len(QUEUES_SUFFIX)]
                if parent_path == ROOT_QUEUE or parent_path.startswith(ROOT_QUEUE + "."):
                    declarations[parent_path] = _split_child_names(value)
                else:
                    events.record(
                        source=SOURCE,
                        diagnostic=malformed_config_entry(
                            key=name, reason="path pai do `.queues` não é enraizado em root"
                        ),
                    )
                    continue

            queue_properties.append((name, remainder, value))

        # Passo 2: esqueleto guiado apenas por `.queues`
        root = TrieNode(segment=ROOT_QUEUE, full_path=ROOT_QUEUE, is_queue=True)
        stack = [root]
        while stack:
            node = stack.pop()
            for child_name in declarations.get(node.full_path, []):
                if child_name in node.children:
                    continue
                child = TrieNode(
                    segment=child_name,
                    full_path=f"{node.full_path}.{child_name}",
                    is_queue=True,
                )
                node.children[child_name] = child
                stack.append(child)

        trie = cls(
            root,
            global_properties,
            prefix=prefix,
            snapshot_hash=compute_config_hash(hashed),
        )

        # Passo 3: atribuição ao nó-fila confirmado mais profundo
        for name, remainder, value in queue_properties:
            trie._assign(name, remainder, value, codec, events)

        events.log(
            source=SOURCE,
            level="info",
            message="Trie construído",
            queues=sum(1 for _ in trie.iter_queue_paths()),
            global_properties=len(global_properties),
            snapshot_hash=trie.snapshot_hash,
        )
        return trie

    def _assign(
        self,
        name: str,
        remainder: str,
        value: str,
        codec: PropertyKeyCodec,
        events: EventLog,
    ) -> None:
        parts = remainder.split(".")
        node = self.root
        depth = 0

        if parts[0] == ROOT_QUEUE:
            for idx in range(1, len(parts)):
                child = node.children.get(parts[idx])
                if child is None or not child.is_queue:
                    break
                node = child
                depth = idx
            local_name = ".".join(parts[depth + 1:])
        else:
            local_name = remainder

        if not local_name:
            events.record(
                source=SOURCE,
                diagnostic=malformed_config_entry(key=name, reason="chave de fila sem nome de propriedade"),
            )
            return

        expected_path = codec.extract_queue_path(name, queue_paths=self)
        if expected_path != node.full_path:
            events.record(
                source=SOURCE,
                diagnostic=unresolvable_property(
                    key=name,
                    attached_to=node.full_path,
                    reason=f"fila {expected_path!r} não declarada em `.queues`",
                ),
            )

        node.properties[local_name] = value

    def get_queue_node(self, queue_path: str) -> Optional[TrieNode]:
        if not isinstance(queue_path, str):
            return None
        segments = queue_path.split(".")
        if segments[0] != ROOT_QUEUE:
            return None
        node = self.root
        for segment in segments[1:]:
            node = node.children.get(segment)
            if node is None or not node.is_queue:
                return None
        return node

    def iter_queue_paths(self) -> Iterator[str]:
        """Paths de todas as filas, em pré-ordem (pai antes dos filhos)."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node.full_path
            stack.extend(reversed(list(node.children.values())))

    def __contains__(self, queue_path: object) -> bool:
        return isinstance(queue_path, str) and self.get_queue_node(queue_path) is not None
