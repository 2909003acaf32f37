# src/queue_overlay/core/metadata/catalog.py
"""
Catálogo de metadata de propriedades de fila (consumido em modo leitura).

O catálogo mapeia um padrão de chave com placeholder
(`yarn.scheduler.capacity.<queue_path>.capacity`) para a definição da
propriedade: chave simples, nome de exibição, tipo e valor default.

Ele é consumido por:
    - Codec: substituição do placeholder e reconhecimento de nomes
      de propriedade com mais de um segmento
    - Formatter: defaults de exibição e conjunto de propriedades exibidas

Invariantes:
    - O catálogo é imutável após a construção
    - `simple_key` é único dentro do catálogo

Limites explícitos:
    - Não valida valores contra `type` ou `options`
    - Não é dono da metadata: apenas a expõe
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..constants import PROPERTY_PREFIX, Q_PATH_PLACEHOLDER


@dataclass(frozen=True)
class PropertyDefinition:
    placeholder_key: str
    simple_key: str
    display_name: str
    type: str = "string"
    default_value: Optional[str] = None
    description: str = ""
    group: str = ""
    options: Tuple[str, ...] = field(default_factory=tuple)

    def full_key(self, queue_path: str) -> str:
        return self.placeholder_key.replace(Q_PATH_PLACEHOLDER, queue_path)


def _simple_key_from_placeholder(placeholder_key: str) -> str:
    marker = Q_PATH_PLACEHOLDER + "."
    idx = placeholder_key.find(marker)
    if idx < 0:
        raise ValueError(f"Chave de metadata sem placeholder {Q_PATH_PLACEHOLDER!r}: {placeholder_key}")
    return placeholder_key[idx + len(marker):]


class PropertyMetadataCatalog:
    """Catálogo imutável de definições de propriedades de fila."""

    def __init__(self, definitions: Iterable[PropertyDefinition]):
        self._by_simple_key: Dict[str, PropertyDefinition] = {}
        for definition in definitions:
            if definition.simple_key in self._by_simple_key:
                raise ValueError(f"simple_key duplicada no catálogo: {definition.simple_key}")
            self._by_simple_key[definition.simple_key] = definition

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]], *, group: str = "") -> "PropertyMetadataCatalog":
        """
        Constrói um catálogo a partir de um mapa `placeholder_key -> atributos`.

        Atributos aceitos: key, displayName/display_name, type,
        defaultValue/default_value, description, group, options.
        """
        definitions = []
        for placeholder_key, attrs in data.items():
            attrs = attrs or {}
            simple_key = attrs.get("key") or _simple_key_from_placeholder(placeholder_key)
            default = attrs.get("defaultValue", attrs.get("default_value"))
            definitions.append(
                PropertyDefinition(
                    placeholder_key=placeholder_key,
                    simple_key=simple_key,
                    display_name=attrs.get("displayName") or attrs.get("display_name") or simple_key,
                    type=attrs.get("type", "string"),
                    default_value=None if default is None else str(default),
                    description=attrs.get("description", ""),
                    group=attrs.get("group", group),
                    options=tuple(attrs.get("options") or ()),
                )
            )
        return cls(definitions)

    def find_by_simple_key(self, simple_key: str) -> Optional[PropertyDefinition]:
        return self._by_simple_key.get(simple_key)

    def definitions(self) -> List[PropertyDefinition]:
        return list(self._by_simple_key.values())

    def simple_keys(self) -> List[str]:
        return list(self._by_simple_key)

    def multi_segment_keys(self) -> List[str]:
        """Chaves simples com mais de um segmento, da mais longa para a mais curta."""
        keys = [k for k in self._by_simple_key if "." in k]
        return sorted(keys, key=lambda k: (-k.count("."), -len(k), k))

    def __contains__(self, simple_key: object) -> bool:
        return simple_key in self._by_simple_key

    def __len__(self) -> int:
        return len(self._by_simple_key)


def _p(simple_key: str) -> str:
    return f"{PROPERTY_PREFIX}{Q_PATH_PLACEHOLDER}.{simple_key}"


_QUEUE_METADATA: Dict[str, Dict[str, Dict[str, Any]]] = {
    "Core Properties": {
        _p("capacity"): {
            "displayName": "Capacity",
            "description": 'Guaranteed resource capacity (e.g., "10%", "2w", "[memory=2048,vcores=2]").',
            "type": "string",
            "defaultValue": "10%",
        },
        _p("maximum-capacity"): {
            "displayName": "Maximum Capacity",
            "description": 'Maximum resource capacity the queue can use (e.g., "100%", "[memory=4096,vcores=4]").',
            "type": "string",
            "defaultValue": "100%",
        },
        _p("state"): {
            "displayName": "State",
            "description": "Operational state of the queue.",
            "type": "enum",
            "options": ["RUNNING", "STOPPED"],
            "defaultValue": "RUNNING",
        },
    },
    "Resource Limits & Management": {
        _p("user-limit-factor"): {
            "displayName": "User Limit Factor",
            "description": "Multiplier for per-user resource limits within this queue.",
            "type": "number",
            "defaultValue": "1",
        },
        _p("maximum-am-resource-percent"): {
            "displayName": "Max AM Resource Percent",
            "description": "Maximum share of this queue's resources for Application Masters (e.g., 0.1 for 10%).",
            "type": "percentage",
            "defaultValue": "0.1",
        },
        _p("max-parallel-apps"): {
            "displayName": "Maximum Parallel Apps",
            "description": "Maximum number of applications that can run concurrently in this queue.",
            "type": "number",
            "defaultValue": "",
        },
    },
    "Advanced Settings": {
        _p("ordering-policy"): {
            "displayName": "Ordering Policy",
            "description": "Policy for ordering applications (e.g., fifo, fair, utilization).",
            "type": "enum",
            "options": ["fifo", "fair", "utilization"],
            "defaultValue": "fifo",
        },
        _p("disable_preemption"): {
            "displayName": "Disable Preemption",
            "description": "Whether preemption is disabled for this queue.",
            "type": "boolean",
            "defaultValue": "false",
        },
    },
    "Auto Queue Creation": {
        _p("auto-create-child-queue.enabled"): {
            "displayName": "Auto-Create Child Queue (v1)",
            "description": "Whether to automatically create child queues when applications are submitted.",
            "type": "boolean",
            "defaultValue": "false",
        },
        _p("auto-queue-creation-v2.enabled"): {
            "displayName": "Auto-Queue Creation v2 (Flexible)",
            "description": "Enable flexible auto queue creation mode (weight-based capacity modes only).",
            "type": "boolean",
            "defaultValue": "false",
        },
        _p("auto-queue-creation-v2.max-queues"): {
            "displayName": "Max Auto-Created Queues",
            "description": "Maximum number of queues that can be auto-created under this parent queue.",
            "type": "number",
            "defaultValue": "",
        },
    },
}


def default_catalog() -> PropertyMetadataCatalog:
    """Catálogo embutido com as propriedades de fila conhecidas (v1)."""
    definitions: List[PropertyDefinition] = []
    for group, entries in _QUEUE_METADATA.items():
        definitions.extend(PropertyMetadataCatalog.from_mapping(entries, group=group).definitions())
    return PropertyMetadataCatalog(definitions)


def load_catalog(path: str) -> PropertyMetadataCatalog:
    """
    Carrega um catálogo a partir de um arquivo YAML/JSON.

    Formatos aceitos:
        - mapa `placeholder_key -> atributos`
        - mapa `grupo -> {placeholder_key -> atributos}`
    """
    # import local: evita ciclo metadata -> config -> metadata
    from ..config.errors import InvalidConfigRootTypeError
    from ..config.loader import read_structured_file

    data = read_structured_file(Path(path)) or {}
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Catálogo deve ser dict, recebido: {type(data).__name__}"
        )

    if all(Q_PATH_PLACEHOLDER in str(k) for k in data):
        return PropertyMetadataCatalog.from_mapping(data)

    definitions: List[PropertyDefinition] = []
    for group, entries in data.items():
        if not isinstance(entries, dict):
            raise InvalidConfigRootTypeError(f"Grupo {group!r} do catálogo deve ser dict")
        definitions.extend(PropertyMetadataCatalog.from_mapping(entries, group=str(group)).definitions())
    return PropertyMetadataCatalog(definitions)
