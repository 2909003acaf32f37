# src/queue_overlay/core/keys/codec.py
"""
Codec de chaves de propriedade do scheduler.

Converte entre a chave plana prefixada
(`yarn.scheduler.capacity.root.a.capacity`) e o par
(queue path, chave simples) = (`root.a`, `capacity`).

Decisões arquiteturais:
    - A divisão ingênua "último segmento = nome da propriedade" é errada
      para propriedades com mais de um segmento
      (ex.: `auto-queue-creation-v2.enabled`); nomes conhecidos do catálogo
      e palavras-chave estruturais são verificados antes do fallback
    - O codec é puro: nenhuma consulta ao Trie ou ao Store

Invariantes:
    - `to_full_key` nunca falha (fallback `<prefix><path>.<chave>`)
    - Chaves fora do prefixo de filas resultam em `None`
"""

from __future__ import annotations

from typing import Container, Dict, Mapping, Optional

from ..constants import (
    AUTO_CREATION_V2_SEGMENT,
    AUTO_CREATION_V2_TEMPLATE_SCOPES,
    PROPERTY_PREFIX,
    Q_PATH_PLACEHOLDER,
    ROOT_QUEUE,
    SPECIAL_PROPERTY_KEYWORDS,
    UI_CAPACITY_MODE_HINT,
)
from ..metadata import PropertyMetadataCatalog, default_catalog


class PropertyKeyCodec:
    """Mapeamento puro entre chaves completas e (queue path, chave simples)."""

    def __init__(
        self,
        catalog: Optional[PropertyMetadataCatalog] = None,
        *,
        prefix: str = PROPERTY_PREFIX,
    ):
        self.catalog = catalog if catalog is not None else default_catalog()
        self.prefix = prefix if prefix.endswith(".") else prefix + "."
        self._multi_segment_keys = self.catalog.multi_segment_keys()

    def to_full_key(self, queue_path: str, simple_key: str) -> str:
        definition = self.catalog.find_by_simple_key(simple_key)
        if definition is not None:
            placeholder = definition.placeholder_key
            idx = placeholder.find(Q_PATH_PLACEHOLDER)
            tail = placeholder[idx + len(Q_PATH_PLACEHOLDER):]
            return f"{self.prefix}{queue_path}{tail}"
        return f"{self.prefix}{queue_path}.{simple_key}"

    def _queue_remainder(self, full_key: str) -> Optional[str]:
        if not isinstance(full_key, str) or not full_key.startswith(self.prefix):
            return None
        remainder = full_key[len(self.prefix):]
        if remainder != ROOT_QUEUE and not remainder.startswith(ROOT_QUEUE + "."):
            return None
        return remainder

    def extract_queue_path(
        self,
        full_key: str,
        queue_paths: Optional[Container[str]] = None,
    ) -> Optional[str]:
        """
        Retorna o queue path de uma chave completa.

        Ordem de resolução:
            1. palavra-chave estrutural (o path termina antes dela):
               `accessible-node-labels`, `leaf-queue-template` ou
               `auto-queue-creation-v2.<escopo de template>`
            2. maior nome multi-segmento conhecido no catálogo
            3. fallback: remove o último segmento

        Args:
            full_key (str): Chave completa prefixada.
            queue_paths (Optional[Container[str]]): Filas declaradas (ex.: o
                próprio Trie). Um segmento que é uma fila declarada nunca é
                tratado como palavra-chave.

        Returns:
            Optional[str]: Queue path, ou None fora do prefixo de filas.
        """
        remainder = self._queue_remainder(full_key)
        if remainder is None:
            return None

        parts = remainder.split(".")
        if len(parts) < 2:
            return None

        for idx in range(1, len(parts) - 1):
            if queue_paths is not None and ".".join(parts[: idx + 1]) in queue_paths:
                continue
            segment = parts[idx]
            if segment in SPECIAL_PROPERTY_KEYWORDS:
                return ".".join(parts[:idx])
            if (
                segment == AUTO_CREATION_V2_SEGMENT
                and idx + 2 < len(parts)
                and parts[idx + 1] in AUTO_CREATION_V2_TEMPLATE_SCOPES
            ):
                return ".".join(parts[:idx])

        for name in self._multi_segment_keys:
            suffix = "." + name
            if remainder.endswith(suffix) and len(remainder) > len(suffix):
                return remainder[: -len(suffix)]

        return ".".join(parts[:-1])

    def to_simple_key(
        self,
        full_key: str,
        queue_paths: Optional[Container[str]] = None,
    ) -> Optional[str]:
        queue_path = self.extract_queue_path(full_key, queue_paths)
        if queue_path is None:
            return None
        return full_key[len(self.prefix) + len(queue_path) + 1:]

    def is_global_property(self, full_key: str) -> bool:
        if not isinstance(full_key, str) or not full_key.startswith(self.prefix):
            return False
        return not full_key[len(self.prefix):].startswith(ROOT_QUEUE)

    def localize_key(self, queue_path: str, key: str) -> str:
        """Chave completa da fila `queue_path` -> nome local; chaves locais passam intactas."""
        own_prefix = f"{self.prefix}{queue_path}."
        if key.startswith(own_prefix):
            return key[len(own_prefix):]
        return key

    def convert_to_full_keys(self, simple_params: Mapping[str, str], queue_path: str) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for simple_key, value in simple_params.items():
            if simple_key == UI_CAPACITY_MODE_HINT:
                continue
            out[self.to_full_key(queue_path, simple_key)] = value
        return out
