# src/queue_overlay/core/config/snapshot.py
"""
Carregamento de snapshots de propriedades do scheduler.

Um snapshot é a lista plana `{name, value}` que alimenta o Config Trie.
Este módulo aceita três formatos de arquivo (YAML ou JSON):

    1. Formato scheduler-conf: {"property": [{"name": ..., "value": ...}, ...]}
    2. Lista de entradas:      [{"name": ..., "value": ...}, ...]
    3. Mapa plano:             {"yarn.scheduler.capacity.root.queues": "a,b", ...}

Invariantes:
    - O retorno é sempre uma lista de dicts `{"name": str, "value": str}`
    - Valores são convertidos para string (YAML pode decodificar números/booleanos)
    - Valores decimais devem vir entre aspas: `capacity: "0.50"`. Sem aspas
      o YAML produz um float (`0.5`, `1.0e2` vira `100.0`) e a grafia original
      se perde; floats são rejeitados com `SnapshotFormatError`
    - A ordem das entradas do arquivo é preservada

Limites explícitos:
    - Não filtra pelo prefixo (o Trie ignora chaves fora do prefixo)
    - Não busca snapshots via HTTP
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from .errors import SnapshotFormatError
from .loader import read_structured_file


def _stringify(value: Any, name: str) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        raise SnapshotFormatError(
            f"Valor decimal não citado em {name!r}: {value!r}; use aspas para preservar a grafia original"
        )
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_snapshot(data: Any) -> List[Dict[str, str]]:
    """
    Normaliza o conteúdo decodificado de um snapshot para a lista canônica.

    Raises:
        SnapshotFormatError: Se o conteúdo não corresponder a nenhum formato aceito.
    """
    if data is None:
        return []

    if isinstance(data, dict) and "property" in data:
        entries = data["property"]
        if not isinstance(entries, list):
            raise SnapshotFormatError("'property' deve ser uma lista de entradas {name, value}")
        return normalize_snapshot(entries)

    if isinstance(data, list):
        out: List[Dict[str, str]] = []
        for idx, entry in enumerate(data):
            if not isinstance(entry, dict) or "name" not in entry:
                raise SnapshotFormatError(f"Entrada #{idx} inválida: esperado objeto com 'name' e 'value'")
            out.append({"name": str(entry["name"]), "value": _stringify(entry.get("value"), str(entry["name"]))})
        return out

    if isinstance(data, dict):
        return [{"name": str(k), "value": _stringify(v, str(k))} for k, v in data.items()]

    raise SnapshotFormatError(f"Snapshot deve ser lista ou mapa, recebido: {type(data).__name__}")


def load_properties_snapshot(path: str) -> List[Dict[str, str]]:
    """
    Carrega um snapshot de propriedades a partir de um arquivo YAML/JSON.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for suportada.
        SnapshotFormatError: Se o conteúdo não tiver um formato aceito.
    """
    return normalize_snapshot(read_structured_file(Path(path)))
