# src/queue_overlay/core/constants.py
"""
Constantes e enums canônicos do Queue Overlay.

Este módulo concentra os literais estáveis compartilhados por codec,
Trie, Store e Formatter: prefixo das propriedades, segmento raiz,
sufixo de definição de filhos, placeholder de metadata e a chave da
dica de modo de capacidade usada pela UI.

Invariantes:
    - Enums possuem valores textuais canônicos (serializáveis em JSON)
    - Nenhuma lógica de resolução vive neste módulo
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


PROPERTY_PREFIX = "yarn.scheduler.capacity."
ROOT_QUEUE = "root"
QUEUES_SUFFIX = ".queues"
Q_PATH_PLACEHOLDER = "<queue_path>"

# Dica fora de banda carregada dentro do mapa de modificações de um Update.
UI_CAPACITY_MODE_HINT = "_ui_capacityMode"

# Palavras-chave estruturais: o queue path termina antes delas.
SPECIAL_PROPERTY_KEYWORDS = frozenset({"accessible-node-labels", "leaf-queue-template"})

# Escopos de template do auto-creation v2. Só são estruturais logo após
# `auto-queue-creation-v2`: `<queue>.auto-queue-creation-v2.<escopo>.<chave>`.
AUTO_CREATION_V2_SEGMENT = "auto-queue-creation-v2"
AUTO_CREATION_V2_TEMPLATE_SCOPES = frozenset({"template", "parent-template", "leaf-template"})


class CapacityMode(str, Enum):
    """
    Modos de capacidade de uma fila.

    O modo governa a interpretação e a exibição do valor de `capacity`:
        - PERCENTAGE: valor relativo ao pai (ex.: "40%", "40")
        - WEIGHT: peso relativo entre irmãos (ex.: "2w")
        - ABSOLUTE: vetor de recursos absolutos (ex.: "[memory=1024,vcores=1]")
        - VECTOR: vetor misto; só é alcançado via dica explícita da UI
    """
    PERCENTAGE = "percentage"
    WEIGHT = "weight"
    ABSOLUTE = "absolute"
    VECTOR = "vector"

    @classmethod
    def coerce(cls, value: object) -> Optional["CapacityMode"]:
        """Converte string/enum em CapacityMode; valores desconhecidos viram None."""
        if isinstance(value, CapacityMode):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class ChangeStatus(str, Enum):
    """
    Projeção do estado de staging de uma fila.

    O valor é sempre re-derivado do Store a cada leitura; nunca é
    persistido em objetos do Trie ou do Formatter.
    """
    UNCHANGED = "UNCHANGED"
    ADD = "ADD"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class QueueType(str, Enum):
    PARENT = "parent"
    LEAF = "leaf"
