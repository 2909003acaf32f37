# src/queue_overlay/core/config/hashing.py
"""
Hashing canônico de settings e snapshots do Queue Overlay.

Este módulo gera a identidade estrutural de uma configuração resolvida
(settings do motor ou mapa plano de propriedades de um snapshot).

O hash é utilizado para:
    - detectar recargas que não alteram o snapshot (reconciliação evitada)
    - rastrear qual baseline estava ativa em uma sessão de edição

Decisões arquiteturais:
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - Algoritmo SHA-256
    - Independente da ordem original das chaves ou das entradas

Invariantes:
    - Configurações estruturalmente equivalentes produzem o mesmo hash
    - O valor gerado é sempre uma string hexadecimal de 64 caracteres
"""


import json
import hashlib
from typing import Dict, Any


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera um hash determinístico de uma configuração resolvida.

    Política de hashing (v1):
        - Serialização JSON canônica
        - Ordenação estável de chaves
        - Codificação UTF-8
        - Algoritmo SHA-256

    Args:
        config (Dict[str, Any]): Settings resolvidos ou mapa de propriedades.

    Returns:
        str: Hash SHA-256 hexadecimal.

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """

    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    canonical_json = json.dumps(
        config,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
