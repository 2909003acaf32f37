# src/queue_overlay/core/config/merge.py
"""
Utilitários canônicos de merge do Queue Overlay.

Este módulo implementa as duas políticas de combinação usadas pelo motor:

1. `deep_merge` — resolução de settings (defaults embutidos + arquivos):
    - dict → merge recursivo por chave
    - list → sobrescrita total
    - escalar → sobrescrita direta
    - conflito de tipos → erro estrutural explícito

2. `overlay_flat` — aplicação de modificações pendentes sobre um mapa
   plano de propriedades:
    - chave presente nas modificações → sobrescreve o valor base
    - chave ausente nas modificações → mantém o valor base
      ("não mencionado" significa "inalterado", nunca "removido")

Princípios fundamentais:
    - Ambos os merges são puramente funcionais
    - Nenhum input é mutado durante o processo

Limites explícitos:
    - Não carrega arquivos
    - Não realiza coerção de tipos
"""

from copy import deepcopy
from typing import Any, Dict, Iterable, Mapping, Optional

from .errors import ConfigTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois dicionários de settings.

    Decisões arquiteturais:
        - O merge é puramente funcional (inputs não são mutados)
        - Listas são substituídas por inteiro
        - Conflitos estruturais são tratados como falha fatal

    Invariantes:
        - A estrutura retornada é sempre um novo dicionário
        - Chaves não presentes no override são preservadas da base

    Args:
        base (Dict[str, Any]): Settings base (ex.: defaults embutidos).
        override (Dict[str, Any]): Overrides explícitos.

    Returns:
        Dict[str, Any]: Novos settings resultantes do deep-merge.

    Raises:
        ConfigTypeConflictError: Se ocorrer conflito de tipo entre base e override.
    """

    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]

        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
            continue

        if isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        # None na base significa "não definido": qualquer tipo é aceito
        if base_value is not None and type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        result[key] = deepcopy(override_value)

    return result


def overlay_flat(
    base: Mapping[str, str],
    modifications: Mapping[str, str],
    *,
    skip: Optional[Iterable[str]] = None,
) -> Dict[str, str]:
    """
    Aplica modificações chave a chave sobre um mapa plano de propriedades.

    Esta função é a política de overlay do Staged Change Store: cada chave
    mencionada em `modifications` sobrescreve o valor da baseline; chaves
    não mencionadas mantêm o valor original.

    Args:
        base (Mapping[str, str]): Propriedades da baseline.
        modifications (Mapping[str, str]): Modificações pendentes.
        skip (Optional[Iterable[str]]): Chaves de `modifications` a ignorar
            (ex.: dicas de UI que não são propriedades reais).

    Returns:
        Dict[str, str]: Novo mapa com as modificações aplicadas.
    """
    skipped = set(skip or ())
    result: Dict[str, str] = dict(base)
    for key, value in modifications.items():
        if key in skipped:
            continue
        result[key] = value
    return result
