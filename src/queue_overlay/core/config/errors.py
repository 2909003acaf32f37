# src/queue_overlay/core/config/errors.py
"""
Exceções canônicas da camada de configuração do Queue Overlay.

Este módulo define a hierarquia oficial de exceções utilizadas durante
o carregamento de settings do motor e de snapshots de propriedades.

As exceções aqui definidas representam **violações estruturais
explícitas** de arquivos de entrada, e não problemas de conteúdo das
propriedades do scheduler (estes viram diagnósticos não fatais).

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - `ConfigError` herda de `QueueOverlayError`

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não depende de Trie, Store ou Formatter
"""

from ..exceptions import QueueOverlayError


class ConfigError(QueueOverlayError):
    """
    Exceção base para erros relacionados à configuração do Queue Overlay.

    Todas as exceções levantadas durante carregamento, merge e validação
    de settings ou snapshots devem herdar desta classe.
    """


class DefaultsNotFoundError(ConfigError):
    """
    Exceção levantada quando um arquivo explicitamente informado
    (defaults de settings, snapshot ou catálogo) não é encontrado.

    Limites explícitos:
        - Não tenta inferir ou criar o arquivo automaticamente
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Exceção levantada quando o formato do arquivo não é suportado.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)

    Limites explícitos:
        - Não tenta inferir formato por conteúdo
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Exceção levantada quando o conteúdo raiz de um arquivo de settings
    não é um dicionário (`dict`).
    """


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"reconciliation": {"policy": "drop"}}
        - override: {"reconciliation": "keep"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """


class InvalidSettingsError(ConfigError):
    """
    Exceção levantada quando a configuração resolvida contém valores
    fora do domínio aceito pelo motor (ex.: política de reconciliação
    desconhecida, prefixo vazio).
    """


class SnapshotFormatError(ConfigError):
    """
    Exceção levantada quando um arquivo de snapshot não tem nenhum dos
    formatos aceitos: `{"property": [...]}`, lista de entradas `{name, value}`
    ou mapa plano `{name: value}`.
    """
