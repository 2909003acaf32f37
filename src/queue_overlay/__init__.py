# src/queue_overlay/__init__.py
"""
Queue Overlay — motor de staging e resolução de configuração hierárquica de filas.

Este pacote raiz define o namespace público do Queue Overlay, um motor
que reconstrói a árvore de filas de um scheduler a partir de uma lista
plana de propriedades prefixadas e permite preparar (stage) um lote de
edições sem mutar o snapshot autoritativo.

Princípios centrais:
    - O snapshot carregado é a baseline imutável
    - Alterações pendentes são um delta explícito, indexado por path
    - A visão efetiva (baseline ⊕ delta) é sempre recalculada na leitura
    - Nenhum estado global de processo: cada sessão de edição é isolada

Arquitetura em alto nível:
    - core.keys          → codec entre chave plana e (queue path, chave simples)
    - core.trie          → árvore de filas construída a partir de `.queues`
    - core.staging       → store de alterações pendentes e resolução overlay
    - core.view          → formatação de dados de exibição e montagem da hierarquia
    - core.session       → sessão de edição (contexto injetado) e reconciliação
    - core.config        → settings do motor e carregamento de snapshots
    - core.traceability  → Event Log estruturado da sessão
    - preview            → visão tabular (pandas) das alterações pendentes

Limites explícitos:
    - Não realiza chamadas HTTP nem persiste configuração
    - Não renderiza a árvore (layout, canvas, componentes)
    - Não valida regras de negócio dos valores submetidos
"""
from .core.session import EditSession, ReconciliationReport
from .core.trie import SchedulerConfigTrie, TrieNode
from .core.staging import QueueBlueprint, StagedChangeStore
from .core.view import QueueViewDataFormatter

__all__ = [
    "EditSession",
    "ReconciliationReport",
    "SchedulerConfigTrie",
    "TrieNode",
    "QueueBlueprint",
    "StagedChangeStore",
    "QueueViewDataFormatter",
]
