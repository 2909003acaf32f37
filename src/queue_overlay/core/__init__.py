# src/queue_overlay/core/__init__.py
"""
Core do Queue Overlay.

Este pacote contém a implementação canônica do motor de overlay,
reunindo as três responsabilidades cooperantes que reconstroem,
alteram e formatam a hierarquia de filas.

O core é projetado para ser:
    - síncrono e determinístico
    - testável de forma isolada
    - livre de dependências de UI, HTTP ou persistência

Componentes principais:
    - keys     → codec de chaves de propriedade
    - trie     → Config Trie (baseline imutável por snapshot)
    - staging  → Staged Change Store (delta de alterações pendentes)
    - view     → View-Data Formatter (visão efetiva pronta para exibição)
    - session  → contexto de edição injetado por construtor

Fluxo de dados (unidirecional):
    propriedades planas → Trie → Store.get_queue (overlay)
    → Formatter.get_formatted_queue → hierarquia recursiva

Limites explícitos:
    - Não valida valores submetidos contra regras de negócio
    - Não mantém singletons de processo
"""
