# tests/conftest.py
"""
Fixtures compartilhados para testes do Queue Overlay.

Este módulo define fixtures reutilizáveis que fornecem:
- snapshots planos de propriedades do scheduler (determinísticos)
- Event Log isolado por teste
- Trie, Store, Formatter e sessão de edição já montados

O objetivo destas fixtures é permitir testes do core
(keys, trie, staging, view, session) sem depender de:
- filesystem
- variáveis de ambiente
- chamadas HTTP

Decisões arquiteturais:
    - Snapshots são listas `{name, value}`, o mesmo formato da API do scheduler
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture realiza I/O
    - Nenhuma fixture compartilha estado entre testes

Limites explícitos:
    - Não substituir testes de integração
    - Não conter lógica de domínio
"""

import pytest

PREFIX = "yarn.scheduler.capacity."


def _props(mapping):
    return [{"name": PREFIX + k, "value": v} for k, v in mapping.items()]


# =====================================================
# Snapshots
# =====================================================

@pytest.fixture
def basic_properties() -> list:
    """
    Snapshot mínimo: `root` com dois filhos percentuais e uma propriedade global.

    Returns:
        list: Entradas `{name, value}` prefixadas.
    """
    return _props(
        {
            "root.queues": "a,b",
            "root.a.capacity": "40%",
            "root.b.capacity": "60%",
            "maximum-applications": "10000",
        }
    )


@pytest.fixture
def nested_properties() -> list:
    """
    Snapshot com hierarquia de três níveis e casos de borda de origem.

    Contém:
        - modos de capacidade mistos (percentual, peso, absoluto)
        - propriedade multi-segmento (auto-creation v2)
        - propriedade com palavra-chave estrutural (accessible-node-labels)
        - propriedade órfã sob fila não declarada (`root.ghost`)
        - declaração `.queues` malformada (`rootx.queues`)
        - uma entrada fora do prefixo (ignorada)
    """
    entries = _props(
        {
            "root.queues": "default, analytics",
            "root.capacity": "100",
            "root.default.capacity": "[memory=2048,vcores=2]",
            "root.default.maximum-capacity": "[memory=4096,vcores=4]",
            "root.analytics.capacity": "60",
            "root.analytics.queues": "batch,adhoc",
            "root.analytics.auto-queue-creation-v2.enabled": "true",
            "root.analytics.batch.capacity": "2w",
            "root.analytics.batch.state": "STOPPED",
            "root.analytics.adhoc.capacity": "1w",
            "root.analytics.accessible-node-labels.GPU.capacity": "50",
            "root.ghost.capacity": "10%",
            "rootx.queues": "z",
            "resource-calculator": "org.apache.hadoop.yarn.util.resource.DominantResourceCalculator",
        }
    )
    entries.append({"name": "yarn.resourcemanager.scheduler.class", "value": "capacity"})
    return entries


# =====================================================
# Componentes do core
# =====================================================

@pytest.fixture
def events():
    from queue_overlay.core.traceability import EventLog

    return EventLog(session_id="sess-test-001")


@pytest.fixture
def codec():
    from queue_overlay.core.keys import PropertyKeyCodec

    return PropertyKeyCodec()


@pytest.fixture
def make_trie(events):
    """
    Fixture factory que constrói um Trie a partir de um snapshot.

    O Event Log do teste é injetado explicitamente para que os testes
    possam inspecionar warnings e diagnósticos do build.
    """
    from queue_overlay.core.trie import SchedulerConfigTrie

    def _make(properties):
        return SchedulerConfigTrie.build(properties, events=events)

    return _make


@pytest.fixture
def basic_store(make_trie, basic_properties, events):
    from queue_overlay.core.staging import StagedChangeStore

    return StagedChangeStore(make_trie(basic_properties), events=events)


@pytest.fixture
def nested_store(make_trie, nested_properties, events):
    from queue_overlay.core.staging import StagedChangeStore

    return StagedChangeStore(make_trie(nested_properties), events=events)


@pytest.fixture
def nested_formatter(nested_store):
    from queue_overlay.core.view import QueueViewDataFormatter

    return QueueViewDataFormatter(nested_store)


@pytest.fixture
def blueprint_factory():
    """Fixture factory de blueprints de filas novas."""
    from queue_overlay.core.staging import QueueBlueprint

    def _make(parent_path, name, properties=None, capacity_mode=None):
        return QueueBlueprint.create(parent_path, name, properties, capacity_mode=capacity_mode)

    return _make
