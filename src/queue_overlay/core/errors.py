"""
Queue Overlay — Canonical Diagnostic Structures (v1)

Este módulo define o padrão canônico de diagnósticos não fatais do
Queue Overlay. O core nunca bloqueia a renderização por causa de dados
de origem malformados: ele mascara o problema com defaults documentados
e registra um diagnóstico tipado no Event Log da sessão.

Diagnósticos devem ser:

- explícitos
- serializáveis
- rastreáveis
- acionáveis
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DiagnosticPayload:
    """
    Payload canônico de diagnóstico do Queue Overlay.

    Campos:
    - type: código estável do diagnóstico (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do diagnóstico."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de diagnóstico (v1)
# ---------------------------------------------------------------------------

# Construção do Trie
MALFORMED_CONFIG_ENTRY = "MALFORMED_CONFIG_ENTRY"
UNRESOLVABLE_PROPERTY = "UNRESOLVABLE_PROPERTY"

# Formatação
INVALID_CAPACITY_FORMAT = "INVALID_CAPACITY_FORMAT"

# Reconciliação de staging
STAGED_CHANGE_UNRESOLVABLE = "STAGED_CHANGE_UNRESOLVABLE"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def malformed_config_entry(
    *,
    key: str,
    reason: str,
    hint: str = "Corrija a chave `.queues` para que o path pai seja `root` ou comece com `root.`.",
) -> DiagnosticPayload:
    return DiagnosticPayload(
        type=MALFORMED_CONFIG_ENTRY,
        message="Entrada de configuração malformada ignorada",
        details={"key": key, "reason": reason},
        hint=hint,
    )


def unresolvable_property(
    *,
    key: str,
    attached_to: Optional[str],
    reason: str,
    hint: str = "Declare a fila no `.queues` do pai ou remova a propriedade órfã.",
) -> DiagnosticPayload:
    return DiagnosticPayload(
        type=UNRESOLVABLE_PROPERTY,
        message="Propriedade não corresponde a uma fila confirmada",
        details={"key": key, "attached_to": attached_to, "reason": reason},
        hint=hint,
    )


def invalid_capacity_format(
    *,
    queue_path: str,
    property_key: str,
    raw_value: Any,
    fallback: str,
) -> DiagnosticPayload:
    return DiagnosticPayload(
        type=INVALID_CAPACITY_FORMAT,
        message="Valor de capacidade não interpretável; default aplicado",
        details={
            "queue_path": queue_path,
            "property_key": property_key,
            "raw_value": raw_value,
            "fallback": fallback,
        },
        hint="Ajuste o valor para o formato do modo de capacidade (ex.: 40%, 2w, [memory=1024,vcores=1]).",
    )


def staged_change_unresolvable(
    *,
    queue_path: str,
    operation: str,
    reason: str,
    dropped: bool,
) -> DiagnosticPayload:
    return DiagnosticPayload(
        type=STAGED_CHANGE_UNRESOLVABLE,
        message=(
            "Alteração pendente descartada após recarga da configuração"
            if dropped
            else "Alteração pendente não resolve contra a configuração recarregada"
        ),
        details={
            "queue_path": queue_path,
            "operation": operation,
            "reason": reason,
            "dropped": dropped,
        },
        hint="Revise as alterações pendentes antes de aplicar o lote.",
    )
