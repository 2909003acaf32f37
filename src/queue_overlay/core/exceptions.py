"""
Queue Overlay — Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do Queue Overlay.

Objetivo:
- Sinalizar erros de programação (uso indevido da API do core)
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Leituras de paths inexistentes nunca levantam exceção (retornam None).
- Dados de origem malformados nunca levantam exceção (viram diagnóstico).
"""

from __future__ import annotations


class QueueOverlayError(Exception):
    """Base class para exceções internas do Queue Overlay."""


class TrieNotSetError(QueueOverlayError):
    """Método do Store invocado antes de um Trie ter sido configurado."""

    def __init__(self, operation: str):
        super().__init__(f"StagedChangeStore.{operation} requer um Trie configurado (use set_trie)")
        self.operation = operation


class InvalidBlueprintError(QueueOverlayError):
    """Blueprint de nova fila inconsistente com o path em que foi registrado."""
