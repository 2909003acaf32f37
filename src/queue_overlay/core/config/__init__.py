# src/queue_overlay/core/config/__init__.py

"""
Camada de configuração do Queue Overlay.

Este pacote contém as estruturas e utilitários responsáveis por carregar,
mesclar, validar estruturalmente e identificar:
    - os settings do motor (prefixo, política de reconciliação, cache)
    - snapshots de propriedades do scheduler lidos de arquivo

Princípios fundamentais:
    - Configuração não contém lógica de resolução de filas
    - Overrides são sempre explícitos
    - A mesma entrada sempre produz a mesma configuração final

Limites explícitos:
    - Não interage com Trie, Store ou Formatter diretamente
    - Não busca configuração via rede
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    InvalidSettingsError,
    SnapshotFormatError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash
from .loader import load_settings, resolve_settings
from .merge import deep_merge, overlay_flat
from .settings import DEFAULT_SETTINGS, EngineSettings
from .snapshot import load_properties_snapshot, normalize_snapshot

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "InvalidSettingsError",
    "SnapshotFormatError",
    "UnsupportedConfigFormatError",
    "compute_config_hash",
    "load_settings",
    "resolve_settings",
    "deep_merge",
    "overlay_flat",
    "DEFAULT_SETTINGS",
    "EngineSettings",
    "load_properties_snapshot",
    "normalize_snapshot",
]
