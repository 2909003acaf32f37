# src/queue_overlay/core/config/loader.py
"""
Loader canônico de settings do Queue Overlay.

Este módulo é responsável por carregar, validar estruturalmente e resolver
os settings efetivos do motor de overlay.

Os settings são resolvidos a partir de:
    - defaults embutidos (`DEFAULT_SETTINGS`, sempre presentes)
    - um arquivo de defaults do projeto (opcional; se informado, obrigatório existir)
    - um arquivo local de overrides (opcional; ignorado se ausente)

Princípios fundamentais:
    - Configuração é declarativa e explícita
    - A mesma entrada sempre produz os mesmos settings
    - Erros estruturais são tratados como falhas fatais

Invariantes:
    - O resultado é sempre um `EngineSettings` imutável
    - Overrides nunca mutam os defaults

Limites explícitos:
    - Não carrega snapshots de propriedades (ver `snapshot.py`)
    - Não interage com Trie, Store ou Formatter
"""

from pathlib import Path
from typing import Any, Optional, Tuple
import json

import yaml  # PyYAML

from .merge import deep_merge
from .hashing import compute_config_hash
from .settings import DEFAULT_SETTINGS, EngineSettings
from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)


def read_structured_file(path: Path) -> Any:
    """
    Lê um arquivo YAML ou JSON e retorna o conteúdo decodificado.

    Este utilitário é compartilhado pelos loaders de settings, snapshot
    e catálogo de metadata.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)

    Decisões arquiteturais:
        - O arquivo deve existir no momento do carregamento
        - Arquivos vazios são interpretados como `None`
        - Formatos não suportados geram erro explícito

    Args:
        path (Path): Caminho para o arquivo.

    Returns:
        Any: Conteúdo decodificado (dict, list, escalar ou None).

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
    """
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)

    if suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)

    raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")


def _load_mapping(path: Path) -> dict:
    data = read_structured_file(path)

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def resolve_settings(
    *,
    defaults_path: Optional[str] = None,
    local_path: Optional[str] = None,
) -> Tuple[EngineSettings, str]:
    """
    Resolve os settings efetivos e o hash canônico da configuração final.

    Política de resolução:
        - `DEFAULT_SETTINGS` é sempre a base
        - `defaults_path`, quando informado, deve existir e é aplicado por deep-merge
        - `local_path`, quando informado e existente, tem prioridade sobre ambos

    Args:
        defaults_path (Optional[str]): Arquivo de defaults do projeto.
        local_path (Optional[str]): Arquivo opcional de overrides locais.

    Returns:
        Tuple[EngineSettings, str]: Settings imutáveis e hash SHA-256 do dict resolvido.

    Raises:
        DefaultsNotFoundError: Se `defaults_path` for informado e não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo não for um dicionário.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
        InvalidSettingsError: Se algum valor resolvido estiver fora do domínio.
    """
    effective = DEFAULT_SETTINGS

    if defaults_path is not None:
        effective = deep_merge(effective, _load_mapping(Path(defaults_path)))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_mapping(local_file))

    settings = EngineSettings.from_dict(effective)
    return settings, compute_config_hash(settings.to_dict())


def load_settings(
    *,
    defaults_path: Optional[str] = None,
    local_path: Optional[str] = None,
) -> EngineSettings:
    """Carrega os settings efetivos do motor (ver `resolve_settings`)."""
    settings, _ = resolve_settings(defaults_path=defaults_path, local_path=local_path)
    return settings
