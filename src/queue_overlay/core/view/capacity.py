# src/queue_overlay/core/view/capacity.py
"""
Detecção de modo de capacidade e normalização de valores para exibição.

Funções puras, sem acesso ao Store:
    - detect_capacity_mode: dica da UI > sufixo `w` > colchetes > percentual
    - ensure_capacity_format: valor canônico para o modo detectado
    - ensure_max_capacity_format: independente de modo (vetor ou percentual)
    - parse_resource_vector: "[k1=v1,k2=v2]" -> lista ordenada de ResourceEntry

Política de dados malformados:
    - Valores não interpretáveis são mascarados com defaults documentados
    - Nenhuma função deste módulo levanta exceção por dado de origem
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..constants import CapacityMode

DEFAULT_CAPACITY_BY_MODE = {
    CapacityMode.PERCENTAGE: "0%",
    CapacityMode.WEIGHT: "1.0w",
    CapacityMode.ABSOLUTE: "[memory=1024,vcores=1]",
    CapacityMode.VECTOR: "[memory=1024,vcores=1]",
}
DEFAULT_MAX_CAPACITY = "100.0%"

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_VALUE_AND_UNIT = re.compile(r"^([0-9.]+)(.*)$")


@dataclass(frozen=True)
class ResourceEntry:
    key: str
    value: str
    unit: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def _leading_float(value: str) -> Optional[float]:
    match = _LEADING_NUMBER.match(value)
    if match is None:
        return None
    return float(match.group(0))


def _is_bracketed(value: str) -> bool:
    return value.startswith("[") and value.endswith("]")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def detect_capacity_mode(capacity: Any, hint: Any = None) -> CapacityMode:
    mode = CapacityMode.coerce(hint)
    if mode is not None:
        return mode
    if _is_missing(capacity):
        return CapacityMode.PERCENTAGE
    text = str(capacity).strip()
    if text.endswith("w"):
        return CapacityMode.WEIGHT
    if _is_bracketed(text):
        return CapacityMode.ABSOLUTE
    return CapacityMode.PERCENTAGE


def normalize_capacity(value: Any, mode: Any, default_value: Any = None) -> Tuple[str, bool]:
    """
    Normaliza `capacity` para o modo dado.

    Returns:
        Tuple[str, bool]: valor canônico e se um valor presente foi mascarado
        por não ser interpretável.
    """
    mode = CapacityMode.coerce(mode) or CapacityMode.PERCENTAGE

    if _is_missing(value):
        if not _is_missing(default_value) and _default_matches(str(default_value).strip(), mode):
            return normalize_capacity(default_value, mode)
        return DEFAULT_CAPACITY_BY_MODE[mode], False

    text = str(value).strip()

    if mode in (CapacityMode.ABSOLUTE, CapacityMode.VECTOR):
        if _is_bracketed(text):
            return text, False
        return "[" + text.replace("[", "").replace("]", "") + "]", False

    suffix = "%" if mode == CapacityMode.PERCENTAGE else "w"
    if text.endswith(suffix):
        return text, False
    number = _leading_float(text)
    if number is None:
        return f"{0:.1f}{suffix}", True
    return f"{number:.1f}{suffix}", False


def _default_matches(default_value: str, mode: CapacityMode) -> bool:
    detected = detect_capacity_mode(default_value)
    if mode in (CapacityMode.ABSOLUTE, CapacityMode.VECTOR):
        return detected == CapacityMode.ABSOLUTE
    return detected == mode


def ensure_capacity_format(value: Any, mode: Any, default_value: Any = None) -> str:
    return normalize_capacity(value, mode, default_value)[0]


def normalize_max_capacity(value: Any, default_value: Any = None) -> Tuple[str, bool]:
    if _is_missing(value):
        if not _is_missing(default_value):
            return normalize_max_capacity(default_value)
        return DEFAULT_MAX_CAPACITY, False

    text = str(value).strip()
    if _is_bracketed(text) or text.endswith("%"):
        return text, False
    number = _leading_float(text)
    if number is None:
        return DEFAULT_MAX_CAPACITY, True
    return f"{number:.1f}%", False


def ensure_max_capacity_format(value: Any, default_value: Any = None) -> str:
    return normalize_max_capacity(value, default_value)[0]


def parse_resource_vector(resource: Any) -> List[ResourceEntry]:
    if not isinstance(resource, str):
        return []
    text = resource.strip()
    if _is_bracketed(text):
        text = text[1:-1]
    if not text.strip():
        return []

    entries: List[ResourceEntry] = []
    for pair in text.split(","):
        if "=" not in pair:
            continue
        key, _, raw_value = pair.partition("=")
        key, raw_value = key.strip(), raw_value.strip()
        if not key:
            continue
        match = _VALUE_AND_UNIT.match(raw_value)
        if match is None:
            entries.append(ResourceEntry(key=key, value=raw_value, unit=""))
        else:
            entries.append(ResourceEntry(key=key, value=match.group(1), unit=match.group(2)))
    return entries
