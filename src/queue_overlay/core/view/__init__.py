from .capacity import (
    ResourceEntry,
    detect_capacity_mode,
    ensure_capacity_format,
    ensure_max_capacity_format,
    parse_resource_vector,
)
from .formatter import QueueViewDataFormatter
from .models import DeletionEligibility, FormattedQueue, UILabel

__all__ = [
    "ResourceEntry",
    "detect_capacity_mode",
    "ensure_capacity_format",
    "ensure_max_capacity_format",
    "parse_resource_vector",
    "QueueViewDataFormatter",
    "DeletionEligibility",
    "FormattedQueue",
    "UILabel",
]
