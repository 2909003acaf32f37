from .change_preview import (
    CHANGE_COLUMNS,
    HIERARCHY_COLUMNS,
    build_change_records,
    change_preview_frame,
    hierarchy_frame,
)

__all__ = [
    "CHANGE_COLUMNS",
    "HIERARCHY_COLUMNS",
    "build_change_records",
    "change_preview_frame",
    "hierarchy_frame",
]
