from .chart import (
    ALL_TOOTH_IDS,
    CANONICAL_ORDER,
    TOOTH_CONDITIONS,
    get_note,
    id_for,
    is_valid_tooth_id,
    ordered_notes,
    set_note,
)

__all__ = [
    "ALL_TOOTH_IDS",
    "CANONICAL_ORDER",
    "TOOTH_CONDITIONS",
    "get_note",
    "id_for",
    "is_valid_tooth_id",
    "ordered_notes",
    "set_note",
]
