"""Bill editing operations package."""

from spliteasy.editing.editor import (
    EXTERNAL_PAYER,
    EXTERNAL_PAYER_NAME,
    BillEditError,
    add_item,
    add_person,
    create_empty_state,
    create_sample_state,
    generate_id,
    parse_amount,
    remove_item,
    remove_person,
    rename_person,
    set_overall_tax,
    set_payer,
    toggle_consumer,
    update_item,
)

__all__ = [
    "EXTERNAL_PAYER",
    "EXTERNAL_PAYER_NAME",
    "BillEditError",
    "add_item",
    "add_person",
    "create_empty_state",
    "create_sample_state",
    "generate_id",
    "parse_amount",
    "remove_item",
    "remove_person",
    "rename_person",
    "set_overall_tax",
    "set_payer",
    "toggle_consumer",
    "update_item",
]
