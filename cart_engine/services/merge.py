"""Cart line identity and merge-on-add"""

from typing import Optional, Sequence

from ..models.cart import CartItem

ItemIdentity = tuple[str, Optional[str]]


def item_identity(item: CartItem) -> ItemIdentity:
    return item.identity


def find_item(items: Sequence[CartItem], identity: ItemIdentity) -> Optional[CartItem]:
    return next((item for item in items if item.identity == identity), None)


def resolve_add(existing_items: Sequence[CartItem], new_item: CartItem) -> list[CartItem]:
    """
    Return the item list after adding new_item.

    A line with the same identity absorbs the new quantity and takes the new
    item's pricing; otherwise the item is appended. Order is preserved.
    """
    identity = new_item.identity
    merged = False
    items = []

    for item in existing_items:
        if not merged and item.identity == identity:
            item = item.model_copy(
                update={
                    "quantity": item.quantity + new_item.quantity,
                    "product": new_item.product,
                    "selected_option": new_item.selected_option,
                }
            )
            merged = True
        items.append(item)

    if not merged:
        items.append(new_item)

    return items
