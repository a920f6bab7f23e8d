"""
Write-side helpers that keep an assignment's customization list canonical:
at most one record per dish and no semantically empty records.
"""
from typing import Dict, Iterable, List
from menu_guard.models import DishCustomization, NoAction


def is_empty_customization(customization: DishCustomization) -> bool:
    """A record with no action and no exclusions carries nothing to apply."""
    return isinstance(customization.action, NoAction) and not customization.excluded_ingredient_ids


def upsert_customization(
    customizations: Iterable[DishCustomization],
    customization: DishCustomization
) -> List[DishCustomization]:
    """Insert or replace the record for customization.original_dish_id.

    An existing record keeps its position. An empty record removes the key.
    The input list is never modified.
    """
    updated: List[DishCustomization] = []
    replaced = False
    for existing in customizations:
        if existing.original_dish_id == customization.original_dish_id:
            if not replaced:
                updated.append(customization)
                replaced = True
            continue
        updated.append(existing)

    if not replaced:
        updated.append(customization)

    return prune_empty_customizations(updated)


def delete_customization(
    customizations: Iterable[DishCustomization],
    original_dish_id: int
) -> List[DishCustomization]:
    return [c for c in customizations if c.original_dish_id != original_dish_id]


def prune_empty_customizations(customizations: Iterable[DishCustomization]) -> List[DishCustomization]:
    """Drop empty records and collapse duplicate keys.

    For duplicates the last record wins and takes the first record's position.
    """
    latest: Dict[int, DishCustomization] = {}
    order: List[int] = []
    for customization in customizations:
        key = customization.original_dish_id
        if key not in latest:
            order.append(key)
        latest[key] = customization

    return [latest[key] for key in order if not is_empty_customization(latest[key])]
