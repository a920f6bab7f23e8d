from typing import Dict, Iterable, List, Optional, Union
from menu_guard.models import (
    CustomizationAction,
    DishCustomization,
    ModifyAction,
    NoAction,
    Recipe,
    RemoveAction,
    ReplaceAction,
    ResolvedDish,
)
from menu_guard.core.rules import CUSTOMIZATION_LABELS


def resolve_customized_dishes(
    dish_ids: Iterable[int],
    recipes: Iterable[Recipe],
    customizations: Iterable[DishCustomization]
) -> List[ResolvedDish]:
    """Apply one guest's customizations to a course's dishes.

    Args:
        dish_ids: The course's dish ids in serving order.
        recipes: Catalog snapshot used for id lookups only.
        customizations: The assignment's customization records.

    Returns:
        One ResolvedDish per dish id found in the catalog, in serving order.
        Removed dishes stay in the list with is_removed set.

    Notes:
        - Dish ids missing from the catalog are dropped.
        - Customizations for dishes outside the course are never consulted.
        - The catalog recipes are returned as-is and never modified.
    """
    catalog = _index_recipes(recipes)
    by_dish = _index_customizations(customizations)

    resolved: List[ResolvedDish] = []
    for dish_id in dish_ids:
        original = catalog.get(dish_id)
        if original is None:
            continue
        resolved.append(_resolve_dish(original, by_dish.get(dish_id), catalog))
    return resolved


def _resolve_dish(
    original: Recipe,
    customization: Optional[DishCustomization],
    catalog: Dict[int, Recipe]
) -> ResolvedDish:
    if customization is None:
        return ResolvedDish(recipe=original, original_recipe=original)

    action = customization.action
    excluded = list(customization.excluded_ingredient_ids)

    if isinstance(action, RemoveAction):
        return ResolvedDish(
            recipe=original,
            original_recipe=original,
            customization=customization,
            is_customized=True,
            is_removed=True,
            excluded_ingredient_ids=excluded
        )

    if isinstance(action, ReplaceAction):
        replacement = catalog.get(action.replacement_dish_id) if action.replacement_dish_id else None
        # An unresolvable replacement keeps the original plate but the override stays visible.
        return ResolvedDish(
            recipe=replacement if replacement is not None else original,
            original_recipe=original,
            customization=customization,
            is_customized=True,
            excluded_ingredient_ids=excluded
        )

    if isinstance(action, (ModifyAction, NoAction)):
        # custom_ingredients only rename for display; judgment still runs
        # over the original ingredients minus the exclusions.
        return ResolvedDish(
            recipe=original,
            original_recipe=original,
            customization=customization,
            is_customized=True,
            excluded_ingredient_ids=excluded
        )

    raise TypeError(f"Unhandled customization action: {type(action).__name__}")


def customization_label(action: Union[CustomizationAction, str, None]) -> Optional[str]:
    """Display label for an action; None for exclusion-only or absent actions."""
    if action is None:
        return None
    kind = action if isinstance(action, str) else action.kind
    return CUSTOMIZATION_LABELS.get(kind)


def active_dishes(resolved: Iterable[ResolvedDish]) -> List[ResolvedDish]:
    return [d for d in resolved if not d.is_removed]


def removed_dishes(resolved: Iterable[ResolvedDish]) -> List[ResolvedDish]:
    return [d for d in resolved if d.is_removed]


def _index_recipes(recipes: Iterable[Recipe]) -> Dict[int, Recipe]:
    index: Dict[int, Recipe] = {}
    for recipe in recipes:
        index.setdefault(recipe.id, recipe)
    return index


def _index_customizations(customizations: Iterable[DishCustomization]) -> Dict[int, DishCustomization]:
    # First record per dish wins; the store keeps one per dish anyway.
    index: Dict[int, DishCustomization] = {}
    for customization in customizations:
        index.setdefault(customization.original_dish_id, customization)
    return index
