from typing import Iterable, List
from menu_guard.models import (
    DishCheckResult,
    Ingredient,
    IngredientCheckResult,
    IngredientJudgment,
    Recipe,
    Verdict,
)
from menu_guard.core.rules import VERDICT_ICONS, VERDICT_LABELS, VERDICT_SEVERITY


def check_ingredient(ingredient: Ingredient, guest_allergens: Iterable[str]) -> IngredientCheckResult:
    """Judge a single ingredient against a guest's allergens.

    Args:
        ingredient: Catalog ingredient with its known allergens.
        guest_allergens: Allergen names declared by the guest.

    Returns:
        IngredientCheckResult with the verdict and the allergens that matched.

    Notes:
        - A confirmed match is NG even when the ingredient is also flagged unknown.
        - An unverified ingredient with no confirmed match needs review.
    """
    guest = set(guest_allergens)
    matched = _unique(a for a in ingredient.allergens if a in guest)

    if matched:
        verdict = Verdict.NG
    elif ingredient.allergen_unknown:
        verdict = Verdict.NEEDS_REVIEW
    else:
        verdict = Verdict.OK

    return IngredientCheckResult(verdict=verdict, matched_allergens=matched)


def check_dish(
    dish: Recipe,
    guest_allergens: Iterable[str],
    excluded_ingredient_ids: Iterable[int] = ()
) -> DishCheckResult:
    """Judge a dish as the worst of its remaining ingredients.

    Args:
        dish: Recipe whose linked ingredients are judged.
        guest_allergens: Allergen names declared by the guest.
        excluded_ingredient_ids: Ingredients taken off the plate for this guest.

    Returns:
        DishCheckResult with the dish verdict, the union of matched allergens,
        whether any remaining ingredient is unverified, and per-ingredient results.
    """
    guest = set(guest_allergens)
    excluded = set(excluded_ingredient_ids)
    remaining = [i for i in dish.linked_ingredients if i.id not in excluded]

    judgments: List[IngredientJudgment] = []
    for ingredient in remaining:
        result = check_ingredient(ingredient, guest)
        judgments.append(
            IngredientJudgment(
                ingredient_id=ingredient.id,
                ingredient_name=ingredient.name,
                verdict=result.verdict,
                matched_allergens=result.matched_allergens
            )
        )

    # No remaining ingredients means nothing on the plate can react: OK.
    return DishCheckResult(
        verdict=worst_verdict(j.verdict for j in judgments),
        matched_allergens=_unique(a for j in judgments for a in j.matched_allergens),
        has_unknown=any(i.allergen_unknown for i in remaining),
        ingredients=judgments
    )


def severity(verdict: Verdict) -> int:
    return VERDICT_SEVERITY[Verdict(verdict).value]


def worst_verdict(verdicts: Iterable[Verdict]) -> Verdict:
    """Return the most severe verdict, or OK when there are none."""
    return max((Verdict(v) for v in verdicts), key=severity, default=Verdict.OK)


def verdict_icon(verdict: Verdict) -> str:
    return VERDICT_ICONS[Verdict(verdict).value]


def verdict_label(verdict: Verdict) -> str:
    return VERDICT_LABELS[Verdict(verdict).value]


def _unique(names: Iterable[str]) -> List[str]:
    """Deduplicate while keeping first-seen order."""
    seen = set()
    ordered: List[str] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            ordered.append(name)
    return ordered
