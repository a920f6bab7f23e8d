import pytest
from menu_guard.models import (
    CustomIngredient,
    DishCustomization,
    ModifyAction,
    NoAction,
    Recipe,
    RemoveAction,
    ReplaceAction,
    Verdict,
)
from menu_guard.services.customization_resolver import (
    active_dishes,
    customization_label,
    removed_dishes,
    resolve_customized_dishes,
)
from menu_guard.services.judgment import check_dish
from tests.factories import EGG, WHEAT, make_ingredient


class TestResolveCustomizedDishes:

    def test_no_customizations_keeps_course_order(self, recipes):
        resolved = resolve_customized_dishes([3, 1, 2], recipes, [])
        assert [d.recipe.id for d in resolved] == [3, 1, 2]
        assert all(not d.is_customized and not d.is_removed for d in resolved)
        assert all(d.customization is None and d.excluded_ingredient_ids == [] for d in resolved)

    def test_missing_dish_is_dropped(self, recipes):
        resolved = resolve_customized_dishes([1, 404, 2], recipes, [])
        assert [d.recipe.id for d in resolved] == [1, 2]

    def test_remove_keeps_entry_flagged(self, recipes):
        customization = DishCustomization(original_dish_id=1, action=RemoveAction(), note="guest declined")
        resolved = resolve_customized_dishes([1, 2], recipes, [customization])

        assert resolved[0].is_removed is True
        assert resolved[0].is_customized is True
        assert resolved[0].recipe.id == 1
        assert [d.recipe.id for d in active_dishes(resolved)] == [2]
        assert [d.recipe.id for d in removed_dishes(resolved)] == [1]

    def test_replace_uses_replacement_recipe(self, recipes):
        customization = DishCustomization(
            original_dish_id=2,
            action=ReplaceAction(replacement_dish_id=4),
            excluded_ingredient_ids=[5]
        )
        resolved = resolve_customized_dishes([1, 2], recipes, [customization])

        swapped = resolved[1]
        assert swapped.recipe.id == 4
        assert swapped.original_recipe.id == 2
        assert swapped.original_dish_id == 2
        assert swapped.is_customized is True
        assert swapped.is_removed is False
        assert swapped.excluded_ingredient_ids == [5]

    def test_replace_judges_only_the_replacement(self, recipes):
        customization = DishCustomization(original_dish_id=2, action=ReplaceAction(replacement_dish_id=4))
        swapped = resolve_customized_dishes([2], recipes, [customization])[0]

        result = check_dish(swapped.recipe, ["egg", "shrimp"], swapped.excluded_ingredient_ids)
        assert result.verdict == Verdict.OK

    @pytest.mark.parametrize("replacement_dish_id", [9999, None, 0])
    def test_replace_falls_back_to_original(self, recipes, replacement_dish_id):
        customization = DishCustomization(
            original_dish_id=1,
            action=ReplaceAction(replacement_dish_id=replacement_dish_id),
            note="swap to soup"
        )
        resolved = resolve_customized_dishes([1], recipes, [customization])

        assert resolved[0].recipe.id == 1
        assert resolved[0].is_customized is True
        assert resolved[0].is_removed is False
        assert resolved[0].customization.note == "swap to soup"

    def test_modify_is_display_only(self, recipes):
        omelette = recipes[0]
        customization = DishCustomization(
            original_dish_id=1,
            action=ModifyAction(custom_ingredients=[
                CustomIngredient(name="rice flour", is_modified=True),
                CustomIngredient(name="egg yolk"),
            ])
        )
        modified = resolve_customized_dishes([1], recipes, [customization])[0]

        assert modified.recipe == omelette
        assert modified.is_customized is True
        guest = ["wheat", "egg"]
        assert (
            check_dish(modified.recipe, guest, modified.excluded_ingredient_ids).verdict
            == check_dish(omelette, guest).verdict
            == Verdict.NG
        )

    def test_modify_with_exclusion_changes_verdict(self, recipes):
        customization = DishCustomization(
            original_dish_id=1,
            action=ModifyAction(custom_ingredients=[CustomIngredient(name="rice flour", is_modified=True)]),
            excluded_ingredient_ids=[WHEAT.id]
        )
        modified = resolve_customized_dishes([1], recipes, [customization])[0]
        result = check_dish(modified.recipe, ["wheat"], modified.excluded_ingredient_ids)
        assert result.verdict == Verdict.OK

    def test_exclusion_only_customization(self, recipes):
        customization = DishCustomization(original_dish_id=1, excluded_ingredient_ids=[EGG.id])
        resolved = resolve_customized_dishes([1], recipes, [customization])[0]

        assert isinstance(resolved.customization.action, NoAction)
        assert resolved.is_customized is True
        assert resolved.excluded_ingredient_ids == [EGG.id]
        assert customization_label(resolved.customization.action) is None

    def test_customization_outside_course_is_inert(self, recipes):
        stray = DishCustomization(original_dish_id=3, action=RemoveAction())
        resolved = resolve_customized_dishes([1, 2], recipes, [stray])
        assert [d.recipe.id for d in resolved] == [1, 2]
        assert not any(d.is_customized for d in resolved)

    def test_resolution_is_idempotent(self, recipes):
        customizations = [
            DishCustomization(original_dish_id=1, action=RemoveAction()),
            DishCustomization(original_dish_id=2, action=ReplaceAction(replacement_dish_id=4)),
            DishCustomization(original_dish_id=3, excluded_ingredient_ids=[4]),
        ]
        first = resolve_customized_dishes([3, 1, 2, 4], recipes, customizations)
        second = resolve_customized_dishes([3, 1, 2, 4], recipes, customizations)
        assert first == second
        assert [d.model_dump() for d in first] == [d.model_dump() for d in second]

    def test_catalog_is_not_mutated(self, recipes):
        before = [r.model_dump() for r in recipes]
        resolve_customized_dishes(
            [1, 2],
            recipes,
            [
                DishCustomization(original_dish_id=1, excluded_ingredient_ids=[EGG.id]),
                DishCustomization(original_dish_id=2, action=ReplaceAction(replacement_dish_id=1)),
            ]
        )
        assert [r.model_dump() for r in recipes] == before

    def test_repeated_dish_ids_resolve_per_slot(self, recipes):
        resolved = resolve_customized_dishes([4, 4], recipes, [])
        assert len(resolved) == 2


def test_end_to_end_remove_and_exclusion():
    wheat = make_ingredient(10, "wheat", [])
    egg = make_ingredient(11, "egg", ["egg"])
    dish_a = Recipe(id=1, name="Dish A", linked_ingredients=[wheat, egg])
    guest = {"egg", "shrimp"}

    removed = resolve_customized_dishes(
        [1], [dish_a], [DishCustomization(original_dish_id=1, action=RemoveAction())]
    )
    assert removed[0].is_removed is True
    assert active_dishes(removed) == []

    excluded = resolve_customized_dishes(
        [1], [dish_a], [DishCustomization(original_dish_id=1, excluded_ingredient_ids=[egg.id])]
    )[0]
    assert check_dish(excluded.recipe, guest, excluded.excluded_ingredient_ids).verdict == Verdict.OK


@pytest.mark.parametrize(
    "action,expected",
    [
        (ReplaceAction(replacement_dish_id=2), "replaced"),
        (ModifyAction(), "modified"),
        (RemoveAction(), "removed"),
        (NoAction(), None),
        (None, None),
        ("replace", "replaced"),
    ],
)
def test_customization_label(action, expected):
    assert customization_label(action) == expected
