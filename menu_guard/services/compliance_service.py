from typing import Iterable, List, Optional, Sequence
from menu_guard.models import (
    AssignmentReport,
    AssignmentStatus,
    Course,
    CourseCheck,
    Customer,
    CustomerCourseAssignment,
    DishReport,
    KitchenDishLine,
    KitchenSheet,
    ModifyAction,
    RemovedDish,
    ReplaceAction,
    ResolvedDish,
    Verdict,
    VerdictCounts,
)
from menu_guard.services.customization_resolver import customization_label, resolve_customized_dishes
from menu_guard.services.judgment import check_dish, verdict_icon
from menu_guard.services.sources.base import Catalog
from menu_guard.core.logging_config import get_logger

logger = get_logger(__name__)


class ComplianceService:
    """Resolves a guest's course and judges every dish that will be served."""

    def build_report(self, assignment: CustomerCourseAssignment, catalog: Catalog) -> AssignmentReport:
        """Build the allergen report for one assignment.

        Args:
            assignment: Guest, course and date with its customization layer.
            catalog: Snapshot used for every lookup in this call.

        Returns:
            AssignmentReport with judged active dishes, removed dishes and
            verdict counts over the active dishes.

        Notes:
            - A missing customer judges against no allergens.
            - A missing course yields no dishes.
            - Nothing is stored; the report is recomputed on every call.
        """
        customer = catalog.customer(assignment.customer_id)
        course = catalog.course(assignment.course_id)
        guest_allergens = list(customer.allergens) if customer else []

        if customer is None:
            logger.warning(f"Assignment {assignment.id}: customer {assignment.customer_id} not in catalog")
        if course is None:
            logger.warning(f"Assignment {assignment.id}: course {assignment.course_id} not in catalog")

        resolved = self._resolve(course, catalog, assignment.customizations)
        dishes = [
            self._dish_report(position, dish, guest_allergens)
            for position, dish in enumerate(resolved, start=1)
            if not dish.is_removed
        ]

        return AssignmentReport(
            assignment_id=assignment.id,
            customer_id=assignment.customer_id,
            customer_name=customer.name if customer else "",
            course_id=assignment.course_id,
            course_name=course.name if course else "",
            date=assignment.date,
            status=assignment.status,
            guest_allergens=guest_allergens,
            condition=customer.condition if customer else "",
            contamination=customer.contamination if customer else "",
            kitchen_note=assignment.kitchen_note,
            dishes=dishes,
            removed_dishes=self._removed(resolved),
            counts=count_verdicts(d.verdict for d in dishes)
        )

    def check_course(self, course: Course, customer: Customer, catalog: Catalog) -> CourseCheck:
        """Judge a course as planned, before any customization."""
        resolved = self._resolve(course, catalog, [])
        dishes = [
            self._dish_report(position, dish, customer.allergens)
            for position, dish in enumerate(resolved, start=1)
        ]
        return CourseCheck(
            course_id=course.id,
            course_name=course.name,
            customer_id=customer.id,
            guest_allergens=list(customer.allergens),
            dishes=dishes,
            counts=count_verdicts(d.verdict for d in dishes)
        )

    def kitchen_sheets(
        self,
        assignments: Iterable[CustomerCourseAssignment],
        catalog: Catalog,
        date: Optional[str] = None
    ) -> List[KitchenSheet]:
        """Dish lists for assignments already shared with the kitchen.

        Assignments whose customer or course is no longer in the catalog
        are left off the sheets.
        """
        sheets: List[KitchenSheet] = []
        for assignment in assignments:
            if assignment.status != AssignmentStatus.SHARED_WITH_KITCHEN:
                continue
            if date and assignment.date != date:
                continue

            customer = catalog.customer(assignment.customer_id)
            course = catalog.course(assignment.course_id)
            if customer is None or course is None:
                logger.warning(
                    f"Assignment {assignment.id}: customer {assignment.customer_id} or "
                    f"course {assignment.course_id} not in catalog; left off kitchen sheets"
                )
                continue
            resolved = self._resolve(course, catalog, assignment.customizations)

            sheets.append(
                KitchenSheet(
                    assignment_id=assignment.id,
                    date=assignment.date,
                    customer_name=customer.name,
                    room_name=customer.room_name,
                    course_name=course.name,
                    guest_allergens=list(customer.allergens),
                    condition=customer.condition,
                    contamination=customer.contamination,
                    kitchen_note=assignment.kitchen_note,
                    dishes=[
                        self._kitchen_line(position, dish)
                        for position, dish in enumerate(resolved, start=1)
                        if not dish.is_removed
                    ],
                    removed_dishes=self._removed(resolved)
                )
            )
        return sheets

    def _resolve(self, course: Optional[Course], catalog: Catalog, customizations) -> List[ResolvedDish]:
        if course is None:
            return []
        missing = [dish_id for dish_id in course.dish_ids if catalog.recipe(dish_id) is None]
        if missing:
            logger.warning(f"Course {course.id}: dish ids {missing} not in catalog; skipped")
        return resolve_customized_dishes(course.dish_ids, catalog.recipes, customizations)

    def _dish_report(self, position: int, dish: ResolvedDish, guest_allergens: Sequence[str]) -> DishReport:
        result = check_dish(dish.recipe, guest_allergens, dish.excluded_ingredient_ids)
        customization = dish.customization
        return DishReport(
            position=position,
            original_dish_id=dish.original_recipe.id,
            original_dish_name=dish.original_recipe.name,
            recipe_id=dish.recipe.id,
            recipe_name=dish.recipe.name,
            recipe_version=dish.recipe.version,
            label=customization_label(customization.action) if customization else None,
            note=customization.note if customization else "",
            verdict=result.verdict,
            verdict_icon=verdict_icon(result.verdict),
            matched_allergens=result.matched_allergens,
            has_unknown=result.has_unknown,
            excluded_ingredient_ids=list(dish.excluded_ingredient_ids),
            ingredients=result.ingredients
        )

    def _kitchen_line(self, position: int, dish: ResolvedDish) -> KitchenDishLine:
        customization = dish.customization
        action = customization.action if customization else None
        excluded = set(dish.excluded_ingredient_ids)

        if isinstance(action, ModifyAction) and action.custom_ingredients:
            display = [i.name for i in action.custom_ingredients]
        else:
            display = [i.name for i in dish.recipe.linked_ingredients if i.id not in excluded]

        # Set for every replace, including one that fell back to the original dish.
        replaced_from = dish.original_recipe.name if isinstance(action, ReplaceAction) else None

        return KitchenDishLine(
            position=position,
            recipe_name=dish.recipe.name,
            original_dish_name=dish.original_recipe.name,
            label=customization_label(action),
            replaced_from=replaced_from,
            display_ingredients=display,
            excluded_ingredient_names=[
                i.name for i in dish.recipe.linked_ingredients if i.id in excluded
            ],
            note=customization.note if customization else ""
        )

    def _removed(self, resolved: List[ResolvedDish]) -> List[RemovedDish]:
        return [
            RemovedDish(
                position=position,
                dish_id=dish.original_recipe.id,
                dish_name=dish.original_recipe.name,
                note=dish.customization.note if dish.customization else ""
            )
            for position, dish in enumerate(resolved, start=1)
            if dish.is_removed
        ]


def count_verdicts(verdicts: Iterable[Verdict]) -> VerdictCounts:
    counts = VerdictCounts()
    for verdict in verdicts:
        if verdict == Verdict.NG:
            counts.ng += 1
        elif verdict == Verdict.NEEDS_REVIEW:
            counts.needs_review += 1
        else:
            counts.ok += 1
    return counts


compliance_service = ComplianceService()
