from enum import Enum
from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, Field, constr


class Verdict(str, Enum):
    OK = "OK"
    NEEDS_REVIEW = "NEEDS_REVIEW"
    NG = "NG"


class IngredientCategory(str, Enum):
    MAIN = "main"
    SEASONING = "seasoning"
    PREP_BASE = "prep_base"  # shared stocks, sauces and batters


class AllergenCategory(str, Enum):
    MANDATORY = "mandatory"
    RECOMMENDED = "recommended"
    CUSTOM = "custom"


class AssignmentStatus(str, Enum):
    UNCONFIRMED = "unconfirmed"
    CONFIRMED = "confirmed"
    SHARED_WITH_KITCHEN = "shared_with_kitchen"


class AllergenItem(BaseModel):
    name: str
    category: AllergenCategory


# --- Catalog ---

class Ingredient(BaseModel):
    id: int
    name: str
    category: IngredientCategory = IngredientCategory.MAIN
    allergens: List[str] = Field(default_factory=list)
    allergen_unknown: bool = False  # supplier composition not fully verified

class Recipe(BaseModel):
    id: int
    name: str
    version: str = ""
    linked_ingredients: List[Ingredient] = Field(default_factory=list)

class Course(BaseModel):
    id: int
    name: str
    dish_ids: List[int] = Field(default_factory=list)

class Customer(BaseModel):
    id: int
    name: str = ""
    allergens: List[str] = Field(default_factory=list)
    # Staff annotations only; judgment does not read them.
    condition: str = ""
    contamination: str = ""
    check_in_date: Optional[str] = None
    room_name: str = ""
    notes: str = ""
    original_text: str = ""


# --- Customizations ---

class CustomIngredient(BaseModel):
    name: str
    is_modified: bool = False


class ReplaceAction(BaseModel):
    kind: Literal["replace"] = "replace"
    replacement_dish_id: Optional[int] = None

class ModifyAction(BaseModel):
    kind: Literal["modify"] = "modify"
    custom_ingredients: List[CustomIngredient] = Field(default_factory=list)

class RemoveAction(BaseModel):
    kind: Literal["remove"] = "remove"

class NoAction(BaseModel):
    kind: Literal["none"] = "none"


CustomizationAction = Annotated[
    Union[ReplaceAction, ModifyAction, RemoveAction, NoAction],
    Field(discriminator="kind"),
]


class DishCustomization(BaseModel):
    original_dish_id: int
    action: CustomizationAction = Field(default_factory=NoAction)
    excluded_ingredient_ids: List[int] = Field(default_factory=list)
    note: str = ""


class CustomerCourseAssignment(BaseModel):
    id: int
    customer_id: int
    course_id: int
    date: str
    customizations: List[DishCustomization] = Field(default_factory=list)
    kitchen_note: str = ""
    status: AssignmentStatus = AssignmentStatus.UNCONFIRMED


# --- Judgment results ---

class IngredientCheckResult(BaseModel):
    verdict: Verdict
    matched_allergens: List[str] = Field(default_factory=list)

class IngredientJudgment(BaseModel):
    ingredient_id: int
    ingredient_name: str
    verdict: Verdict
    matched_allergens: List[str] = Field(default_factory=list)

class DishCheckResult(BaseModel):
    verdict: Verdict
    matched_allergens: List[str] = Field(default_factory=list)
    has_unknown: bool = False
    ingredients: List[IngredientJudgment] = Field(default_factory=list)


class ResolvedDish(BaseModel):
    recipe: Recipe
    original_recipe: Recipe
    customization: Optional[DishCustomization] = None
    is_customized: bool = False
    is_removed: bool = False
    excluded_ingredient_ids: List[int] = Field(default_factory=list)

    @property
    def original_dish_id(self) -> int:
        return self.original_recipe.id


# --- Reports ---

class VerdictCounts(BaseModel):
    ok: int = 0
    needs_review: int = 0
    ng: int = 0

class DishReport(BaseModel):
    position: int
    original_dish_id: int
    original_dish_name: str
    recipe_id: int
    recipe_name: str
    recipe_version: str = ""
    label: Optional[str] = None
    note: str = ""
    verdict: Verdict
    verdict_icon: str
    matched_allergens: List[str] = Field(default_factory=list)
    has_unknown: bool = False
    excluded_ingredient_ids: List[int] = Field(default_factory=list)
    ingredients: List[IngredientJudgment] = Field(default_factory=list)

class RemovedDish(BaseModel):
    position: int
    dish_id: int
    dish_name: str
    note: str = ""

class AssignmentReport(BaseModel):
    assignment_id: int
    customer_id: int
    customer_name: str = ""
    course_id: int
    course_name: str = ""
    date: str
    status: AssignmentStatus
    guest_allergens: List[str] = Field(default_factory=list)
    condition: str = ""
    contamination: str = ""
    kitchen_note: str = ""
    dishes: List[DishReport] = Field(default_factory=list)
    removed_dishes: List[RemovedDish] = Field(default_factory=list)
    counts: VerdictCounts = Field(default_factory=VerdictCounts)

class CourseCheck(BaseModel):
    course_id: int
    course_name: str
    customer_id: int
    guest_allergens: List[str] = Field(default_factory=list)
    dishes: List[DishReport] = Field(default_factory=list)
    counts: VerdictCounts = Field(default_factory=VerdictCounts)

class KitchenDishLine(BaseModel):
    position: int
    recipe_name: str
    original_dish_name: str
    label: Optional[str] = None
    replaced_from: Optional[str] = None
    display_ingredients: List[str] = Field(default_factory=list)
    excluded_ingredient_names: List[str] = Field(default_factory=list)
    note: str = ""

class KitchenSheet(BaseModel):
    assignment_id: int
    date: str
    customer_name: str = ""
    room_name: str = ""
    course_name: str = ""
    guest_allergens: List[str] = Field(default_factory=list)
    condition: str = ""
    contamination: str = ""
    kitchen_note: str = ""
    dishes: List[KitchenDishLine] = Field(default_factory=list)
    removed_dishes: List[RemovedDish] = Field(default_factory=list)


# --- API requests ---

class CheckIngredientRequest(BaseModel):
    ingredient: Ingredient
    guest_allergens: List[str] = Field(default_factory=list)

class CheckDishRequest(BaseModel):
    dish: Recipe
    guest_allergens: List[str] = Field(default_factory=list)
    excluded_ingredient_ids: List[int] = Field(default_factory=list)

class ResolveRequest(BaseModel):
    dish_ids: List[int]
    recipes: List[Recipe] = Field(default_factory=list)
    customizations: List[DishCustomization] = Field(default_factory=list)

class CreateAssignmentRequest(BaseModel):
    customer_id: int
    course_id: int
    date: constr(strip_whitespace=True, pattern=r"^\d{4}-\d{2}-\d{2}$") = Field(
        ..., description="Serving date (YYYY-MM-DD)"
    )

class StatusUpdateRequest(BaseModel):
    status: AssignmentStatus

class KitchenNoteRequest(BaseModel):
    kitchen_note: str = ""

class CustomAllergenRequest(BaseModel):
    name: str = Field(..., description="Allergen name as staff want it displayed")
