import pytest
from menu_guard.models import Course, Customer, Recipe
from menu_guard.services.allergen_registry import AllergenRegistry
from menu_guard.services.assignment_store import AssignmentStore
from menu_guard.services.compliance_service import ComplianceService
from menu_guard.services.sources.base import Catalog
from tests.factories import DASHI, EGG, PRAWN, SEA_BREAM, SOY_SAUCE, WHEAT


@pytest.fixture
def recipes():
    """Small catalog: 1 omelette (egg), 2 tempura, 3 sashimi (unverified soy), 4 clear soup."""
    return [
        Recipe(id=1, name="Rolled omelette", version="v1", linked_ingredients=[WHEAT, EGG]),
        Recipe(id=2, name="Tempura", version="v1", linked_ingredients=[PRAWN, EGG, WHEAT]),
        Recipe(id=3, name="Sea bream sashimi", version="v1", linked_ingredients=[SEA_BREAM, SOY_SAUCE]),
        Recipe(id=4, name="Clear soup", version="v1", linked_ingredients=[DASHI, SEA_BREAM]),
    ]


@pytest.fixture
def catalog(recipes):
    return Catalog(
        recipes=recipes,
        courses=[Course(id=10, name="Spring kaiseki", dish_ids=[3, 1, 2, 4])],
        customers=[
            Customer(
                id=100,
                name="Taro Yamada",
                allergens=["egg", "shrimp"],
                condition="No trace amounts",
                contamination="Not acceptable",
                room_name="Stylish Suite"
            ),
            Customer(id=101, name="Hanako Sato", allergens=[]),
        ]
    )


@pytest.fixture
def store(tmp_path):
    """AssignmentStore writing to a throwaway JSON file."""
    return AssignmentStore(str(tmp_path / "assignments.json"))


@pytest.fixture
def registry(tmp_path):
    return AllergenRegistry(str(tmp_path / "custom_allergens.json"))


@pytest.fixture
def compliance():
    return ComplianceService()
