from typing import List, Optional
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
import time
import uuid
from menu_guard.models import (
    AllergenItem,
    AssignmentReport,
    AssignmentStatus,
    CheckDishRequest,
    CheckIngredientRequest,
    CourseCheck,
    CreateAssignmentRequest,
    CustomAllergenRequest,
    CustomerCourseAssignment,
    DishCheckResult,
    DishCustomization,
    IngredientCheckResult,
    KitchenNoteRequest,
    KitchenSheet,
    ResolveRequest,
    ResolvedDish,
    StatusUpdateRequest,
)
from menu_guard.core.app_config import load_app_config
from menu_guard.core.logging_config import get_logger, resolve_level, set_log_level
from menu_guard.services.allergen_registry import AllergenRegistry
from menu_guard.services.assignment_store import AssignmentNotFoundError, AssignmentStore
from menu_guard.services.compliance_service import compliance_service
from menu_guard.services.customization_resolver import resolve_customized_dishes
from menu_guard.services.judgment import check_dish, check_ingredient
from menu_guard.services.sources.base import Catalog, CatalogEntityNotFoundError, CatalogSource
from menu_guard.services.sources.local import LocalCatalogSource

config = load_app_config()
set_log_level(resolve_level(config.log_level))

app = FastAPI(title="Menu Guard Allergen Compliance API", version="0.1.0")
logger = get_logger(__name__)


def _path_or_none(path: str) -> Optional[str]:
    resolved = config.resolve(path)
    return str(resolved) if resolved else None


catalog_source: CatalogSource = LocalCatalogSource(_path_or_none(config.catalog_path) or "data/catalog.json")
assignment_store = AssignmentStore(_path_or_none(config.assignments_path))
allergen_registry = AllergenRegistry(_path_or_none(config.custom_allergens_path))


def get_catalog() -> Catalog:
    return catalog_source.load()

def get_store() -> AssignmentStore:
    return assignment_store

def get_registry() -> AllergenRegistry:
    return allergen_registry


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = str(uuid.uuid4())
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000.0
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} "
        f"{duration_ms:.1f}ms request_id={request_id}"
    )
    response.headers["X-Request-ID"] = request_id
    return response

@app.exception_handler(AssignmentNotFoundError)
async def assignment_not_found_handler(request: Request, exc: AssignmentNotFoundError):
    logger.warning(f"Assignment lookup failed: {exc}")
    return JSONResponse(
        status_code=404,
        content={
            "error_code": "ASSIGNMENT_NOT_FOUND",
            "message": str(exc),
            "assignment_id": exc.assignment_id
        }
    )

@app.exception_handler(CatalogEntityNotFoundError)
async def catalog_entity_not_found_handler(request: Request, exc: CatalogEntityNotFoundError):
    logger.warning(f"Catalog lookup failed: {exc}")
    return JSONResponse(
        status_code=404,
        content={
            "error_code": "CATALOG_ENTITY_NOT_FOUND",
            "message": str(exc),
            "entity": exc.entity,
            "entity_id": exc.entity_id
        }
    )

@app.get("/")
def read_root():
    return {"message": "Welcome to the Menu Guard API. Visit /docs for documentation."}


# --- Allergens ---

@app.get("/api/allergens", response_model=List[AllergenItem])
def list_allergens(registry: AllergenRegistry = Depends(get_registry)):
    return registry.list_allergens()

@app.post("/api/allergens/custom", response_model=AllergenItem, status_code=201)
def add_custom_allergen(request: CustomAllergenRequest, registry: AllergenRegistry = Depends(get_registry)):
    return registry.add_custom(request.name)

@app.delete("/api/allergens/custom/{name}", status_code=204)
def remove_custom_allergen(name: str, registry: AllergenRegistry = Depends(get_registry)):
    registry.remove_custom(name)


# --- Engine ---

@app.post("/api/check/ingredient", response_model=IngredientCheckResult)
def check_ingredient_endpoint(request: CheckIngredientRequest):
    return check_ingredient(request.ingredient, request.guest_allergens)

@app.post("/api/check/dish", response_model=DishCheckResult)
def check_dish_endpoint(request: CheckDishRequest):
    """
    Judge a dish for a guest, optionally with some ingredients taken off the plate.
    """
    return check_dish(request.dish, request.guest_allergens, request.excluded_ingredient_ids)

@app.post("/api/resolve", response_model=List[ResolvedDish])
def resolve_endpoint(request: ResolveRequest):
    return resolve_customized_dishes(request.dish_ids, request.recipes, request.customizations)

@app.get("/api/courses/{course_id}/check", response_model=CourseCheck)
def check_course_endpoint(course_id: int, customer_id: int, catalog: Catalog = Depends(get_catalog)):
    """
    Preview a course for a guest before any customization is recorded.
    """
    course = catalog.require_course(course_id)
    customer = catalog.require_customer(customer_id)
    return compliance_service.check_course(course, customer, catalog)


# --- Assignments ---

@app.get("/api/assignments", response_model=List[CustomerCourseAssignment])
def list_assignments(
    date: Optional[str] = None,
    status: Optional[AssignmentStatus] = None,
    store: AssignmentStore = Depends(get_store)
):
    return store.list_assignments(date=date, status=status)

@app.post("/api/assignments", response_model=CustomerCourseAssignment, status_code=201)
def create_assignment(
    request: CreateAssignmentRequest,
    store: AssignmentStore = Depends(get_store),
    catalog: Catalog = Depends(get_catalog)
):
    catalog.require_customer(request.customer_id)
    catalog.require_course(request.course_id)
    return store.create(request.customer_id, request.course_id, request.date)

@app.get("/api/assignments/{assignment_id}", response_model=CustomerCourseAssignment)
def get_assignment(assignment_id: int, store: AssignmentStore = Depends(get_store)):
    return store.get(assignment_id)

@app.delete("/api/assignments/{assignment_id}", status_code=204)
def delete_assignment(assignment_id: int, store: AssignmentStore = Depends(get_store)):
    store.delete(assignment_id)

@app.put("/api/assignments/{assignment_id}/status", response_model=CustomerCourseAssignment)
def update_status(assignment_id: int, request: StatusUpdateRequest, store: AssignmentStore = Depends(get_store)):
    return store.set_status(assignment_id, request.status)

@app.put("/api/assignments/{assignment_id}/kitchen-note", response_model=CustomerCourseAssignment)
def update_kitchen_note(assignment_id: int, request: KitchenNoteRequest, store: AssignmentStore = Depends(get_store)):
    return store.set_kitchen_note(assignment_id, request.kitchen_note)

@app.put("/api/assignments/{assignment_id}/customizations", response_model=CustomerCourseAssignment)
def upsert_customization(
    assignment_id: int,
    customization: DishCustomization,
    store: AssignmentStore = Depends(get_store)
):
    """
    Record the override for one dish. Sending a record with no action and no
    exclusions clears that dish's override.
    """
    return store.upsert_customization(assignment_id, customization)

@app.delete("/api/assignments/{assignment_id}/customizations/{dish_id}", response_model=CustomerCourseAssignment)
def delete_customization(assignment_id: int, dish_id: int, store: AssignmentStore = Depends(get_store)):
    return store.delete_customization(assignment_id, dish_id)

@app.get("/api/assignments/{assignment_id}/report", response_model=AssignmentReport)
def assignment_report(
    assignment_id: int,
    store: AssignmentStore = Depends(get_store),
    catalog: Catalog = Depends(get_catalog)
):
    return compliance_service.build_report(store.get(assignment_id), catalog)

@app.get("/api/kitchen", response_model=List[KitchenSheet])
def kitchen_view(
    date: Optional[str] = None,
    store: AssignmentStore = Depends(get_store),
    catalog: Catalog = Depends(get_catalog)
):
    assignments = store.list_assignments(status=AssignmentStatus.SHARED_WITH_KITCHEN)
    return compliance_service.kitchen_sheets(assignments, catalog, date=date)
