from abc import ABC, abstractmethod
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from menu_guard.models import Course, Customer, Recipe


class CatalogEntityNotFoundError(Exception):
    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} {entity_id} not found in catalog")
        self.entity = entity
        self.entity_id = entity_id


class Catalog(BaseModel):
    """Read-only snapshot of recipes, courses and customers for one request."""
    model_config = ConfigDict(frozen=True)

    recipes: List[Recipe] = Field(default_factory=list)
    courses: List[Course] = Field(default_factory=list)
    customers: List[Customer] = Field(default_factory=list)

    def recipe(self, recipe_id: int) -> Optional[Recipe]:
        return next((r for r in self.recipes if r.id == recipe_id), None)

    def course(self, course_id: int) -> Optional[Course]:
        return next((c for c in self.courses if c.id == course_id), None)

    def customer(self, customer_id: int) -> Optional[Customer]:
        return next((c for c in self.customers if c.id == customer_id), None)

    def require_course(self, course_id: int) -> Course:
        course = self.course(course_id)
        if course is None:
            raise CatalogEntityNotFoundError("Course", course_id)
        return course

    def require_customer(self, customer_id: int) -> Customer:
        customer = self.customer(customer_id)
        if customer is None:
            raise CatalogEntityNotFoundError("Customer", customer_id)
        return customer


class CatalogSource(ABC):
    name: str = "Unknown"

    @abstractmethod
    def load(self) -> Catalog:
        """
        Load the current catalog snapshot.
        Must return a `Catalog`, empty when nothing is available.
        """
        pass
