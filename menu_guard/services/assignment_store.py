import json
import os
import threading
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from menu_guard.models import AssignmentStatus, CustomerCourseAssignment, DishCustomization
from menu_guard.services.customization_editor import (
    delete_customization,
    prune_empty_customizations,
    upsert_customization,
)
from menu_guard.core.logging_config import get_logger

logger = get_logger(__name__)


class AssignmentNotFoundError(Exception):
    def __init__(self, assignment_id: int):
        super().__init__(f"Assignment {assignment_id} not found")
        self.assignment_id = assignment_id


class AssignmentStore:
    """Assignment records behind a load/save contract.

    Records live in memory and are written through to a JSON file when a
    path is given. Each write replaces the whole record (last writer wins),
    and every customization list is stored in canonical form.
    """

    def __init__(self, file_path: Optional[str] = None):
        self.file_path = file_path
        self._lock = threading.Lock()
        self._assignments: Dict[int, CustomerCourseAssignment] = {
            a.id: a for a in self._load()
        }

    def list_assignments(
        self,
        date: Optional[str] = None,
        status: Optional[AssignmentStatus] = None
    ) -> List[CustomerCourseAssignment]:
        with self._lock:
            records = list(self._assignments.values())
        return [
            a.model_copy(deep=True) for a in records
            if (not date or a.date == date) and (not status or a.status == status)
        ]

    def get(self, assignment_id: int) -> CustomerCourseAssignment:
        with self._lock:
            return self._require(assignment_id).model_copy(deep=True)

    def create(self, customer_id: int, course_id: int, date: str) -> CustomerCourseAssignment:
        with self._lock:
            new_id = max(self._assignments, default=0) + 1
            assignment = CustomerCourseAssignment(
                id=new_id,
                customer_id=customer_id,
                course_id=course_id,
                date=date
            )
            self._commit({**self._assignments, new_id: assignment})
        logger.info(f"Created assignment {new_id} (customer={customer_id}, course={course_id}, date={date})")
        return assignment.model_copy(deep=True)

    def delete(self, assignment_id: int) -> None:
        with self._lock:
            self._require(assignment_id)
            self._commit({k: v for k, v in self._assignments.items() if k != assignment_id})
        logger.info(f"Deleted assignment {assignment_id}")

    def set_status(self, assignment_id: int, status: AssignmentStatus) -> CustomerCourseAssignment:
        return self._update(assignment_id, status=AssignmentStatus(status))

    def set_kitchen_note(self, assignment_id: int, kitchen_note: str) -> CustomerCourseAssignment:
        return self._update(assignment_id, kitchen_note=kitchen_note)

    def upsert_customization(
        self,
        assignment_id: int,
        customization: DishCustomization
    ) -> CustomerCourseAssignment:
        with self._lock:
            current = self._require(assignment_id)
            customizations = upsert_customization(current.customizations, customization)
            return self._replace(current, customizations=customizations)

    def delete_customization(self, assignment_id: int, original_dish_id: int) -> CustomerCourseAssignment:
        with self._lock:
            current = self._require(assignment_id)
            customizations = delete_customization(current.customizations, original_dish_id)
            return self._replace(current, customizations=customizations)

    def _update(self, assignment_id: int, **changes: Any) -> CustomerCourseAssignment:
        with self._lock:
            return self._replace(self._require(assignment_id), **changes)

    def _replace(self, current: CustomerCourseAssignment, **changes: Any) -> CustomerCourseAssignment:
        # Caller holds the lock.
        updated = current.model_copy(update=changes, deep=True)
        self._commit({**self._assignments, updated.id: updated})
        return updated.model_copy(deep=True)

    def _commit(self, assignments: Dict[int, CustomerCourseAssignment]) -> None:
        # Memory only changes once the file write has succeeded.
        self._save(assignments)
        self._assignments = assignments

    def _require(self, assignment_id: int) -> CustomerCourseAssignment:
        assignment = self._assignments.get(assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(assignment_id)
        return assignment

    def _load(self) -> List[CustomerCourseAssignment]:
        if not self.file_path:
            return []
        if not os.path.exists(self.file_path):
            logger.info(f"{self.file_path} not found; starting with no assignments.")
            return []
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError:
            logger.error(f"Error decoding {self.file_path}")
            return []
        if not isinstance(raw, list):
            logger.error(f"Expected a list of assignments in {self.file_path}")
            return []

        assignments = []
        for item in raw:
            try:
                assignment = CustomerCourseAssignment.model_validate(item)
            except ValidationError as e:
                logger.warning(f"Skipping invalid assignment record in {self.file_path}: {e}")
                continue
            # Older files may predate pruning on write.
            assignment.customizations = prune_empty_customizations(assignment.customizations)
            assignments.append(assignment)
        return assignments

    def _save(self, assignments: Dict[int, CustomerCourseAssignment]) -> None:
        if not self.file_path:
            return
        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        payload = [a.model_dump(mode="json") for a in assignments.values()]
        tmp_path = f"{self.file_path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.file_path)
