import json
import os
import threading
from typing import List, Optional
from fastapi import HTTPException
from menu_guard.models import AllergenCategory, AllergenItem
from menu_guard.core.rules import MANDATORY_ALLERGENS, RECOMMENDED_ALLERGENS, STANDARD_ALLERGENS
from menu_guard.core.logging_config import get_logger

logger = get_logger(__name__)

class AllergenRegistry:
    """The 28 standard allergens plus the custom ones staff have added."""

    def __init__(self, file_path: Optional[str] = None):
        self.file_path = file_path
        self._lock = threading.Lock()
        self._custom: List[str] = self._load()

    def list_allergens(self) -> List[AllergenItem]:
        items = [AllergenItem(name=n, category=AllergenCategory.MANDATORY) for n in MANDATORY_ALLERGENS]
        items += [AllergenItem(name=n, category=AllergenCategory.RECOMMENDED) for n in RECOMMENDED_ALLERGENS]
        with self._lock:
            items += [AllergenItem(name=n, category=AllergenCategory.CUSTOM) for n in self._custom]
        return items

    def custom_allergens(self) -> List[str]:
        with self._lock:
            return list(self._custom)

    def is_known(self, name: str) -> bool:
        with self._lock:
            return name in STANDARD_ALLERGENS or name in self._custom

    def add_custom(self, name: str) -> AllergenItem:
        """
        Registers a custom allergen.
        Raises HTTPException(400) for a blank name and 409 for a duplicate.
        """
        trimmed = (name or "").strip()
        if not trimmed:
            raise HTTPException(
                status_code=400,
                detail={
                    "error_code": "EMPTY_ALLERGEN_NAME",
                    "message": "An allergen name is required.",
                    "suggestion": "Enter the allergen name as it should appear to staff."
                }
            )

        with self._lock:
            if trimmed in STANDARD_ALLERGENS or trimmed in self._custom:
                raise HTTPException(
                    status_code=409,
                    detail={
                        "error_code": "DUPLICATE_ALLERGEN",
                        "message": f"An allergen named '{trimmed}' is already registered.",
                        "suggestion": "Use the existing allergen instead of adding it again."
                    }
                )
            self._commit(self._custom + [trimmed])

        logger.info(f"Added custom allergen '{trimmed}'")
        return AllergenItem(name=trimmed, category=AllergenCategory.CUSTOM)

    def remove_custom(self, name: str) -> None:
        with self._lock:
            if name not in self._custom:
                raise HTTPException(
                    status_code=404,
                    detail={
                        "error_code": "ALLERGEN_NOT_FOUND",
                        "message": f"No custom allergen named '{name}'.",
                        "suggestion": "Standard allergens cannot be removed."
                    }
                )
            self._commit([n for n in self._custom if n != name])
        logger.info(f"Removed custom allergen '{name}'")

    def _commit(self, names: List[str]) -> None:
        self._save(names)
        self._custom = names

    def _load(self) -> List[str]:
        if not self.file_path or not os.path.exists(self.file_path):
            return []
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.error(f"Error decoding {self.file_path}")
            return []
        if not isinstance(data, list):
            return []
        names: List[str] = []
        for item in data:
            if isinstance(item, str) and item.strip() and item.strip() not in names:
                names.append(item.strip())
        return names

    def _save(self, names: List[str]) -> None:
        if not self.file_path:
            return
        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.file_path, "w", encoding="utf-8") as f:
            json.dump(names, f, ensure_ascii=False, indent=2)
