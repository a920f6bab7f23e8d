import json
import os
from typing import Any, Dict
from pydantic import ValidationError
from menu_guard.services.sources.base import Catalog, CatalogSource
from menu_guard.core.logging_config import get_logger

logger = get_logger(__name__)

class LocalCatalogSource(CatalogSource):
    name = "Local"

    def __init__(self, file_path: str = "data/catalog.json"):
        self.file_path = file_path

    def load(self) -> Catalog:
        """
        Reads the JSON catalog file on every call so edits made by the
        catalog screens are picked up without a restart.
        """
        data = self._load_data(self.file_path)
        if not data:
            return Catalog()
        try:
            catalog = Catalog.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid catalog in {self.file_path}: {e}")
            return Catalog()

        logger.debug(
            f"Loaded catalog: {len(catalog.recipes)} recipes, "
            f"{len(catalog.courses)} courses, {len(catalog.customers)} customers"
        )
        return catalog

    def _load_data(self, file_path: str) -> Dict[str, Any]:
        if not os.path.exists(file_path):
            logger.warning(f"{file_path} not found.")
            return {}
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.error(f"Error decoding {file_path}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Expected an object at the top of {file_path}")
            return {}
        return data
