"""Static category and style lists loaded once at startup."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from pydantic import ValidationError

from .models import Category, Style

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceData:
    category_list: List[Category] = field(default_factory=list)
    style_map: Dict[str, List[Style]] = field(default_factory=dict)

    def categories(self) -> List[Category]:
        return list(self.category_list)

    def styles_by_category(self) -> Dict[str, List[Style]]:
        return {key: list(value) for key, value in self.style_map.items()}

    def styles(self, category: str) -> List[Style]:
        return list(self.style_map.get(category, []))


def load_reference_data(path: str | Path) -> ReferenceData:
    file_path = Path(path)
    if not file_path.exists():
        logger.warning("Reference data file %s is missing; categories and styles will be empty", file_path)
        return ReferenceData()
    with file_path.open("r", encoding="utf-8") as fh:
        try:
            raw = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Reference data file {file_path} is not valid JSON") from exc
    try:
        categories = [Category(**item) for item in raw.get("categories", [])]
        styles = {
            str(category): [Style(**item) for item in items]
            for category, items in raw.get("styles", {}).items()
        }
    except (AttributeError, TypeError, ValidationError) as exc:
        raise ValueError(f"Reference data file {file_path} has an unexpected shape") from exc
    logger.info("Loaded %s categories and %s style groups from %s", len(categories), len(styles), file_path)
    return ReferenceData(category_list=categories, style_map=styles)
