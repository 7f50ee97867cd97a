"""
Medicine repository: load the static catalog from data/catalog/medicines.json.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from medquote.utils.config import catalog_path
from medquote.utils.logger import get_logger

logger = get_logger()


class MedicineRepository:
    """
    Load and look up catalog records.
    Records keep the catalog's camelCase keys (activeIngredient, packaging, ...).
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or catalog_path()
        self._medicines: list[dict[str, Any]] | None = None

    def _load(self) -> list[dict[str, Any]]:
        if self._medicines is not None:
            return self._medicines
        p = self._path
        if not p.is_file():
            logger.warning("Catalog file not found: %s", p)
            self._medicines = []
            return self._medicines
        try:
            with open(p, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._medicines = [m for m in data if isinstance(m, dict) and isinstance(m.get("id"), int)] if isinstance(data, list) else []
            return self._medicines
        except Exception as e:
            logger.exception("Failed to load catalog from %s: %s", p, e)
            self._medicines = []
            return self._medicines

    def all(self) -> list[dict[str, Any]]:
        return list(self._load())

    def get(self, medicine_id: int) -> dict[str, Any] | None:
        for m in self._load():
            if m.get("id") == medicine_id:
                return m
        return None

    def search(self, query: str, max_results: int = 20) -> list[dict[str, Any]]:
        """
        Case-insensitive match on name, active ingredient and manufacturer.
        An empty query returns the first max_results records.
        """
        q = (query or "").strip().lower()
        out: list[dict[str, Any]] = []
        for m in self._load():
            if q:
                haystack = " ".join(
                    str(m.get(k) or "") for k in ("name", "activeIngredient", "manufacturer")
                ).lower()
                if q not in haystack:
                    continue
            out.append(m)
            if len(out) >= max_results:
                break
        return out

    def similar(self, medicine: dict[str, Any], max_results: int = 3) -> list[dict[str, Any]]:
        """Other medicines sharing the active ingredient."""
        ingredient = (medicine.get("activeIngredient") or "").strip().lower()
        if not ingredient:
            return []
        out = [
            m
            for m in self._load()
            if m.get("id") != medicine.get("id")
            and (m.get("activeIngredient") or "").strip().lower() == ingredient
        ]
        return out[:max_results]
