"""Ingredient enrichment - batched recipe lookups behind a shared cache."""

import logging
import threading
from typing import Dict, Iterable, List, Optional, Protocol

from app.exceptions import DietAuditError
from domain.schemas import EnrichedDish

logger = logging.getLogger("dietaudit.enrichment")


class RecipeLookup(Protocol):
    def batch_search_recipes(self, names: List[str], timeout: Optional[float] = None) -> List[EnrichedDish]:
        ...


def cache_key(name: str) -> str:
    return (name or "").strip().lower()


class EnrichmentCache:
    """
    Process-lifetime map of normalized dish name -> ingredient list.

    No eviction. Access is guarded by a lock so one instance can be shared
    by concurrent audits; tests create their own instance.
    """

    def __init__(self):
        self._data: Dict[str, List[str]] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> Optional[List[str]]:
        with self._lock:
            found = self._data.get(cache_key(name))
            return list(found) if found is not None else None

    def put(self, name: str, ingredients: Iterable[str]):
        with self._lock:
            self._data[cache_key(name)] = list(ingredients)

    def clear(self):
        with self._lock:
            self._data.clear()

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return cache_key(name) in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class EnrichmentService:
    """Looks up likely ingredients for dish names; an enrichment, never a precondition."""

    def __init__(self, lookup: RecipeLookup, cache: EnrichmentCache, timeout: float = 5.0):
        self.lookup = lookup
        self.cache = cache
        self.timeout = timeout

    def enrich(self, names: Iterable[str]) -> Dict[str, List[str]]:
        """
        Map requested dish names to ingredient lists.

        Cache hits are served first, every miss goes out in ONE batch call.
        Names the lookup does not know are absent from the result. Upstream
        failures are logged and yield no ingredients for the misses.
        """
        result: Dict[str, List[str]] = {}
        misses: List[str] = []
        seen = set()

        for name in names:
            key = cache_key(name)
            if not key or key in seen:
                continue
            seen.add(key)
            cached = self.cache.get(name)
            if cached is not None:
                result[name] = cached
            else:
                misses.append(name)

        if result:
            logger.info(f"Cache hit for {len(result)} dishes")
        if not misses:
            return result

        try:
            found = self.lookup.batch_search_recipes(misses, timeout=self.timeout)
        except DietAuditError as exc:
            logger.warning(f"Recipe enrichment failed, continuing without ingredients: {exc}")
            return result

        requested = {cache_key(name): name for name in misses}
        for dish in found:
            if not dish.ingredients:
                continue
            key = cache_key(dish.name)
            self.cache.put(key, dish.ingredients)
            result[requested.get(key, dish.name)] = list(dish.ingredients)

        logger.info(f"Enriched {len(result)} / {len(seen)} dishes (cache + API)")
        return result

    def enrich_dishes(self, names: List[str]) -> List[EnrichedDish]:
        """EnrichedDish per name, in input order, with empty lists where nothing is known"""
        by_key = {cache_key(name): found for name, found in self.enrich(names).items()}
        return [EnrichedDish(name=name, ingredients=by_key.get(cache_key(name), [])) for name in names]
