# quranlookup/favorites_store.py
import json
import logging
import concurrent.futures
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError

from .errors import FavoritesStoreError
from .models import FavoriteAyah
from .storage import JSONStore, StorageError
from .utils import get_app_path

logger = logging.getLogger(__name__)

FAVORITES_STORAGE_KEY = "favorites"

Location = Tuple[int, int]
ArabicFetcher = Callable[[int, int], Optional[str]]


def backfill_arabic(favorites: List[FavoriteAyah],
                    fetched: Dict[Location, Optional[str]]) -> Tuple[List[FavoriteAyah], int]:
    """
    Fill in missing Arabic text from ``fetched`` (keyed by surah, ayah).

    Returns the repaired list and how many entries were repaired. Entries
    whose fetch came back empty are left untouched.
    """
    repaired = 0
    result = []
    for favorite in favorites:
        arabic_text = fetched.get((favorite.surah_number, favorite.ayah_number))
        if not favorite.arabic_text and arabic_text:
            favorite = favorite.model_copy(update={"arabic_text": arabic_text})
            repaired += 1
        result.append(favorite)
    return result, repaired


class FavoritesStore:
    """
    Saved ayahs, persisted as one JSON list under the ``favorites`` key.

    Favorites are identified by location only. Adding the same ayah twice
    keeps two entries, and removing an ayah drops every entry at that
    location.
    """
    STORAGE_FILE_NAME = 'favorites.json'
    MAX_WORKERS = 5

    def __init__(self, storage: Optional[JSONStore] = None, arabic_fetcher: Optional[ArabicFetcher] = None):
        self.storage = storage if storage is not None else JSONStore()
        self.arabic_fetcher = arabic_fetcher

    @classmethod
    def on_disk(cls, arabic_fetcher: Optional[ArabicFetcher] = None) -> "FavoritesStore":
        return cls(JSONStore(get_app_path('data', cls.STORAGE_FILE_NAME)), arabic_fetcher)

    def _read(self) -> List[FavoriteAyah]:
        try:
            raw = self.storage.get_json(FAVORITES_STORAGE_KEY, default=[])
        except (StorageError, json.JSONDecodeError) as e:
            logger.error("Favorites storage is unreadable, starting empty: %s", e)
            return []
        if not isinstance(raw, list):
            logger.error("Favorites storage does not hold a list, starting empty")
            return []

        favorites = []
        for item in raw:
            try:
                favorites.append(FavoriteAyah.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping invalid favorite %r: %s", item, e)
        return favorites

    def _write(self, favorites: List[FavoriteAyah]):
        try:
            self.storage.set_json(FAVORITES_STORAGE_KEY, [f.to_json_dict() for f in favorites])
        except StorageError as e:
            raise FavoritesStoreError(f"Could not save favorites: {e}") from e

    def save_all(self, favorites: List[FavoriteAyah]):
        self._write(favorites)

    def add(self, favorite: FavoriteAyah):
        self._write(self._read() + [favorite])

    def remove(self, favorite: FavoriteAyah):
        self._write([f for f in self._read() if not f.same_location(favorite)])

    def list(self) -> List[FavoriteAyah]:
        return self.migrate(self._read())

    def _fetch_missing_arabic(self, favorites: List[FavoriteAyah]) -> Dict[Location, Optional[str]]:
        locations = sorted({(f.surah_number, f.ayah_number) for f in favorites if not f.arabic_text})
        if not locations or self.arabic_fetcher is None:
            return {}

        fetched = {}
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.MAX_WORKERS) as executor:
            futures = {executor.submit(self.arabic_fetcher, *loc): loc for loc in locations}
            for future in concurrent.futures.as_completed(futures):
                location = futures[future]
                try:
                    fetched[location] = future.result()
                except Exception as e:
                    logger.warning("Arabic backfill failed for %s:%s: %s", *location, e)
                    fetched[location] = None
        return fetched

    def migrate(self, favorites: List[FavoriteAyah]) -> List[FavoriteAyah]:
        """Backfill Arabic text for favorites saved without it, persisting once."""
        fetched = self._fetch_missing_arabic(favorites)
        if not fetched:
            return favorites

        migrated, repaired = backfill_arabic(favorites, fetched)
        if repaired:
            logger.info("Backfilled Arabic text for %d favorite(s)", repaired)
            try:
                self._write(migrated)
            except FavoritesStoreError as e:
                # Still show the repaired list; the next list() tries again
                logger.error("%s", e)
        return migrated
