# quranlookup/quran_cache.py
import json
import logging
from typing import List, Optional

from pydantic import ValidationError

from .models import Ayah, Surah, SurahRef
from .storage import JSONStore, StorageError
from .utils import get_app_path

logger = logging.getLogger(__name__)


class QuranCache:
    """
    Edition-keyed cache of surah lists and per-surah ayah lists.

    Entries never expire; a refetch simply overwrites the same key. Every
    read fails closed: a broken entry is logged and reported as a miss.
    """
    CACHE_FILE_NAME = 'quran_cache.json'

    def __init__(self, store: Optional[JSONStore] = None):
        self.store = store if store is not None else JSONStore()

    @classmethod
    def on_disk(cls) -> "QuranCache":
        """Cache stored in the user's cache directory."""
        return cls(JSONStore(get_app_path('cache', cls.CACHE_FILE_NAME)))

    @staticmethod
    def surahs_key(edition: str) -> str:
        return f"surahs-{edition}"

    @staticmethod
    def ayahs_key(surah_number: int, edition: str) -> str:
        return f"surah-{surah_number}-{edition}"

    def _read_list(self, key: str) -> Optional[list]:
        try:
            payload = self.store.get_json(key)
        except (StorageError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable cache entry %s: %s", key, e)
            return None
        if payload is None:
            return None
        if not isinstance(payload, list):
            logger.warning("Ignoring cache entry %s: expected a list", key)
            return None
        return payload

    def get_surahs(self, edition: str) -> Optional[List[Surah]]:
        key = self.surahs_key(edition)
        payload = self._read_list(key)
        if payload is None:
            return None
        try:
            return [Surah.model_validate(item) for item in payload]
        except ValidationError as e:
            logger.warning("Ignoring malformed cache entry %s: %s", key, e)
            return None

    def get_ayahs(self, surah_number: int, edition: str) -> Optional[List[Ayah]]:
        key = self.ayahs_key(surah_number, edition)
        payload = self._read_list(key)
        if payload is None:
            return None
        try:
            return [Ayah.model_validate(item) for item in payload]
        except ValidationError as e:
            logger.warning("Ignoring malformed cache entry %s: %s", key, e)
            return None

    def save_surahs(self, edition: str, surahs: List[Surah]):
        self.store.set_json(self.surahs_key(edition), [s.to_json_dict() for s in surahs])

    def save_ayahs(self, surah_number: int, edition: str, ayahs: List[Ayah]):
        self.store.set_json(self.ayahs_key(surah_number, edition), [a.to_json_dict() for a in ayahs])

    def find_ayah(self, surah_number: int, ayah_number: int, edition: str) -> Optional[Ayah]:
        """Serve one ayah from cache, or None unless both surah metadata and its ayahs are cached."""
        surah = next(
            (s for s in self.get_surahs(edition) or [] if s.number == surah_number),
            None,
        )
        if surah is None:
            return None

        ayahs = self.get_ayahs(surah_number, edition)
        if not ayahs:
            return None

        ayah = next((a for a in ayahs if a.number_in_surah == ayah_number), None)
        if ayah is None:
            return None

        logger.debug("Cache hit for %s:%s (%s)", surah_number, ayah_number, edition)
        surah_ref = SurahRef.model_validate(surah.to_json_dict())
        return ayah.model_copy(update={"surah": surah_ref})

    def has_ayahs(self, surah_number: int, edition: str) -> bool:
        return bool(self.get_ayahs(surah_number, edition))
