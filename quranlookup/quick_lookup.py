# quranlookup/quick_lookup.py
import logging
import threading
import concurrent.futures
from typing import Callable, List, Optional

from pydantic import BaseModel

from .errors import ReferenceValidationError
from .models import Ayah, AyahLookup, LookupStatus, Surah
from .reference_parser import Reference, parse_reference, validate_reference

logger = logging.getLogger(__name__)

AYAH_NOT_FOUND = "Ayah not found"
UNABLE_TO_LOAD = "Unable to load ayah"


class QuickLookupState(BaseModel):
    label: Optional[str] = None         # normalized "s:a" being looked up
    reference: Optional[str] = None     # set only once validation passed
    ayah: Optional[Ayah] = None
    error: Optional[str] = None
    loading: bool = False

    @property
    def active(self) -> bool:
        return self.label is not None


class QuickLookup:
    """
    Jump-to-ayah lookup driven by the search text.

    Every fetch runs on a worker thread and is tagged with a generation
    number. When the search text changes before a fetch resolves, the
    generation moves on and the late result is dropped instead of replacing
    newer state.
    """

    def __init__(self, client, edition_getter: Callable[[], str],
                 executor: Optional[concurrent.futures.Executor] = None):
        self.client = client
        self.edition_getter = edition_getter
        self.executor = executor or concurrent.futures.ThreadPoolExecutor(max_workers=2)
        self._lock = threading.RLock()
        self._generation = 0
        self._future: Optional[concurrent.futures.Future] = None
        self._state = QuickLookupState()

    def state(self) -> QuickLookupState:
        with self._lock:
            return self._state.model_copy()

    def update(self, search_text: str, surahs: Optional[List[Surah]] = None) -> QuickLookupState:
        """React to new search text and return the resulting state."""
        reference = parse_reference(search_text)

        error = None
        if reference is not None:
            try:
                validate_reference(reference, surahs)
            except ReferenceValidationError as e:
                error = str(e)

        with self._lock:
            label = str(reference) if reference is not None else None

            # Same valid reference still loading or loaded: keep the fetch
            if (error is None and label is not None and self._state.reference == label
                    and (self._state.loading or self._state.ayah)):
                return self._state.model_copy()

            self._generation += 1
            generation = self._generation

            if reference is None:
                self._state = QuickLookupState()
                return self._state.model_copy()

            if error is not None:
                self._state = QuickLookupState(label=label, error=error)
                return self._state.model_copy()

            self._state = QuickLookupState(label=label, reference=label, loading=True)
            self._future = self.executor.submit(self._fetch, reference, generation)
            return self._state.model_copy()

    def _fetch(self, reference: Reference, generation: int):
        try:
            result = self.client.lookup_ayah(reference, self.edition_getter())
        except Exception:
            logger.exception("Quick lookup failed for %s", reference)
            result = AyahLookup(status=LookupStatus.FAILED)
        self._apply(result, generation)

    def _apply(self, result: AyahLookup, generation: int):
        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding stale lookup result (generation %s)", generation)
                return
            if result.found:
                self._state = self._state.model_copy(update={"ayah": result.ayah, "loading": False})
            elif result.status is LookupStatus.NOT_FOUND:
                self._state = self._state.model_copy(update={"error": AYAH_NOT_FOUND, "loading": False})
            else:
                self._state = self._state.model_copy(update={"error": UNABLE_TO_LOAD, "loading": False})

    def wait(self, timeout: Optional[float] = None) -> QuickLookupState:
        """Block until the latest fetch (if any) has finished."""
        future = self._future
        if future is not None:
            try:
                future.result(timeout=timeout)
            except concurrent.futures.TimeoutError:
                pass
        return self.state()

    def close(self):
        self.executor.shutdown(wait=False)
