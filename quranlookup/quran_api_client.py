# quranlookup/quran_api_client.py
import json
import logging
import concurrent.futures
from typing import Dict, Iterable, List, Optional, Union

import requests
import tqdm
from colorama import Fore
from pydantic import ValidationError

from .errors import AyahNotFoundError, QuranAPIError
from .models import Ayah, AyahLookup, Edition, LookupStatus, Surah
from .quran_cache import QuranCache
from .reference_parser import TOTAL_SURAHS, Reference, parse_reference
from .version import VERSION

logger = logging.getLogger(__name__)

BASE_URL = "https://api.alquran.cloud/v1"
ARABIC_EDITION = "quran-uthmani"


def merge_editions(translation_ayahs: List[Ayah], arabic_ayahs: Iterable[Ayah]) -> List[Ayah]:
    """Attach Arabic text to each translation ayah, joined on number in surah."""
    arabic_by_number = {ayah.number_in_surah: ayah.text for ayah in arabic_ayahs}
    return [
        ayah.model_copy(update={"arabic_text": arabic_by_number.get(ayah.number_in_surah)})
        for ayah in translation_ayahs
    ]


def split_editions(editions: list, *identifiers: str) -> Dict[str, dict]:
    """Index a multi-edition payload by edition identifier."""
    found = {}
    for entry in editions:
        identifier = (entry.get("edition") or {}).get("identifier")
        if identifier in identifiers and identifier not in found:
            found[identifier] = entry
    return found


class QuranAPIClient:
    TIMEOUT = 10

    def __init__(self, cache: Optional[QuranCache] = None, session: Optional[requests.Session] = None,
                 base_url: str = BASE_URL, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or self.TIMEOUT
        self.cache = cache if cache is not None else QuranCache()
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": f"QuranLookup/{VERSION}",
            "Content-Type": "application/json",
        })

    def _get(self, path: str, params: Optional[dict] = None):
        """GET ``path`` and return the envelope's ``data`` payload."""
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("GET %s", url)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise QuranAPIError(f"Request failed: {e}")
        return self._handle_response(response)

    def _handle_response(self, response: requests.Response):
        """Handle API response and return the unwrapped data"""
        if response.status_code == 404:
            raise AyahNotFoundError(f"Not found: {response.url}", status_code=404)
        try:
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            raise QuranAPIError(f"Request failed: {e}", status_code=response.status_code)
        except (json.JSONDecodeError, ValueError) as e:
            raise QuranAPIError(f"Invalid JSON response: {e}", status_code=response.status_code)

        if not isinstance(payload, dict) or "data" not in payload:
            raise QuranAPIError("Response is missing the data envelope", status_code=response.status_code)
        return payload["data"]

    def _fetch_edition_ayahs(self, path: str, edition: str) -> List[Ayah]:
        """Fetch ``path`` for the user's edition plus Arabic, and merge the two."""
        data = self._get(f"{path}/editions/{edition},{ARABIC_EDITION}")
        if not isinstance(data, list):
            raise QuranAPIError("Expected a list of editions")

        editions = split_editions(data, edition, ARABIC_EDITION)
        translation = editions.get(edition)
        if translation is None:
            raise AyahNotFoundError(f"Edition {edition} missing from response")
        arabic = editions.get(ARABIC_EDITION)

        # Surah responses nest the ayahs; ayah responses are the ayah itself
        if "ayahs" in translation:
            translation_ayahs = [Ayah.model_validate(a) for a in translation["ayahs"]]
            arabic_ayahs = [Ayah.model_validate(a) for a in (arabic or {}).get("ayahs", [])]
        else:
            translation_ayahs = [Ayah.model_validate(translation)]
            arabic_ayahs = [Ayah.model_validate(arabic)] if arabic else []
        return merge_editions(translation_ayahs, arabic_ayahs)

    def get_surahs(self) -> List[Surah]:
        """All 114 surahs, or an empty list if they could not be loaded."""
        try:
            data = self._get("surah")
            return [Surah.model_validate(s) for s in data]
        except (QuranAPIError, ValidationError, TypeError) as e:
            logger.error("Could not load surah list: %s", e)
            return []

    def get_ayahs(self, surah_number: int, edition: str) -> List[Ayah]:
        """Every ayah of one surah in ``edition``, with Arabic text attached."""
        try:
            return self._fetch_edition_ayahs(f"surah/{surah_number}", edition)
        except AyahNotFoundError as e:
            logger.warning("No ayahs for surah %s in %s: %s", surah_number, edition, e)
            return []
        except (QuranAPIError, ValidationError, TypeError, AttributeError) as e:
            logger.error("Could not load ayahs for surah %s: %s", surah_number, e)
            return []

    def lookup_ayah(self, reference: Union[str, Reference], edition: str) -> AyahLookup:
        """Find one ayah, preferring the cache over the network."""
        parsed = reference if isinstance(reference, Reference) else parse_reference(str(reference))

        if parsed is not None:
            cached = self.cache.find_ayah(parsed.surah, parsed.ayah, edition)
            if cached is not None:
                return AyahLookup(status=LookupStatus.FOUND, ayah=cached)
            query = str(parsed)
        else:
            # Let the API interpret anything we could not parse ourselves
            query = str(reference).strip()

        try:
            ayahs = self._fetch_edition_ayahs(f"ayah/{query}", edition)
        except AyahNotFoundError as e:
            logger.info("Ayah %s not found: %s", query, e)
            return AyahLookup(status=LookupStatus.NOT_FOUND)
        except (QuranAPIError, ValidationError, TypeError, AttributeError) as e:
            logger.error("Could not load ayah %s: %s", query, e)
            return AyahLookup(status=LookupStatus.FAILED)

        if not ayahs:
            return AyahLookup(status=LookupStatus.NOT_FOUND)
        return AyahLookup(status=LookupStatus.FOUND, ayah=ayahs[0])

    def get_ayah_by_reference(self, reference: Union[str, Reference], edition: str) -> Optional[Ayah]:
        return self.lookup_ayah(reference, edition).ayah

    def get_arabic_ayah_text(self, surah_number: int, ayah_number: int) -> Optional[str]:
        """Arabic text of one ayah, used to repair old favorites."""
        try:
            data = self._get(f"ayah/{surah_number}:{ayah_number}/{ARABIC_EDITION}")
        except QuranAPIError as e:
            logger.warning("Could not fetch Arabic text for %s:%s: %s", surah_number, ayah_number, e)
            return None
        if not isinstance(data, dict):
            return None
        return data.get("text") or None

    def get_editions(self) -> List[Edition]:
        """Text translations the API offers, for the edition picker."""
        try:
            data = self._get("edition", params={"format": "text", "type": "translation"})
            return [Edition.model_validate(e) for e in data]
        except (QuranAPIError, ValidationError, TypeError) as e:
            logger.error("Could not load editions: %s", e)
            return []

    def _download_single_surah(self, surah_number: int, edition: str) -> bool:
        ayahs = self.get_ayahs(surah_number, edition)
        if not ayahs:
            return False
        self.cache.save_ayahs(surah_number, edition, ayahs)
        return True

    def warm_cache(self, edition: str, surah_numbers: Optional[Iterable[int]] = None,
                   max_workers: int = 5, progress: bool = True) -> set:
        """
        Download ayah lists into the cache so later lookups skip the network.

        Failed surahs are retried once, one at a time. Returns the surah
        numbers that still failed.
        """
        surahs = self.get_surahs()
        if surahs:
            self.cache.save_surahs(edition, surahs)

        wanted = set(surah_numbers) if surah_numbers is not None else set(range(1, TOTAL_SURAHS + 1))
        missing = {n for n in wanted if not self.cache.has_ayahs(n, edition)}
        if not missing:
            return set()

        failed = set()
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(self._download_single_surah, n, edition): n for n in missing}
            with tqdm.tqdm(total=len(missing), desc=Fore.RED + "Progress" + Fore.RESET,
                           unit="surah", colour='red', disable=not progress) as pbar:
                for future in concurrent.futures.as_completed(futures):
                    if not future.result():
                        failed.add(futures[future])
                    pbar.update(1)

        # Retry failed downloads
        still_failed = set()
        for surah_number in sorted(failed):
            if not self._download_single_surah(surah_number, edition):
                still_failed.add(surah_number)
        if still_failed:
            logger.warning("Could not cache surahs: %s", sorted(still_failed))
        return still_failed
