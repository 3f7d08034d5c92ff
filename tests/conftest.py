import threading

import pytest
import requests

from quranlookup.quran_api_client import ARABIC_EDITION, BASE_URL, QuranAPIClient
from quranlookup.quran_cache import QuranCache

EDITION = "en.asad"

SURAHS = [
    {"number": 1, "name": "سُورَةُ ٱلْفَاتِحَةِ", "englishName": "Al-Faatiha",
     "englishNameTranslation": "The Opening", "numberOfAyahs": 7, "revelationType": "Meccan"},
    {"number": 2, "name": "سُورَةُ البَقَرَةِ", "englishName": "Al-Baqara",
     "englishNameTranslation": "The Cow", "numberOfAyahs": 286, "revelationType": "Medinan"},
    {"number": 12, "name": "سُورَةُ يُوسُفَ", "englishName": "Yusuf",
     "englishNameTranslation": "Joseph", "numberOfAyahs": 111, "revelationType": "Meccan"},
    {"number": 112, "name": "سُورَةُ الإِخۡلَاصِ", "englishName": "Al-Ikhlaas",
     "englishNameTranslation": "Sincerity", "numberOfAyahs": 4, "revelationType": "Meccan"},
]


def ayah_payload(number_in_surah, text, number=None, sajda=False, surah=None, edition=None):
    payload = {
        "number": number or number_in_surah,
        "text": text,
        "numberInSurah": number_in_surah,
        "juz": 1,
        "manzil": 1,
        "page": 1,
        "ruku": 1,
        "hizbQuarter": 1,
        "sajda": sajda,
    }
    if surah is not None:
        payload["surah"] = surah
    if edition is not None:
        payload["edition"] = {"identifier": edition, "language": edition.split(".")[0]}
    return payload


def surah_editions_payload(surah_number, translation_texts, arabic_texts=None, edition=EDITION):
    """Body of GET /surah/{n}/editions/{edition},quran-uthmani"""
    surah = SURAHS_BY_NUMBER[surah_number]
    blocks = [dict(surah, edition={"identifier": edition},
                   ayahs=[ayah_payload(i, t) for i, t in enumerate(translation_texts, 1)])]
    if arabic_texts is not None:
        blocks.append(dict(surah, edition={"identifier": ARABIC_EDITION},
                           ayahs=[ayah_payload(i, t) for i, t in enumerate(arabic_texts, 1)]))
    return envelope(blocks)


def ayah_editions_payload(surah_number, ayah_number, text, arabic_text=None, edition=EDITION):
    """Body of GET /ayah/{ref}/editions/{edition},quran-uthmani"""
    surah = SURAHS_BY_NUMBER[surah_number]
    blocks = [ayah_payload(ayah_number, text, surah=surah, edition=edition)]
    if arabic_text is not None:
        blocks.append(ayah_payload(ayah_number, arabic_text, surah=surah, edition=ARABIC_EDITION))
    return envelope(blocks)


def envelope(data, code=200):
    return {"code": code, "status": "OK", "data": data}


SURAHS_BY_NUMBER = {s["number"]: s for s in SURAHS}


class FakeResponse:
    def __init__(self, url, status_code=200, payload=None, text=None):
        self.url = url
        self.status_code = status_code
        self._payload = payload
        self._text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error for url: {self.url}")

    def json(self):
        if self._text is not None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; routes are keyed by path below BASE_URL."""

    def __init__(self):
        self.headers = {}
        self.routes = {}
        self.calls = []
        self._lock = threading.Lock()

    def add(self, path, payload=None, status_code=200, text=None, exc=None):
        self.routes[path] = (payload, status_code, text, exc)

    def get(self, url, params=None, timeout=None):
        path = url[len(BASE_URL) + 1:] if url.startswith(BASE_URL) else url
        with self._lock:
            self.calls.append(path)
        if path not in self.routes:
            return FakeResponse(url, 404, envelope("Not found", code=404))
        payload, status_code, text, exc = self.routes[path]
        if exc is not None:
            raise exc
        return FakeResponse(url, status_code, payload, text)


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def cache():
    return QuranCache()


@pytest.fixture
def client(session, cache):
    return QuranAPIClient(cache=cache, session=session)


@pytest.fixture
def surahs_payload():
    return envelope(SURAHS)
