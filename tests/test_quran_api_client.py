import requests

from quranlookup.models import Ayah, LookupStatus, Surah
from quranlookup.quran_api_client import ARABIC_EDITION, merge_editions
from quranlookup.reference_parser import Reference

from conftest import (EDITION, SURAHS, ayah_editions_payload, ayah_payload, envelope,
                      surah_editions_payload)

SURAH_112_PATH = f"surah/112/editions/{EDITION},{ARABIC_EDITION}"
AYAH_2_255_PATH = f"ayah/2:255/editions/{EDITION},{ARABIC_EDITION}"


def _ayahs(texts):
    return [Ayah.model_validate(ayah_payload(i, t)) for i, t in enumerate(texts, 1)]


def test_merge_editions_joins_on_number_in_surah():
    translation = _ayahs(["one", "two", "three"])
    arabic = [Ayah.model_validate(ayah_payload(3, "ثلاثة")), Ayah.model_validate(ayah_payload(1, "واحد"))]
    merged = merge_editions(translation, arabic)
    assert len(merged) == 3
    assert [a.arabic_text for a in merged] == ["واحد", None, "ثلاثة"]
    assert [a.text for a in merged] == ["one", "two", "three"]


def test_get_surahs(client, session, surahs_payload):
    session.add("surah", surahs_payload)
    surahs = client.get_surahs()
    assert [s.number for s in surahs] == [s["number"] for s in SURAHS]
    assert surahs[1].english_name == "Al-Baqara"
    assert surahs[1].number_of_ayahs == 286


def test_get_surahs_soft_failures(client, session):
    session.add("surah", exc=requests.exceptions.ConnectionError("offline"))
    assert client.get_surahs() == []

    session.add("surah", status_code=500, payload=envelope("boom", code=500))
    assert client.get_surahs() == []

    session.add("surah", text="<html>")
    assert client.get_surahs() == []

    session.add("surah", payload=envelope([{"number": "x"}]))
    assert client.get_surahs() == []


def test_get_ayahs_merges_arabic(client, session):
    session.add(SURAH_112_PATH, surah_editions_payload(
        112, ["Say: He is God", "God the Eternal", "He begets not", "None is like Him"],
        ["قُلْ هُوَ", "ٱللَّهُ ٱلصَّمَدُ", "لَمْ يَلِدْ"]))
    ayahs = client.get_ayahs(112, EDITION)
    assert len(ayahs) == 4
    assert ayahs[0].arabic_text == "قُلْ هُوَ"
    assert ayahs[3].arabic_text is None
    assert ayahs[3].text == "None is like Him"


def test_get_ayahs_without_translation_edition_is_empty(client, session):
    payload = surah_editions_payload(112, ["x"], ["y"], edition="fr.hamidullah")
    session.add(SURAH_112_PATH, payload)
    assert client.get_ayahs(112, EDITION) == []


def test_lookup_ayah_from_network(client, session):
    session.add(AYAH_2_255_PATH, ayah_editions_payload(2, 255, "God - there is no deity save Him", "ٱللَّهُ لَآ إِلَٰهَ"))
    result = client.lookup_ayah("2:255", EDITION)
    assert result.status is LookupStatus.FOUND
    assert result.ayah.surah.number == 2
    assert result.ayah.number_in_surah == 255
    assert result.ayah.arabic_text == "ٱللَّهُ لَآ إِلَٰهَ"
    assert result.ayah.location == "2:255"


def test_lookup_ayah_prefers_cache(client, session, cache):
    cache.save_surahs(EDITION, [Surah.model_validate(s) for s in SURAHS])
    cache.save_ayahs(112, EDITION, merge_editions(_ayahs(["a", "b", "c", "d"]), _ayahs(["أ", "ب", "ج", "د"])))

    ayah = client.get_ayah_by_reference(Reference(112, 3), EDITION)
    assert session.calls == []
    assert ayah.text == "c"
    assert ayah.arabic_text == "ج"
    assert ayah.surah.english_name == "Al-Ikhlaas"
    assert ayah.location == "112:3"


def test_lookup_ayah_cache_is_per_edition(client, session, cache):
    cache.save_surahs("fr.hamidullah", [Surah.model_validate(s) for s in SURAHS])
    cache.save_ayahs(2, "fr.hamidullah", _ayahs(["fr"] * 255))
    session.add(AYAH_2_255_PATH, ayah_editions_payload(2, 255, "english"))

    ayah = client.get_ayah_by_reference("2:255", EDITION)
    assert session.calls == [AYAH_2_255_PATH]
    assert ayah.text == "english"
    assert ayah.arabic_text is None


def test_lookup_ayah_needs_surah_metadata_in_cache(client, session, cache):
    cache.save_ayahs(112, EDITION, _ayahs(["a", "b", "c", "d"]))
    session.add(f"ayah/112:1/editions/{EDITION},{ARABIC_EDITION}", ayah_editions_payload(112, 1, "a"))
    assert client.get_ayah_by_reference("112:1", EDITION).text == "a"
    assert len(session.calls) == 1


def test_lookup_ayah_passes_unparsed_reference_through(client, session):
    session.add(f"ayah/262/editions/{EDITION},{ARABIC_EDITION}", ayah_editions_payload(2, 255, "by global number"))
    ayah = client.get_ayah_by_reference(" 262 ", EDITION)
    assert ayah.text == "by global number"


def test_lookup_ayah_not_found_and_failed_are_distinct(client, session):
    assert client.lookup_ayah("2:287", EDITION).status is LookupStatus.NOT_FOUND

    session.add(AYAH_2_255_PATH, exc=requests.exceptions.Timeout("slow"))
    result = client.lookup_ayah("2:255", EDITION)
    assert result.status is LookupStatus.FAILED
    assert result.ayah is None
    assert client.get_ayah_by_reference("2:255", EDITION) is None


def test_get_arabic_ayah_text(client, session):
    session.add(f"ayah/1:1/{ARABIC_EDITION}", envelope(ayah_payload(1, "بِسْمِ ٱللَّهِ")))
    assert client.get_arabic_ayah_text(1, 1) == "بِسْمِ ٱللَّهِ"
    assert client.get_arabic_ayah_text(1, 2) is None


def test_get_editions(client, session):
    session.add("edition", envelope([
        {"identifier": "en.asad", "language": "en", "name": "Asad", "englishName": "Muhammad Asad",
         "format": "text", "type": "translation"},
    ]))
    editions = client.get_editions()
    assert editions[0].identifier == "en.asad"
    assert editions[0].english_name == "Muhammad Asad"


def test_sajda_object_counts_as_sajda():
    ayah = Ayah.model_validate(ayah_payload(206, "prostrate", sajda={"id": 1, "recommended": True}))
    assert ayah.sajda is True


def test_warm_cache_downloads_missing_surahs(client, session, cache, surahs_payload):
    session.add("surah", surahs_payload)
    session.add(SURAH_112_PATH, surah_editions_payload(112, ["a", "b", "c", "d"], ["أ", "ب", "ج", "د"]))

    failed = client.warm_cache(EDITION, surah_numbers=[1, 112], progress=False)
    assert failed == {1}
    assert [a.text for a in cache.get_ayahs(112, EDITION)] == ["a", "b", "c", "d"]
    assert cache.get_surahs(EDITION)[0].english_name == "Al-Faatiha"

    # Surah 1 was tried, then retried once
    assert session.calls.count(f"surah/1/editions/{EDITION},{ARABIC_EDITION}") == 2

    session.calls.clear()
    client.warm_cache(EDITION, surah_numbers=[112], progress=False)
    assert session.calls == ["surah"]
