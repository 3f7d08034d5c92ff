import os

from quranlookup.app import QuranApp, parse_args
from quranlookup.favorites_store import FavoritesStore
from quranlookup.quran_api_client import ARABIC_EDITION
from quranlookup.settings_manager import Settings
from quranlookup.ui import UI, ayah_url, copy_payloads, location_label

from conftest import EDITION, surah_editions_payload


class RecordingUI(UI):
    def __init__(self, columns=80):
        super().__init__(term_size=os.terminal_size((columns, 24)))
        self.opened = []
        self.copied = []

    def clear_terminal(self):
        pass

    def pause(self, message=""):
        pass

    def open_in_browser(self, url):
        self.opened.append(url)

    def copy_to_clipboard(self, content, what):
        self.copied.append((content, what))
        return True


def make_app(client, monkeypatch, ui=None):
    monkeypatch.setenv("QURANLOOKUP_EDITION", EDITION)
    favorites = FavoritesStore(arabic_fetcher=client.get_arabic_ayah_text)
    return QuranApp(Settings(), client, favorites, ui=ui or RecordingUI())


def test_reading_a_surah_makes_its_ayahs_available_offline(client, session, surahs_payload, monkeypatch):
    session.add("surah", surahs_payload)
    session.add(f"surah/112/editions/{EDITION},{ARABIC_EDITION}",
                surah_editions_payload(112, ["a", "b", "c", "d"], ["أ", "ب", "ج", "د"]))
    app = make_app(client, monkeypatch)

    surahs = app.load_surahs()
    app.load_ayahs(next(s for s in surahs if s.number == 112))
    session.calls.clear()

    ayah = client.get_ayah_by_reference("112:4", EDITION)
    assert session.calls == []
    assert (ayah.text, ayah.arabic_text, ayah.location) == ("d", "د", "112:4")

    # Second load comes from the cache as well
    app.load_surahs()
    assert session.calls == []


def test_add_favorite_from_ayah(client, session, surahs_payload, monkeypatch):
    session.add("surah", surahs_payload)
    session.add(f"surah/112/editions/{EDITION},{ARABIC_EDITION}",
                surah_editions_payload(112, ["a", "b", "c", "d"], ["أ", "ب", "ج", "د"]))
    app = make_app(client, monkeypatch)
    surah = next(s for s in app.load_surahs() if s.number == 112)
    ayah = app.load_ayahs(surah)[0]

    assert app.add_favorite(ayah, surah.english_name, surah.number)
    [favorite] = app.favorites.list()
    assert (favorite.surah, favorite.surah_number, favorite.ayah_number) == ("Al-Ikhlaas", 112, 1)
    assert favorite.arabic_text == "أ"


def test_copy_payloads_and_links():
    label = location_label("Al-Baqara", 2, 255)
    payloads = copy_payloads("translation", "عربي", label)
    assert payloads["translation"] == "translation\n\nAl-Baqara 2:255"
    assert payloads["arabic"] == "عربي\n\nAl-Baqara 2:255"
    assert payloads["both"] == "عربي\n\ntranslation\n\nAl-Baqara 2:255"
    assert copy_payloads("t", None, label)["arabic"] == "\n\nAl-Baqara 2:255"
    assert ayah_url(2, 255) == "https://quran.com/2/255"


def test_parse_args():
    args = parse_args(["--edition", "en.sahih", "--debug"])
    assert args.edition == "en.sahih"
    assert args.debug


def test_surah_menu_opens_and_copies_the_surah_link(client, session, surahs_payload, monkeypatch):
    session.add("surah", surahs_payload)
    session.add(f"surah/112/editions/{EDITION},{ARABIC_EDITION}",
                surah_editions_payload(112, ["a", "b", "c", "d"], ["أ", "ب", "ج", "د"]))
    ui = RecordingUI()
    app = make_app(client, monkeypatch, ui=ui)
    app.load_surahs()

    answers = iter(["o", "c", ""])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    assert app.handle_input("112")

    assert ui.opened == ["https://quran.com/112"]
    assert ui.copied == [("https://quran.com/112", "link")]


def test_translation_is_wrapped_to_the_terminal(capsys):
    ui = RecordingUI(columns=30)
    ui._print_wrapped("say he is god the one god the eternal refuge he neither begets nor is born")
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) > 1
    assert all(line.startswith("    ") and len(line) <= 30 for line in lines)
