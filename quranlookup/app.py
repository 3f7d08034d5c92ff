# quranlookup/app.py
import os
import sys
import logging
import argparse
from typing import List, Optional

from colorama import Fore, Style, init

from .errors import FavoritesStoreError
from .favorites_store import FavoritesStore
from .logger import setup_logging
from .models import Ayah, FavoriteAyah, Surah
from .quick_lookup import QuickLookup
from .quran_api_client import QuranAPIClient
from .quran_cache import QuranCache
from .reference_parser import find_surah
from .settings_manager import EDITION_ENV_VAR, Settings, SettingsManager
from .surah_filter import visible_surahs
from .ui import UI, ayah_url, copy_payloads, location_label, surah_url

logger = logging.getLogger(__name__)

COMMANDS = [
    ("1-114 / name", "Open a surah by number or search by name"),
    ("2:255", "Jump straight to an ayah"),
    ("list/ls", "Show all surahs"),
    ("favorites/fav", "Show saved ayahs"),
    ("settings/st", "Translation edition and theme"),
    ("download/dl", "Cache every surah for quick offline lookups"),
    ("refresh", "Reload the surah list from the API"),
    ("reverse", "Toggle Arabic display direction"),
    ("quit/q", "Exit"),
]

AYAH_ACTIONS = [
    ("o", "Read in browser"),
    ("t", "Copy translation"),
    ("a", "Copy Arabic"),
    ("b", "Copy Arabic & translation"),
    ("f", "Add to favorites"),
    ("d", "Show details"),
    ("back", "Return"),
]


class QuranApp:
    def __init__(self, settings: Settings, client: QuranAPIClient, favorites: FavoritesStore, ui: Optional[UI] = None):
        self.settings = settings
        self.client = client
        self.cache = client.cache
        self.favorites = favorites
        self.ui = ui or UI()
        self.quick_lookup = QuickLookup(client, lambda: self.settings.edition)
        self.settings_manager = SettingsManager(self)
        self.surahs: Optional[List[Surah]] = None

    @classmethod
    def create(cls) -> "QuranApp":
        settings = Settings.on_disk()
        client = QuranAPIClient(cache=QuranCache.on_disk())
        favorites = FavoritesStore.on_disk(arabic_fetcher=client.get_arabic_ayah_text)
        return cls(settings, client, favorites)

    # --- data loading; whatever is fetched here is written back to the cache ---

    def load_surahs(self, refresh: bool = False) -> Optional[List[Surah]]:
        edition = self.settings.edition
        if not refresh:
            cached = self.cache.get_surahs(edition)
            if cached:
                self.surahs = cached
                return self.surahs

        surahs = self.client.get_surahs()
        if surahs:
            self.cache.save_surahs(edition, surahs)
            self.surahs = surahs
        elif self.surahs is None:
            print(Fore.RED + "Unable to load the surah list. Searching by name is unavailable.")
        return self.surahs

    def load_ayahs(self, surah: Surah) -> List[Ayah]:
        edition = self.settings.edition
        cached = self.cache.get_ayahs(surah.number, edition)
        if cached:
            return cached
        ayahs = self.client.get_ayahs(surah.number, edition)
        if ayahs:
            self.cache.save_ayahs(surah.number, edition, ayahs)
        return ayahs

    # --- main loop ---

    def run(self):
        self.load_surahs()
        try:
            while True:
                self.ui.clear_terminal()
                self.ui.display_header(self.settings.theme_color)
                self._display_commands()
                try:
                    search_text = input(Fore.RED + "  ❯ " + Fore.WHITE).strip()
                except KeyboardInterrupt:
                    print(Fore.YELLOW + "\n⚠ Type 'quit' to exit.")
                    continue
                if not self.handle_input(search_text):
                    break
        finally:
            self.quick_lookup.close()

    def _display_commands(self):
        print(Fore.RED + "╭─ " + Style.BRIGHT + Fore.GREEN + "📜 Search by name/number or jump with 2:255")
        for cmd, desc in COMMANDS:
            print(Fore.RED + f"│ → {Fore.CYAN}{cmd:<14}{Style.RESET_ALL} : {Style.DIM}{desc}{Style.RESET_ALL}")
        print(Fore.RED + "╰" + "─" * 52)
        print(Style.DIM + Fore.WHITE + f"Edition: {self.settings.edition}")

    def handle_input(self, search_text: str) -> bool:
        """Handle one line of input. Returns False when the user quits."""
        command = search_text.lower()
        if command in ['quit', 'exit', 'q']:
            print(Fore.RED + "\n✨ As-salamu alaykum! Thank you for using QuranLookup!")
            return False
        if not command:
            return True

        try:
            if command in ['list', 'ls']:
                self._show_surah_list(self.surahs or [])
            elif command in ['favorites', 'fav']:
                self._favorites_menu()
            elif command in ['settings', 'st']:
                self.settings_manager.show_settings_menu()
                self.quick_lookup.update("")
                self.load_surahs()
            elif command in ['download', 'dl']:
                self._download_all()
            elif command == 'refresh':
                self.load_surahs(refresh=True)
            elif command == 'reverse':
                self.ui.toggle_arabic_reversal()
            else:
                self._search(search_text)
        except KeyboardInterrupt:
            print(Fore.YELLOW + "\n⚠ Interrupted! Returning to main menu.")
        return True

    def _search(self, search_text: str):
        state = self.quick_lookup.update(search_text, self.surahs)
        if state.active:
            if state.loading:
                self.ui.display_quick_lookup(state)
                state = self.quick_lookup.wait()
            if state.ayah:
                surah = state.ayah.surah
                self._ayah_actions(state.ayah, surah.english_name if surah else "Surah", surah.number if surah else 0)
            else:
                self.ui.display_quick_lookup(state)
                self.ui.pause()
            return

        matches = visible_surahs(self.surahs, search_text)
        if matches is None:
            print(Fore.RED + "Surah list is not loaded yet. Try 'refresh'.")
            self.ui.pause()
            return

        exact = find_surah(matches, int(search_text)) if search_text.isdigit() else None
        if exact:
            self._read_surah(exact)
        elif len(matches) == 1:
            self._read_surah(matches[0])
        elif matches:
            self._pick_surah(matches)
        else:
            print(Fore.YELLOW + f"No surah matches '{search_text}'.")
            self.ui.pause()

    def _show_surah_list(self, surahs: List[Surah]):
        self.ui.clear_terminal()
        self.ui.display_surah_list(surahs)
        self.ui.pause("Press Enter to return to the surah selection...")

    def _pick_surah(self, matches: List[Surah]):
        self.ui.display_surah_list(matches, title="🤔 Did you mean one of these?")
        choice = input(Fore.GREEN + "Enter a surah number (Enter to go back): " + Fore.WHITE).strip()
        if choice.isdigit():
            surah = find_surah(matches, int(choice))
            if surah:
                self._read_surah(surah)

    def _read_surah(self, surah: Surah):
        print(Fore.YELLOW + f"Loading {surah.english_name}...")
        ayahs = self.load_ayahs(surah)
        if not ayahs:
            print(Fore.RED + f"Unable to load ayahs for Surah {surah.number}.")
            self.ui.pause()
            return

        while True:
            self.ui.clear_terminal()
            self.ui.display_surah_info(surah)
            print(Fore.GREEN + f"\nEnter an ayah number (1-{len(ayahs)}), 'r' to read all, "
                  "'o' to open in browser, 'c' to copy the link, or Enter to go back:")
            choice = input(Fore.RED + "  ❯ " + Fore.WHITE).strip().lower()
            if not choice or choice in ['b', 'back']:
                return
            if choice == 'r':
                self.ui.display_ayahs(ayahs, surah)
                self.ui.pause()
            elif choice == 'o':
                self.ui.open_in_browser(surah_url(surah.number))
                self.ui.pause()
            elif choice == 'c':
                self.ui.copy_to_clipboard(surah_url(surah.number), "link")
                self.ui.pause()
            elif choice.isdigit() and 1 <= int(choice) <= len(ayahs):
                ayah = next((a for a in ayahs if a.number_in_surah == int(choice)), ayahs[int(choice) - 1])
                self._ayah_actions(ayah, surah.english_name, surah.number)
            else:
                print(Fore.RED + "Invalid choice.")

    def _ayah_actions(self, ayah: Ayah, surah_name: str, surah_number: int):
        label = location_label(surah_name, surah_number, ayah.number_in_surah)
        payloads = copy_payloads(ayah.text, ayah.arabic_text, label)
        while True:
            self.ui.clear_terminal()
            self.ui.display_single_ayah(ayah, title=label)
            print(Fore.RED + "╭─ " + Style.BRIGHT + Fore.GREEN + "Ayah Tools")
            for key, desc in AYAH_ACTIONS:
                print(Fore.RED + f"│ {Fore.CYAN}{key:<5}{Fore.WHITE}{desc}")
            print(Fore.RED + "╰" + "─" * 52)
            choice = input(Fore.RED + "  ❯ " + Fore.WHITE).strip().lower()

            if choice in ['', 'back', 'q']:
                return
            elif choice == 'o':
                self.ui.open_in_browser(ayah_url(surah_number, ayah.number_in_surah))
            elif choice == 't':
                self.ui.copy_to_clipboard(payloads["translation"], "translation")
            elif choice == 'a':
                self.ui.copy_to_clipboard(payloads["arabic"], "Arabic text")
            elif choice == 'b':
                self.ui.copy_to_clipboard(payloads["both"], "Arabic & translation")
            elif choice == 'f':
                self.add_favorite(ayah, surah_name, surah_number)
            elif choice == 'd':
                self.ui.clear_terminal()
                self.ui.display_ayah_detail(ayah, surah_name, surah_number)
            else:
                print(Fore.RED + "Invalid choice.")
                continue
            self.ui.pause()

    def add_favorite(self, ayah: Ayah, surah_name: str, surah_number: int) -> bool:
        try:
            self.favorites.add(FavoriteAyah.from_ayah(ayah, surah_name, surah_number))
        except FavoritesStoreError as e:
            print(Fore.RED + f"Could not add to favorites: {e}")
            return False
        print(Fore.GREEN + "⭐ Added to Favorites")
        return True

    def _favorites_menu(self):
        while True:
            self.ui.clear_terminal()
            favorites = self.favorites.list()
            self.ui.display_favorites(favorites)
            if not favorites:
                self.ui.pause()
                return
            print(Fore.GREEN + "\nEnter a number to open, 'rm <number>' to remove, or Enter to go back:")
            choice = input(Fore.RED + "  ❯ " + Fore.WHITE).strip().lower()
            if not choice:
                return

            remove = choice.startswith("rm ")
            index = choice[3:].strip() if remove else choice
            if not index.isdigit() or not 1 <= int(index) <= len(favorites):
                print(Fore.RED + "Invalid choice.")
                self.ui.pause()
                continue

            favorite = favorites[int(index) - 1]
            if remove:
                label = location_label(favorite.surah, favorite.surah_number, favorite.ayah_number)
                if self.ui.ask_yes_no(f"Remove every favorite at {label}? (y/n): "):
                    try:
                        self.favorites.remove(favorite)
                    except FavoritesStoreError as e:
                        print(Fore.RED + f"Could not remove favorite: {e}")
                        self.ui.pause()
            else:
                ayah = Ayah(number=0, number_in_surah=favorite.ayah_number,
                            text=favorite.text, arabic_text=favorite.arabic_text)
                self._ayah_actions(ayah, favorite.surah, favorite.surah_number)

    def _download_all(self):
        edition = self.settings.edition
        print(Fore.CYAN + f"⏳ Caching all surahs for {edition}...")
        failed = self.client.warm_cache(edition)
        self.load_surahs()
        if failed:
            print(Fore.RED + f"Failed to cache surahs: {', '.join(map(str, sorted(failed)))}")
        else:
            print(Fore.GREEN + "✓ All surahs cached!")
        self.ui.pause()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="quranlookup", description="Look up, read and save Quran ayahs.")
    parser.add_argument("--edition", help=f"Translation edition for this run (same as {EDITION_ENV_VAR})")
    parser.add_argument("--debug", action="store_true", help="Show debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    init(autoreset=True)
    setup_logging(debug=args.debug)
    if args.edition:
        os.environ[EDITION_ENV_VAR] = args.edition

    try:
        QuranApp.create().run()
    except KeyboardInterrupt:
        print(Style.BRIGHT + Fore.YELLOW + "\n⚠ Interrupted.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
