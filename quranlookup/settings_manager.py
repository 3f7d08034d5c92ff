# quranlookup/settings_manager.py
import os
import json
import logging
from typing import List, Optional

from colorama import Fore, Style

from .models import Edition
from .utils import get_app_path

logger = logging.getLogger(__name__)

DEFAULT_EDITION = "en.asad"
EDITION_ENV_VAR = "QURANLOOKUP_EDITION"
THEME_COLORS = ['red', 'white', 'green', 'blue', 'yellow', 'magenta', 'cyan']


class Settings:
    """User preferences persisted as QuranLookup-Settings.json."""
    PREF_FILENAME = "QuranLookup-Settings.json"
    DEFAULTS = {"edition": DEFAULT_EDITION, "theme_color": "red"}

    def __init__(self, preferences_file: Optional[str] = None):
        self.preferences_file = preferences_file
        self.preferences = self._load_preferences()

    @classmethod
    def on_disk(cls) -> "Settings":
        return cls(get_app_path('config', cls.PREF_FILENAME))

    def _load_preferences(self) -> dict:
        preferences = dict(self.DEFAULTS)
        if not self.preferences_file:
            return preferences
        try:
            with open(self.preferences_file, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except FileNotFoundError:
            return preferences
        except json.JSONDecodeError:
            logger.warning("Preferences file '%s' is corrupted, resetting.", self.preferences_file)
            return preferences
        except OSError as e:
            logger.error("Error loading preferences from '%s': %s", self.preferences_file, e)
            return preferences
        if isinstance(loaded, dict):
            preferences.update(loaded)
        return preferences

    def save(self):
        if not self.preferences_file:
            return
        try:
            pref_dir = os.path.dirname(self.preferences_file)
            if pref_dir:
                os.makedirs(pref_dir, exist_ok=True)
            with open(self.preferences_file, 'w', encoding='utf-8') as f:
                json.dump(self.preferences, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logger.error("Error saving preferences to '%s': %s", self.preferences_file, e)

    @property
    def edition(self) -> str:
        return os.environ.get(EDITION_ENV_VAR) or self.preferences.get("edition") or DEFAULT_EDITION

    @edition.setter
    def edition(self, identifier: str):
        self.preferences["edition"] = identifier
        self.save()

    @property
    def theme_color(self) -> str:
        color = self.preferences.get("theme_color")
        return color if color in THEME_COLORS else "red"

    @theme_color.setter
    def theme_color(self, color: str):
        if color not in THEME_COLORS:
            raise ValueError(f"Unknown theme color: {color}")
        self.preferences["theme_color"] = color
        self.save()


class SettingsManager:
    """Settings menu: translation edition and theme color"""

    def __init__(self, app):
        self.app = app
        self.settings: Settings = app.settings

    def show_settings_menu(self):
        while True:
            self.app.ui.clear_terminal()
            self.app.ui.display_header(self.settings.theme_color)

            print(Fore.RED + "╭─ " + Style.BRIGHT + Fore.GREEN + "⚙️ Settings")
            print(Fore.RED + f"├─ {Fore.CYAN}edition{Style.DIM}/ed{Style.RESET_ALL}  : "
                  f"{Fore.WHITE}Translation edition {Style.DIM}(current: {self.settings.edition}){Style.RESET_ALL}")
            print(Fore.RED + f"├─ {Fore.CYAN}theme{Style.DIM}/th{Style.RESET_ALL}    : {Fore.WHITE}Change header color")
            print(Fore.RED + f"├─ {Fore.RED}back{Style.DIM}/b{Style.RESET_ALL}     : {Fore.WHITE}Return to main menu")
            print(Fore.RED + "╰────────────────────────────────────────")

            try:
                user_input = input(Fore.RED + "  ❯ " + Fore.WHITE).strip().lower()
            except KeyboardInterrupt:
                return

            if user_input in ['back', 'b', 'q']:
                return
            elif user_input in ['edition', 'ed']:
                self._show_edition_settings()
            elif user_input in ['theme', 'th']:
                self._show_theme_settings()
            else:
                print(Fore.RED + "Invalid command.")

    @staticmethod
    def match_editions(editions: List[Edition], query: str) -> List[Edition]:
        query = query.lower()
        return [
            e for e in editions
            if query in e.identifier.lower() or query in e.english_name.lower() or query == e.language.lower()
        ]

    def _show_edition_settings(self):
        editions = self.app.client.get_editions()
        if not editions:
            print(Fore.RED + "Unable to load editions. Check your connection and try again.")
            input(Fore.YELLOW + "Press Enter to continue...")
            return

        print(Fore.GREEN + "\nFilter editions by language code, name or identifier (e.g. 'en', 'sahih'):")
        query = input(Fore.RED + "  ❯ " + Fore.WHITE).strip()
        matches = self.match_editions(editions, query) if query else editions
        if not matches:
            print(Fore.YELLOW + "No editions matched.")
            input(Fore.YELLOW + "Press Enter to continue...")
            return

        for idx, edition in enumerate(matches, 1):
            print(f"{Fore.GREEN}{idx:3d}. {Fore.CYAN}{edition.identifier:<20}"
                  f"{Fore.WHITE}{edition.english_name} {Style.DIM}({edition.language}){Style.RESET_ALL}")

        choice = input(Fore.GREEN + "\nSelect a number (Enter to cancel): " + Fore.WHITE).strip()
        if choice.isdigit() and 1 <= int(choice) <= len(matches):
            self.settings.edition = matches[int(choice) - 1].identifier
            print(Fore.GREEN + f"✓ Edition set to {self.settings.edition}")
            if os.environ.get(EDITION_ENV_VAR):
                print(Fore.YELLOW + f"Note: {EDITION_ENV_VAR} is set and still takes precedence.")
            input(Fore.YELLOW + "Press Enter to continue...")

    def _show_theme_settings(self):
        for idx, color in enumerate(THEME_COLORS, 1):
            print(f"{Fore.GREEN}{idx}. {getattr(Fore, color.upper())}{color}")
        choice = input(Fore.GREEN + "Select a number (Enter to cancel): " + Fore.WHITE).strip()
        if choice.isdigit() and 1 <= int(choice) <= len(THEME_COLORS):
            self.settings.theme_color = THEME_COLORS[int(choice) - 1]
