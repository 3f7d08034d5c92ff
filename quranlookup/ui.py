# quranlookup/ui.py
import sys
import shutil
import textwrap
import logging
import webbrowser
from typing import List, Optional

import arabic_reshaper
import pyperclip
from bidi.algorithm import get_display
from colorama import Fore, Style

from .models import Ayah, FavoriteAyah, Surah
from .quick_lookup import QuickLookupState
from .version import VERSION

logger = logging.getLogger(__name__)

BASE_QURAN_URL = "https://quran.com"

QURAN_LOOKUP_ASCII = r"""
  ___                    _              _
 / _ \ _  _ _ _ __ _ _ _| |   ___  ___ | |__ _  _ _ __
| (_) | || | '_/ _` | ' \ |__/ _ \/ _ \| / /| || | '_ \
 \__\_\\_,_|_| \__,_|_||_|____\___/\___/|_\_\ \_,_| .__/
                                                  |_|
"""

COLOR_MAP = {
    'red': Fore.RED,
    'white': Fore.WHITE,
    'green': Fore.GREEN,
    'blue': Fore.BLUE,
    'yellow': Fore.YELLOW,
    'magenta': Fore.MAGENTA,
    'cyan': Fore.CYAN,
}


def surah_url(surah_number: int) -> str:
    return f"{BASE_QURAN_URL}/{surah_number}"


def ayah_url(surah_number: int, ayah_number: int) -> str:
    return f"{BASE_QURAN_URL}/{surah_number}/{ayah_number}"


def location_label(surah_name: str, surah_number: int, ayah_number: int) -> str:
    return f"{surah_name} {surah_number}:{ayah_number}"


def copy_payloads(text: str, arabic_text: Optional[str], label: str) -> dict:
    """Clipboard contents for the three copy actions."""
    arabic = arabic_text or ""
    return {
        "translation": f"{text}\n\n{label}",
        "arabic": f"{arabic}\n\n{label}",
        "both": f"{arabic}\n\n{text}\n\n{label}",
    }


class UI:
    def __init__(self, term_size=None):
        self.term_size = term_size or shutil.get_terminal_size()
        self.arabic_reversed = False

    def clear_terminal(self):
        """Clear terminal and reset scroll"""
        print("\033[2J", end="")
        print("\033[H", end="")
        sys.stdout.write("\033[3J")
        sys.stdout.flush()

    def display_header(self, theme_color='red'):
        selected_color = COLOR_MAP.get(theme_color, Fore.RED)
        print(selected_color + QURAN_LOOKUP_ASCII + Style.RESET_ALL)
        print(Fore.RED + "╭──" + Style.BRIGHT + Fore.GREEN + "✨ As-salamu alaykum! " + Fore.RED + Style.NORMAL + "─" * 26 + "╮")
        print(Fore.RED + "│ " + Fore.LIGHTMAGENTA_EX + "QuranLookup – Search, Read & Save Ayahs".ljust(49) + Fore.RED + "│")
        print(Fore.RED + "│ " + Style.BRIGHT + "Version: " + Style.NORMAL + f"v{VERSION}".ljust(40) + "│")
        print(Fore.RED + "╰" + "─" * 50 + "╯\n")

    def fix_arabic_text(self, text: Optional[str]) -> str:
        """Reshape and apply BiDi so Arabic reads correctly in a terminal."""
        if not text:
            return ""
        try:
            bidi_text = str(get_display(arabic_reshaper.reshape(text)))
        except Exception as e:
            logger.warning("Error processing Arabic text ('%s...'): %s", text[:20], e)
            return text
        if self.arabic_reversed:
            return bidi_text[::-1]
        return bidi_text

    def toggle_arabic_reversal(self):
        self.arabic_reversed = not self.arabic_reversed

    def _print_wrapped(self, text: str, indent: str = "    "):
        width = max(20, self.term_size.columns)
        print(textwrap.fill(text, width=width, initial_indent=indent, subsequent_indent=indent))

    def display_surah_list(self, surahs: List[Surah], title: str = "Quran - List of Surahs:"):
        print(Fore.GREEN + Style.BRIGHT + title)
        print(Fore.CYAN + "-" * 25)
        for surah in surahs:
            print(f"{Fore.GREEN}{surah.number:3d}. {Fore.WHITE}{surah.english_name:<22}"
                  f"{Style.DIM}{surah.english_name_translation:<28}{Style.RESET_ALL}"
                  f"{Fore.CYAN}{surah.number_of_ayahs:>4} ayahs  {Fore.MAGENTA}{surah.revelation_type}")
        print(Fore.CYAN + "-" * 25)

    def display_surah_info(self, surah: Surah):
        separator = "─" * 52
        print(Fore.RED + "╭─ " + Style.BRIGHT + Fore.GREEN + "📜 Surah Information")
        print(Fore.RED + f"│ • {Fore.CYAN}Name:       {Fore.WHITE}{surah.english_name}")
        print(Fore.RED + f"│ • {Fore.CYAN}Arabic:     {Fore.WHITE}{self.fix_arabic_text(surah.name)}")
        print(Fore.RED + f"│ • {Fore.CYAN}Translation:{Fore.WHITE} {surah.english_name_translation}")
        print(Fore.RED + f"│ • {Fore.CYAN}Type:       {Fore.WHITE}{surah.revelation_type}")
        print(Fore.RED + f"│ • {Fore.CYAN}Total Ayahs:{Fore.WHITE} {surah.number_of_ayahs}")
        print(Fore.RED + f"│ • {Fore.CYAN}Link:       {Fore.MAGENTA}{surah_url(surah.number)}")
        print(Fore.RED + "╰" + separator)

    def display_single_ayah(self, ayah: Ayah, title: Optional[str] = None):
        print(Style.BRIGHT + Fore.GREEN + f"\n[{title or ayah.number_in_surah}]")
        if ayah.arabic_text:
            print(Style.BRIGHT + Fore.RED + "Arabic:" + Style.NORMAL + Fore.WHITE)
            print("    " + self.fix_arabic_text(ayah.arabic_text))
        print(Style.BRIGHT + Fore.MAGENTA + "Translation:" + Style.NORMAL + Fore.WHITE)
        self._print_wrapped(ayah.text)
        print(Style.BRIGHT + Fore.GREEN + "-" * min(40, self.term_size.columns))

    def display_ayah_detail(self, ayah: Ayah, surah_name: str, surah_number: int):
        label = location_label(surah_name, surah_number, ayah.number_in_surah)
        self.display_single_ayah(ayah, title=label)
        rows = [
            ("Surah", f"{surah_name} ({surah_number})"),
            ("Ayah", ayah.number_in_surah),
            ("Juz", ayah.juz),
            ("Page", ayah.page),
            ("Hizb Quarter", ayah.hizb_quarter),
            ("Ruku", ayah.ruku),
            ("Manzil", ayah.manzil),
            ("Sajda", "Yes" if ayah.sajda else "No"),
            ("Read in Browser", ayah_url(surah_number, ayah.number_in_surah)),
        ]
        print(Fore.RED + "╭─ " + Style.BRIGHT + Fore.GREEN + "ℹ️ Details")
        for name, value in rows:
            print(Fore.RED + f"│ • {Fore.CYAN}{name + ':':<16}{Fore.WHITE}{value if value is not None else '-'}")
        print(Fore.RED + "╰" + "─" * 52)

    def display_quick_lookup(self, state: QuickLookupState):
        print(Fore.RED + "╭─ " + Style.BRIGHT + Fore.GREEN + f"🔎 Quick Lookup – {state.label}")
        if state.loading:
            print(Fore.RED + "│ " + Fore.YELLOW + "Fetching ayah…")
        elif state.error:
            print(Fore.RED + "│ " + Fore.RED + Style.BRIGHT + f"⚠ {state.error}")
        elif state.ayah:
            surah = state.ayah.surah
            name = surah.english_name if surah else "Surah"
            number = surah.number if surah else 0
            print(Fore.RED + "│ " + Fore.CYAN + location_label(name, number, state.ayah.number_in_surah))
        print(Fore.RED + "╰" + "─" * 52)

    def display_ayahs(self, ayahs: List[Ayah], surah: Surah, page_size: Optional[int] = None):
        """Display ayahs page by page"""
        page_size = page_size or max(3, (self.term_size.lines - 10) // 8)
        total_pages = (len(ayahs) + page_size - 1) // page_size
        for page in range(total_pages):
            self.clear_terminal()
            print(Fore.CYAN + f"📖 {surah.english_name} ({self.fix_arabic_text(surah.name)})"
                  + Style.DIM + f"  page {page + 1}/{total_pages}")
            for ayah in ayahs[page * page_size:(page + 1) * page_size]:
                self.display_single_ayah(ayah)
            if page + 1 < total_pages:
                choice = input(Fore.YELLOW + "Enter for next page, 'q' to stop: " + Fore.WHITE).strip().lower()
                if choice == 'q':
                    break

    def display_favorites(self, favorites: List[FavoriteAyah]):
        if not favorites:
            print(Fore.YELLOW + "No favorites yet. Add one from any ayah's actions.")
            return
        print(Fore.RED + "╭─ " + Style.BRIGHT + Fore.GREEN + "⭐ Favorites")
        for idx, favorite in enumerate(favorites, 1):
            label = location_label(favorite.surah, favorite.surah_number, favorite.ayah_number)
            print(Fore.RED + f"│ {Fore.GREEN}{idx}. {Fore.CYAN}{label}")
            if favorite.arabic_text:
                print(Fore.RED + "│    " + Fore.WHITE + self.fix_arabic_text(favorite.arabic_text))
            preview = favorite.text if len(favorite.text) <= 100 else favorite.text[:97] + "..."
            print(Fore.RED + "│    " + Style.DIM + Fore.WHITE + preview + Style.RESET_ALL)
        print(Fore.RED + "╰" + "─" * 52)

    def copy_to_clipboard(self, content: str, what: str) -> bool:
        try:
            pyperclip.copy(content)
        except pyperclip.PyperclipException as e:
            logger.warning("Clipboard unavailable: %s", e)
            print(Fore.RED + "Could not access the clipboard on this system.")
            return False
        print(Fore.GREEN + f"✓ Copied {what}")
        return True

    def open_in_browser(self, url: str):
        if not webbrowser.open(url):
            print(Fore.YELLOW + f"Open this link manually: {url}")

    def ask_yes_no(self, prompt: str) -> bool:
        while True:
            choice = input(Fore.BLUE + prompt + Fore.WHITE).strip().lower()
            if choice in ['y', 'yes']:
                return True
            if choice in ['n', 'no']:
                return False
            print(Fore.RED + "Invalid input. Please enter 'y' or 'n'.")

    def pause(self, message: str = "Press Enter to continue..."):
        input(Fore.YELLOW + "\n" + message + Style.RESET_ALL)
