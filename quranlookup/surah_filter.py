# quranlookup/surah_filter.py
import re
from typing import List, Optional

from .models import Surah


REFERENCE_SEPARATORS = re.compile(r"[:/]")


def normalize_search_input(value: str) -> str:
    """Use only the surah part of a partly typed reference like '2:'."""
    return REFERENCE_SEPARATORS.split(value, maxsplit=1)[0].strip()


def filter_surahs(surahs: Optional[List[Surah]], search_text: str) -> Optional[List[Surah]]:
    """
    Surahs whose English name or number contains ``search_text``.

    Returns None when no surah list is loaded yet, which callers must tell
    apart from an empty match.
    """
    if surahs is None:
        return None

    needle = search_text.lower()
    return [
        surah for surah in surahs
        if needle in surah.english_name.lower() or needle in str(surah.number)
    ]


def visible_surahs(surahs: Optional[List[Surah]], search_text: str) -> Optional[List[Surah]]:
    """What the surah list should show for the current search text."""
    normalized = normalize_search_input(search_text.strip())
    if not normalized:
        return surahs
    return filter_surahs(surahs, normalized)
