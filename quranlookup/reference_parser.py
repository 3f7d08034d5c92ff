# quranlookup/reference_parser.py
"""
Turns search text such as ``2:255`` or ``2 / 255`` into a surah/ayah pair.

Parsing and validating are separate steps. ``parse_reference`` only answers
"does this look like a reference?" so that anything else can fall through to
the surah name filter. ``validate_reference`` then checks the numbers
against the Quran's bounds and, when the surah list has already been
fetched, against the surah's ayah count.
"""
import re
from typing import Iterable, NamedTuple, Optional

from .errors import ReferenceValidationError
from .models import Surah

TOTAL_SURAHS = 114

SURAH_AYAH_REFERENCE_REGEX = re.compile(r"^(\d{1,3})\s*[:/]\s*(\d{1,3})$")


class Reference(NamedTuple):
    surah: int
    ayah: int

    def __str__(self) -> str:
        return f"{self.surah}:{self.ayah}"


def parse_reference(text: str) -> Optional[Reference]:
    """Return the reference in ``text``, or None when it isn't shaped like one."""
    if not text:
        return None
    match = SURAH_AYAH_REFERENCE_REGEX.match(text.strip())
    if not match:
        return None
    return Reference(int(match.group(1)), int(match.group(2)))


def find_surah(surahs: Optional[Iterable[Surah]], number: int) -> Optional[Surah]:
    for surah in surahs or ():
        if surah.number == number:
            return surah
    return None


def validate_reference(reference: Reference, surahs: Optional[Iterable[Surah]] = None) -> Reference:
    """Raise ReferenceValidationError if ``reference`` cannot name an ayah."""
    if not 1 <= reference.surah <= TOTAL_SURAHS:
        raise ReferenceValidationError(f"Surah numbers range from 1 to {TOTAL_SURAHS}")

    if reference.ayah < 1:
        raise ReferenceValidationError("Ayah numbers must be positive")

    surah = find_surah(surahs, reference.surah)
    if surah and reference.ayah > surah.number_of_ayahs:
        raise ReferenceValidationError(
            f"{surah.english_name} only has {surah.number_of_ayahs} ayahs"
        )
    return reference

