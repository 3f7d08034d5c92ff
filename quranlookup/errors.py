# quranlookup/errors.py
from typing import Optional


class QuranLookupError(Exception):
    """Base exception for QuranLookup errors"""


class ReferenceValidationError(QuranLookupError):
    """A surah:ayah reference parsed but points outside the Quran"""


class QuranAPIError(QuranLookupError):
    """Request to the Quran API failed or returned an unusable payload"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AyahNotFoundError(QuranAPIError):
    """The API answered, but the requested ayah or edition is not in it"""


class FavoritesStoreError(QuranLookupError):
    """Favorites could not be written to local storage"""
