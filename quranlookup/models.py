# quranlookup/models.py
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Field aliases follow the alquran.cloud payloads so that cached lists keep
# the exact shape the API returns.


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Surah(ApiModel):
    number: int = Field(ge=1, le=114)
    name: str = ""                  # Arabic name
    english_name: str = Field(alias="englishName")
    english_name_translation: str = Field(default="", alias="englishNameTranslation")
    number_of_ayahs: int = Field(alias="numberOfAyahs")
    revelation_type: str = Field(default="", alias="revelationType")   # "Meccan" or "Medinan"


class SurahRef(ApiModel):
    """The owning surah as embedded in a single-ayah response."""
    number: int
    english_name: str = Field(alias="englishName")
    name: Optional[str] = None
    english_name_translation: Optional[str] = Field(default=None, alias="englishNameTranslation")
    number_of_ayahs: Optional[int] = Field(default=None, alias="numberOfAyahs")
    revelation_type: Optional[str] = Field(default=None, alias="revelationType")


class Ayah(ApiModel):
    number: int                     # global index, 1..6236
    number_in_surah: int = Field(alias="numberInSurah")
    text: str = Field(min_length=1)  # translation text
    arabic_text: Optional[str] = Field(default=None, alias="arabicText")
    juz: Optional[int] = None
    manzil: Optional[int] = None
    page: Optional[int] = None
    ruku: Optional[int] = None
    hizb_quarter: Optional[int] = Field(default=None, alias="hizbQuarter")
    sajda: bool = False
    surah: Optional[SurahRef] = None

    @field_validator("sajda", mode="before")
    @classmethod
    def _coerce_sajda(cls, value: Any) -> bool:
        # The API sends `false` or an object like {"id": 1, "recommended": true}
        if isinstance(value, dict):
            return True
        return bool(value)

    @property
    def location(self) -> str:
        surah_number = self.surah.number if self.surah else 0
        return f"{surah_number}:{self.number_in_surah}"


class FavoriteAyah(ApiModel):
    text: str = Field(min_length=1)
    arabic_text: Optional[str] = Field(default=None, alias="arabicText")
    ayah_number: int = Field(alias="ayahNumber")
    surah: str                      # english name of the surah
    surah_number: int = Field(alias="surahNumber")

    @classmethod
    def from_ayah(cls, ayah: Ayah, surah_name: str, surah_number: int) -> "FavoriteAyah":
        return cls(
            text=ayah.text,
            arabic_text=ayah.arabic_text,
            ayah_number=ayah.number_in_surah,
            surah=surah_name,
            surah_number=surah_number,
        )

    def same_location(self, other: "FavoriteAyah") -> bool:
        return self.ayah_number == other.ayah_number and self.surah_number == other.surah_number


class Edition(ApiModel):
    identifier: str
    language: str = ""
    name: str = ""
    english_name: str = Field(default="", alias="englishName")
    format: str = ""
    type: str = ""


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class AyahLookup(BaseModel):
    """Outcome of a single-ayah lookup; keeps 'not found' apart from 'request failed'."""
    status: LookupStatus
    ayah: Optional[Ayah] = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND
