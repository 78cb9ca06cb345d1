"""Office registry models - routing targets and record-type choices."""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

_SEPARATORS = re.compile(r"[_\-]+")


class OfficeEntry(BaseModel):
    """An office that receives FOIA requests for a set of record types."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: str | None = None
    phone: str | None = None
    record_types: tuple[str, ...] = ()
    description: str = ""
    # Agency regulation cited alongside the statute, e.g. "38 C.F.R. § 1.550 et seq."
    regulation: str | None = None

    @field_validator("record_types", mode="before")
    @classmethod
    def normalize_record_types(cls, v: object) -> object:
        """Store tags lower-cased, preserving their declared order."""
        if isinstance(v, (list, tuple)):
            return tuple(str(tag).strip().lower() for tag in v if str(tag).strip())
        return v

    def owns(self, record_type: str) -> bool:
        """Case-insensitive membership test for a record-type tag."""
        return record_type.strip().lower() in self.record_types


class RecordTypeOption(BaseModel):
    """Client-facing choice for the record-type selector."""

    model_config = ConfigDict(frozen=True)

    value: str
    label: str
    office: str


def record_type_label(value: str) -> str:
    """Human label for a tag: separators become spaces, each word title-cased.

    >>> record_type_label("gi_bill")
    'Gi Bill'
    """
    words = _SEPARATORS.sub(" ", value).split()
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


def record_type_heading(value: str) -> str:
    """Upper-cased tag with separators replaced, as printed in letters."""
    return " ".join(_SEPARATORS.sub(" ", value).split()).upper()
