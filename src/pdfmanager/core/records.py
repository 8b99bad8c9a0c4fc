"""
Record shapes for the three document kinds.

Each kind has a whitelist of fields (its schema). Records are built from a
caller-supplied buffer; anything outside the whitelist is ignored.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, ClassVar

from pdfmanager.core.field_ops import FieldDef, FieldType, coerce_value

logger = logging.getLogger(__name__)


COMMON_SCHEMA: dict[str, FieldDef] = {
    "title": FieldDef(FieldType.STRING, "Document title (lookup key)"),
    "path": FieldDef(FieldType.STRING, "Filesystem path to the document"),
    "authors": FieldDef(FieldType.STRING_LIST, "Authors, in order"),
}


@dataclass
class Document:
    """Fields shared by every document kind."""

    title: str | None = None
    path: str | None = None
    authors: list[str] | None = None

    SCHEMA: ClassVar[dict[str, FieldDef]] = COMMON_SCHEMA

    @classmethod
    def from_buffer(cls, buffer: dict[str, Any]) -> tuple[Document, dict[str, str]]:
        """Build a record from the whitelisted fields of a buffer.

        Values that fail coercion are left unset.

        Returns:
            (record, {field: error message}) for every field that was dropped
        """
        values: dict[str, Any] = {}
        errors: dict[str, str] = {}
        for name, fdef in cls.SCHEMA.items():
            if name not in buffer:
                continue
            try:
                values[name] = coerce_value(buffer[name], fdef)
            except ValueError as e:
                logger.warning("Ignoring %s.%s: %s", cls.__name__, name, e)
                errors[name] = str(e)
        return cls(**values), errors

    def to_dict(self) -> dict[str, Any]:
        """Serialize every field, unset ones as None."""
        return asdict(self)

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]


@dataclass
class Book(Document):
    subTitle: str | None = None
    fieldOfKnowledge: str | None = None
    publishYear: int | None = None

    SCHEMA: ClassVar[dict[str, FieldDef]] = {
        **COMMON_SCHEMA,
        "subTitle": FieldDef(FieldType.STRING, "Subtitle"),
        "fieldOfKnowledge": FieldDef(FieldType.STRING, "Subject area"),
        "publishYear": FieldDef(FieldType.INT, "Year of publication"),
    }


@dataclass
class Slide(Document):
    lectureName: str | None = None
    institutionName: str | None = None

    SCHEMA: ClassVar[dict[str, FieldDef]] = {
        **COMMON_SCHEMA,
        "lectureName": FieldDef(FieldType.STRING, "Lecture the slides belong to"),
        "institutionName": FieldDef(FieldType.STRING, "Institution that gave the lecture"),
    }


@dataclass
class ClassNote(Document):
    subTitle: str | None = None
    lectureName: str | None = None
    institutionName: str | None = None

    SCHEMA: ClassVar[dict[str, FieldDef]] = {
        **COMMON_SCHEMA,
        "subTitle": FieldDef(FieldType.STRING, "Subtitle"),
        "lectureName": FieldDef(FieldType.STRING, "Lecture the notes were taken in"),
        "institutionName": FieldDef(FieldType.STRING, "Institution that gave the lecture"),
    }


class Kind(Enum):
    """Document kinds, one collection file each."""

    BOOK = "Book"
    SLIDE = "Slide"
    CLASS_NOTE = "ClassNote"

    @classmethod
    def parse(cls, tag: Any) -> Kind | None:
        """Look up a kind by its exact tag ("Book", "Slide", "ClassNote").

        Tags are case sensitive. Returns None for anything else.
        """
        if isinstance(tag, cls):
            return tag
        if not isinstance(tag, str):
            return None
        for kind in cls:
            if tag == kind.value:
                return kind
        return None

    @property
    def record_class(self) -> type[Document]:
        return _RECORD_CLASSES[self]

    @property
    def filename(self) -> str:
        return _FILENAMES[self]

    @property
    def folder(self) -> str:
        """Subdirectory of the library that holds this kind's documents."""
        return _FILENAMES[self].removesuffix(".json")

    @property
    def cli_name(self) -> str:
        return self.value.lower()


_RECORD_CLASSES: dict[Kind, type[Document]] = {
    Kind.BOOK: Book,
    Kind.SLIDE: Slide,
    Kind.CLASS_NOTE: ClassNote,
}

_FILENAMES: dict[Kind, str] = {
    Kind.BOOK: "books.json",
    Kind.SLIDE: "slides.json",
    Kind.CLASS_NOTE: "classnotes.json",
}
