"""
JSON-backed document store.

The Store owns the config file and the three collection files (books,
slides, class notes). Every mutation reads the whole file, changes it in
memory and rewrites the whole file. There is no locking: one writer at a
time is assumed.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any

from pdfmanager.core.backup import write_json
from pdfmanager.core.config import LibraryPaths, get_paths
from pdfmanager.core.prompts import PromptFunc, prompt_user
from pdfmanager.core.records import Kind
from pdfmanager.core.reporter import ConsoleReporter, Level, Reporter

logger = logging.getLogger(__name__)


class StoreFormatError(ValueError):
    """A data file parsed as JSON but has the wrong top-level shape."""


def _title_of(record: Any) -> Any:
    return record.get("title") if isinstance(record, dict) else None


def _first_index(records: list[Any], title: str) -> int | None:
    for i, record in enumerate(records):
        if _title_of(record) == title:
            return i
    return None


class Store:
    """Reads and rewrites the library's JSON files."""

    def __init__(
        self,
        paths: LibraryPaths | None = None,
        reporter: Reporter | None = None,
        backup: bool = True,
    ):
        """Initialize the store.

        Args:
            paths: Library paths (resolved from the environment if not provided)
            reporter: Where user-facing messages go (console if not provided)
            backup: Back up each file before it is rewritten
        """
        self.paths = paths if paths is not None else get_paths()
        self.reporter: Reporter = reporter if reporter is not None else ConsoleReporter()
        self.backup = backup

    # -- Path accessors ------------------------------------------------------

    @property
    def config_path(self) -> Path:
        return self.paths.config_file

    @property
    def books_path(self) -> Path:
        return self.paths.books

    @property
    def slides_path(self) -> Path:
        return self.paths.slides

    @property
    def classnotes_path(self) -> Path:
        return self.paths.classnotes

    def collection_path(self, kind: Kind) -> Path:
        return {
            Kind.BOOK: self.books_path,
            Kind.SLIDE: self.slides_path,
            Kind.CLASS_NOTE: self.classnotes_path,
        }[kind]

    def get_library_path(self) -> str | None:
        """Directory where document files are kept, from config.json."""
        return self.read_field(self.config_path, "libraryPath")

    # -- Field accessor ------------------------------------------------------

    def _load(self, path: Path) -> Any:
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    def read_object(self, path: Path) -> dict[str, Any]:
        """Read a JSON object file such as config.json."""
        path = Path(path)
        data = self._load(path)
        if not isinstance(data, dict):
            raise StoreFormatError(f"{path} does not contain a JSON object")
        return data

    def _save(self, path: Path, data: dict[str, Any] | list[Any]) -> None:
        write_json(path, data, backup=self.backup, backup_dir=self.paths.backups)
        logger.debug("Rewrote %s", path)

    def read_field(self, path: Path, field: str) -> str | None:
        """Read a text field from a JSON object file.

        Returns:
            The field's value, or None if it is missing or not a string

        Raises:
            OSError: If the file cannot be read
            json.JSONDecodeError: If the file is not valid JSON
            StoreFormatError: If the file is not a JSON object
        """
        value = self.read_object(Path(path)).get(field)
        return value if isinstance(value, str) else None

    def write_field(self, path: Path, field: str, value: str) -> None:
        """Set a field in a JSON object file and rewrite the file."""
        path = Path(path)
        data = self.read_object(path)
        data[field] = value
        self._save(path, data)

    def read_collection(self, path: Path) -> list[Any]:
        """Read a collection file as a list of records.

        Raises:
            OSError: If the file cannot be read
            json.JSONDecodeError: If the file is not valid JSON
            StoreFormatError: If the file is not a JSON array
        """
        path = Path(path)
        data = self._load(path)
        if not isinstance(data, list):
            raise StoreFormatError(f"{path} does not contain a JSON array")
        return data

    # -- Typed record writer -------------------------------------------------

    def add_record(self, buffer: dict[str, Any], kind: Kind | str | None = None) -> bool:
        """Append a record built from a buffer to its kind's collection.

        The kind comes from `kind` if given, otherwise from the buffer's
        'type' key. Only the kind's whitelisted fields are persisted.

        Returns:
            True if the record was written, False if the kind is missing or
            not recognized (nothing is written in that case)
        """
        if kind is None:
            if "type" not in buffer:
                self.reporter.report(Level.ERROR, "Missing 'type' key in record buffer.")
                return False
            kind = buffer["type"]

        resolved = Kind.parse(kind)
        if resolved is None:
            self.reporter.report(Level.ERROR, f"Invalid document type: {kind!r}.")
            return False

        record, errors = resolved.record_class.from_buffer(buffer)
        for name, message in errors.items():
            self.reporter.report(Level.WARN, f"Invalid value for {name}, leaving it unset. {message}")

        path = self.collection_path(resolved)
        records = self.read_collection(path)
        records.append(record.to_dict())
        self._save(path, records)
        logger.info("Added %s %r to %s", resolved.value, record.title, path.name)
        return True

    # -- Remove by title -----------------------------------------------------

    def remove_entry(self, path: Path, title: str, info_field: str) -> Any:
        """Remove every record with the given title.

        Args:
            path: Collection file
            title: Title to match exactly
            info_field: Field whose value is returned from the first matching record

        Returns:
            The captured field value, or None if no record matched
        """
        path = Path(path)
        records = self.read_collection(path)

        captured = None
        removed = 0
        # Descending indices stay valid while deleting
        for i in range(len(records) - 1, -1, -1):
            record = records[i]
            if _title_of(record) == title:
                captured = record.get(info_field)
                del records[i]
                removed += 1

        if not removed:
            self.reporter.report(Level.ERROR, f"Entry '{title}' not found in database.")
            return None

        self._save(path, records)
        logger.info("Removed %d record(s) titled %r from %s", removed, title, path.name)
        return captured

    # -- Edit field by title -------------------------------------------------

    def edit_field_by_title(self, path: Path, title: str, prompt: PromptFunc | None = None) -> bool:
        """Interactively change one field of the first record with a title.

        Asks for a field name, then for its new value. The title itself
        cannot be edited; asking for it re-prompts for another field.

        Args:
            path: Collection file
            title: Title of the record to edit
            prompt: Callable asking the user a question (rich prompt by default)

        Returns:
            True if the record was updated
        """
        ask = prompt or prompt_user
        path = Path(path)

        while True:
            records = self.read_collection(path)
            index = _first_index(records, title)
            if index is None:
                self.reporter.report(Level.ERROR, f"No entry found with title: {title}")
                return False

            target = dict(records[index])
            field = ask("Enter the field to edit (e.g., authors, path, subTitle)").strip()

            if field not in target:
                self.reporter.report(Level.ERROR, f"Field '{field}' does not exist in '{title}'.")
                return False
            if field == "title":
                self.reporter.report(Level.WARN, "You cannot edit the title of the file, try another field.")
                continue
            break

        target[field] = ask("Enter the new value")
        records[index] = target
        self._save(path, records)
        self.reporter.report(Level.SUCCESS, "Field updated successfully.")
        return True

    # -- Queries -------------------------------------------------------------

    def get_entry(self, path: Path, title: str) -> dict[str, Any] | None:
        """Return the first record with the given title."""
        records = self.read_collection(Path(path))
        index = _first_index(records, title)
        return None if index is None else records[index]

    def find_entries(
        self,
        kind: Kind | None = None,
        query: str | None = None,
        author: str | None = None,
    ) -> list[tuple[Kind, dict[str, Any]]]:
        """Search collections by text and author.

        Args:
            kind: Only search this kind's collection (all kinds if None)
            query: Case-insensitive substring of title or subTitle
            author: Case-insensitive substring of any author

        Returns:
            (kind, record) pairs in collection order
        """
        kinds = [kind] if kind is not None else list(Kind)
        results = []

        for k in kinds:
            for record in self.read_collection(self.collection_path(k)):
                if not isinstance(record, dict):
                    continue
                if query:
                    haystack = " ".join(
                        str(record.get(name) or "") for name in ("title", "subTitle")
                    ).lower()
                    if query.lower() not in haystack:
                        continue
                if author:
                    authors = record.get("authors") or []
                    if isinstance(authors, str):
                        authors = [authors]
                    if not any(author.lower() in str(a).lower() for a in authors):
                        continue
                results.append((k, record))

        return results

    # -- Library files -------------------------------------------------------

    def import_document(self, source: Path, kind: Kind) -> Path:
        """Copy a document into the library folder for its kind.

        Returns:
            Path of the copy inside the library

        Raises:
            FileNotFoundError: If source doesn't exist
            ValueError: If libraryPath is not configured
            FileExistsError: If a different file already has that name
        """
        source = Path(source).expanduser()
        if not source.is_file():
            raise FileNotFoundError(f"Document not found: {source}")

        library = self.get_library_path()
        if not library:
            raise ValueError("libraryPath is not set. Run 'pdfmanager config set libraryPath DIR'.")

        target_dir = Path(library).expanduser() / kind.folder
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / source.name

        if target.exists():
            if target.resolve() == source.resolve():
                return target
            raise FileExistsError(f"{target} already exists in the library")

        shutil.copy2(source, target)
        logger.info("Copied %s to %s", source, target)
        return target
