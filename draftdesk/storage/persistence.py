"""Project file persistence with schema fallback."""
import json
import os
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from ..config.constants import PROJECT_SUFFIX
from ..errors import CorruptFile, FileIOError, SchemaMismatch
from ..export.txt_exporter import TextExporter
from ..models import Chapter, Project
from ..models.project import default_wiki
from ..utils.logging import get_logger


logger = get_logger("persistence")

PathLike = Union[str, Path]
SchemaParser = Callable[[Any], Project]


def with_default_suffix(path: PathLike, suffix: str) -> Path:
    """Append suffix when the file name has no extension."""
    path = Path(path)
    if not path.suffix:
        path = path.with_name(path.name + suffix)
    return path


def parse_current_schema(payload: Any) -> Project:
    """
    Current format: {"chapters": [...], "wiki": [...]}.

    A missing or empty wiki is given the default entry; a missing or empty
    chapter list means the payload is not in this format.
    """
    if not isinstance(payload, dict):
        raise SchemaMismatch("payload is not an object")

    chapters = payload.get("chapters")
    if not isinstance(chapters, list) or not chapters:
        raise SchemaMismatch("no chapters")

    wiki = payload.get("wiki") or []
    try:
        return Project(
            chapters=[Chapter.model_validate(c) for c in chapters],
            wiki=wiki or default_wiki(),
        )
    except ValidationError as e:
        raise SchemaMismatch(str(e)) from e


def parse_legacy_schema(payload: Any) -> Project:
    """Legacy format: a bare chapter array without a wiki section."""
    if not isinstance(payload, list) or not payload:
        raise SchemaMismatch("payload is not a non-empty chapter array")

    try:
        chapters = [Chapter.model_validate(c) for c in payload]
    except ValidationError as e:
        raise SchemaMismatch(str(e)) from e
    return Project(chapters=chapters, wiki=default_wiki())


# Tried in order; the first parser that succeeds wins
SCHEMA_PARSERS: List[Tuple[str, SchemaParser]] = [
    ("current", parse_current_schema),
    ("legacy", parse_legacy_schema),
]


class PersistenceManager:
    """Reads and writes project files."""

    def __init__(self, parsers: Optional[Sequence[Tuple[str, SchemaParser]]] = None):
        self.parsers = list(parsers or SCHEMA_PARSERS)

    def save(self, path: PathLike, project: Project) -> Path:
        """
        Write project as indented JSON.

        The data goes to a temporary file first and replaces the target only
        once fully written, so a failed save leaves the old file intact.

        Returns:
            The path actually written (with the default suffix applied)

        Raises:
            FileIOError: If the file cannot be written
        """
        path = with_default_suffix(path, PROJECT_SUFFIX)
        data = json.dumps(project.to_dict(), indent=2, ensure_ascii=False)
        tmp_path = path.with_name(path.name + ".tmp")

        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.error(f"Save to {path} failed: {e}")
            try:
                tmp_path.unlink()
            except OSError:
                pass
            raise FileIOError(f"Could not save {path}: {e.strerror or e}") from e

        logger.info(f"Saved {len(project.chapters)} chapters to {path}")
        return path

    def load(self, path: PathLike) -> Project:
        """
        Read a project file, trying each known schema in turn.

        Raises:
            FileIOError: If the file cannot be read
            CorruptFile: If no schema matches
        """
        path = with_default_suffix(path, PROJECT_SUFFIX)

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Load from {path} failed: {e}")
            raise FileIOError(f"Could not open {path}: {e.strerror or e}") from e
        except UnicodeDecodeError as e:
            logger.warning(f"{path} is not UTF-8 text: {e}")
            raise CorruptFile("Corrupt file format.") from e

        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            logger.warning(f"{path} is not valid JSON: {e}")
            raise CorruptFile("Corrupt file format.") from e

        for name, parser in self.parsers:
            try:
                project = parser(payload)
            except SchemaMismatch as e:
                logger.debug(f"{path}: {name} schema rejected ({e})")
                continue
            logger.info(f"Loaded {path} using {name} schema")
            return project

        raise CorruptFile("Corrupt file format.")

    def export(self, path: PathLike, project: Project) -> Path:
        """Write the plain-text manuscript (one-way)."""
        return TextExporter(project).export(path)
