"""Plain-text manuscript exporter."""

from pathlib import Path
from typing import Union

from jinja2 import Template

from ..config.constants import EXPORT_SUFFIX
from ..errors import FileIOError
from ..utils.logging import get_logger


logger = get_logger("export")

# Chapter header, blank line, content, blank-line separator
MANUSCRIPT_TEMPLATE = (
    "{% for chapter in chapters %}"
    "# Chapter {{ loop.index }}: {{ chapter.title }}\n\n"
    "{{ chapter.content }}\n\n"
    "{% endfor %}"
)


class TextExporter:
    """Export a project's chapters to a single plain-text file."""

    def __init__(self, project):
        """
        Initialize text exporter.

        Args:
            project: Project to export
        """
        self.project = project

    def build_text(self) -> str:
        """
        Build the manuscript.

        Each chapter becomes a '# Chapter N: Title' header, a blank line,
        its content and a blank-line separator. Notes and wiki are left out.
        """
        template = Template(MANUSCRIPT_TEMPLATE)
        return template.render(chapters=self.project.chapters)

    def export(self, output_path: Union[str, Path]) -> Path:
        """
        Write the manuscript.

        Args:
            output_path: Target file; '.txt' is appended when it has no extension

        Returns:
            Path to the written file

        Raises:
            FileIOError: If the file cannot be written
        """
        output_path = Path(output_path)
        if not output_path.suffix:
            output_path = output_path.with_name(output_path.name + EXPORT_SUFFIX)

        try:
            output_path.write_text(self.build_text(), encoding='utf-8')
        except OSError as e:
            logger.error(f"Export to {output_path} failed: {e}")
            raise FileIOError(f"Could not export to {output_path}: {e.strerror or e}") from e

        logger.info(f"Exported {len(self.project.chapters)} chapters to {output_path}")
        return output_path
