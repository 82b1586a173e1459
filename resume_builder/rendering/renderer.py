"""Document renderers.

Writes a TailoredDocument to `<output_dir>/<company> <job title>/resume.<ext>`
as JSON or Markdown (Jinja2 template).
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from jinja2 import Environment, FileSystemLoader

from resume_builder.assembly.models import TailoredDocument
from resume_builder.corpus.models import Category, DateRange

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

_UNSAFE_PATH_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


@dataclass
class RenderResult:
    """Result of a rendering operation."""

    success: bool
    file_path: str | None = None
    error: str | None = None
    rendered_at: datetime = field(default_factory=datetime.now)


@runtime_checkable
class DocumentRenderer(Protocol):
    """Anything that turns a TailoredDocument into a file."""

    def render(self, document: TailoredDocument, output_dir: Path) -> RenderResult: ...


def sanitize_folder_name(value: str) -> str:
    """Strip characters that are unsafe in folder names and collapse spaces."""
    cleaned = _UNSAFE_PATH_CHARS.sub("", value)
    cleaned = re.sub(r"\s+", " ", cleaned)
    return cleaned.strip(" .")


def document_folder(document: TailoredDocument) -> str:
    """Folder name for a document: `<company> <job title>`.

    Falls back to the job title alone, then to `tailored`.
    """
    parts = [part for part in (document.company, document.job_title) if part]
    return sanitize_folder_name(" ".join(parts)) or "tailored"


def format_date_range(date_range: DateRange | None) -> str | None:
    """Human-readable `Mon YYYY – Mon YYYY` (or `– Present`)."""
    if date_range is None:
        return None

    def fmt(value: date) -> str:
        return value.strftime("%b %Y")

    end = fmt(date_range.end) if date_range.end else "Present"
    return f"{fmt(date_range.start)} – {end}"


class _FileRenderer(ABC):
    extension = "txt"

    def _output_path(self, document: TailoredDocument, output_dir: Path) -> Path:
        folder = Path(output_dir) / document_folder(document)
        folder.mkdir(parents=True, exist_ok=True)
        return folder / f"resume.{self.extension}"

    @abstractmethod
    def _serialize(self, document: TailoredDocument) -> str:
        """Return the file contents for `document`."""

    def render(self, document: TailoredDocument, output_dir: Path) -> RenderResult:
        """Render the document into its folder under `output_dir`.

        Returns:
            RenderResult with file path or error.
        """
        try:
            content = self._serialize(document)
            output_path = self._output_path(document, output_dir)
            output_path.write_text(content, encoding="utf-8")

            logger.info(f"Rendered resume to {output_path}")

            return RenderResult(success=True, file_path=str(output_path))

        except Exception as e:
            logger.error(f"Failed to render resume: {e}")
            return RenderResult(success=False, error=str(e))


class JsonRenderer(_FileRenderer):
    """Writes the document model as indented JSON."""

    extension = "json"

    def _serialize(self, document: TailoredDocument) -> str:
        return json.dumps(document.to_dict(), indent=2, ensure_ascii=False) + "\n"


class MarkdownRenderer(_FileRenderer):
    """Renders the document through a Jinja2 Markdown template."""

    extension = "md"

    def __init__(
        self, template_dir: Path | None = None, template_name: str = "resume.md.j2"
    ):
        """Initialize the Markdown renderer.

        Args:
            template_dir: Directory holding templates. Uses the bundled
                templates if not provided or missing.
            template_name: Template filename.
        """
        if template_dir is None or not Path(template_dir).exists():
            template_dir = TEMPLATE_DIR

        self.template_name = template_name
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def _contact_line(self, document: TailoredDocument) -> str:
        contact = document.contact
        if contact is None:
            return ""
        fields = [
            contact.email,
            contact.phone,
            contact.website,
            contact.linkedin,
            contact.address,
        ]
        return " | ".join(value for value in fields if value)

    def _prepare_sections(self, document: TailoredDocument) -> list[dict[str, Any]]:
        return [
            {
                "title": section.title,
                "is_summary": section.category == Category.SUMMARY,
                "entries": [
                    {
                        "text": selected.unit.text,
                        "dates": format_date_range(selected.unit.date_range),
                    }
                    for selected in section.units
                ],
            }
            for section in document.sections
        ]

    def _serialize(self, document: TailoredDocument) -> str:
        template = self.jinja_env.get_template(self.template_name)
        target = " at ".join(
            part for part in (document.job_title, document.company) if part
        )
        return template.render(
            document=document,
            contact=document.contact,
            contact_line=self._contact_line(document),
            target=target,
            sections=self._prepare_sections(document),
        ).rstrip() + "\n"
