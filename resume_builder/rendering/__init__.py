"""Rendering of tailored documents to files.

Public API:
    - DocumentRenderer: Renderer protocol
    - JsonRenderer: Document model as JSON
    - MarkdownRenderer: Jinja2 Markdown resume
    - RenderResult: Outcome of a render
"""

from resume_builder.rendering.renderer import (
    DocumentRenderer,
    JsonRenderer,
    MarkdownRenderer,
    RenderResult,
    document_folder,
    format_date_range,
    sanitize_folder_name,
)

__all__ = [
    "DocumentRenderer",
    "JsonRenderer",
    "MarkdownRenderer",
    "RenderResult",
    "document_folder",
    "format_date_range",
    "sanitize_folder_name",
]
