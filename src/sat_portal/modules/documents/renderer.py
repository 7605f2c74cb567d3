"""
Template Renderer

Fills ``{placeholder}`` tags in a .docx template using python-docx.

Tags are looked up in body paragraphs, tables (including nested tables)
and every header and footer. Word frequently splits a tag over several
runs; when that happens the paragraph's text is merged into its first
run before substitution, which keeps that run's formatting.

The output archive is re-packed with fixed timestamps so rendering the
same template with the same fields always yields identical bytes.
"""

import io
import logging
import re
import zipfile
from collections.abc import Iterator, Mapping

from docx import Document
from docx.document import Document as DocumentObject
from docx.table import Table
from docx.text.paragraph import Paragraph

from sat_portal.core.exceptions import RenderError, TemplateError

logger = logging.getLogger(__name__)

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

TAG_PATTERN = re.compile(r"\{([a-z0-9_]+)\}")
# A brace with no closing brace after it in the same paragraph
UNCLOSED_TAG_PATTERN = re.compile(r"\{[^}]*$")
MISSING_VALUE = "-"

# DOS epoch; zip entries cannot carry an earlier timestamp
_FIXED_ZIP_TIME = (1980, 1, 1, 0, 0, 0)


def _table_paragraphs(table: Table) -> Iterator[Paragraph]:
    for row in table.rows:
        for cell in row.cells:
            yield from cell.paragraphs
            for nested in cell.tables:
                yield from _table_paragraphs(nested)


def _container_paragraphs(container) -> Iterator[Paragraph]:
    yield from container.paragraphs
    for table in container.tables:
        yield from _table_paragraphs(table)


def iter_paragraphs(document: DocumentObject) -> Iterator[Paragraph]:
    """Every paragraph of the body, its tables, and all headers and footers."""
    yield from _container_paragraphs(document)
    for section in document.sections:
        for part in (
            section.header,
            section.footer,
            section.first_page_header,
            section.first_page_footer,
            section.even_page_header,
            section.even_page_footer,
        ):
            if not part.is_linked_to_previous:
                yield from _container_paragraphs(part)


def _substitute(text: str, fields: Mapping[str, str]) -> str:
    def value_for(match: re.Match) -> str:
        value = fields.get(match.group(1))
        return str(value) if value not in (None, "") else MISSING_VALUE

    return TAG_PATTERN.sub(value_for, text)


def fill_paragraph(paragraph: Paragraph, fields: Mapping[str, str]) -> None:
    """
    Replace the tags of one paragraph in place.

    Raises:
        RenderError: If the paragraph contains an unterminated tag
    """
    runs = paragraph.runs
    if not runs:
        return
    text = "".join(run.text for run in runs)
    if "{" not in text:
        return

    unclosed = UNCLOSED_TAG_PATTERN.search(text)
    if unclosed:
        raise RenderError(f"Unterminated tag {unclosed.group(0)!r} in template")

    tags_in_text = len(TAG_PATTERN.findall(text))
    tags_in_runs = sum(len(TAG_PATTERN.findall(run.text)) for run in runs)

    if tags_in_text == tags_in_runs:
        for run in runs:
            if "{" in run.text:
                run.text = _substitute(run.text, fields)
        return

    # A tag spans runs: collapse the paragraph into its first run
    runs[0].text = _substitute(text, fields)
    for run in runs[1:]:
        run.text = ""


def _repack(data: bytes) -> bytes:
    source = zipfile.ZipFile(io.BytesIO(data))
    output = io.BytesIO()
    with zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED) as target:
        for info in source.infolist():
            entry = zipfile.ZipInfo(info.filename, date_time=_FIXED_ZIP_TIME)
            entry.compress_type = zipfile.ZIP_DEFLATED
            entry.external_attr = 0o600 << 16
            target.writestr(entry, source.read(info.filename))
    return output.getvalue()


def render(template: bytes | None, fields: Mapping[str, str]) -> bytes:
    """
    Render a .docx template with the given field values.

    Tags without a value render as "-".

    Args:
        template: Template bytes
        fields: Placeholder name -> value

    Returns:
        The rendered document

    Raises:
        TemplateError: If there is no template or it is not a readable .docx
        RenderError: If a tag is malformed or the document cannot be written
    """
    if not template:
        raise TemplateError("No master template uploaded")

    try:
        document = Document(io.BytesIO(template))
    except Exception as e:
        logger.error(f"Template could not be opened: {e}")
        raise TemplateError(f"Template is not a valid .docx document: {e}") from e

    for paragraph in iter_paragraphs(document):
        fill_paragraph(paragraph, fields)

    try:
        buffer = io.BytesIO()
        document.save(buffer)
        return _repack(buffer.getvalue())
    except Exception as e:
        logger.error(f"Rendered document could not be written: {e}")
        raise RenderError(f"Failed to write rendered document: {e}") from e
