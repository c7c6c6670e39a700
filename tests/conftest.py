"""Shared pytest fixtures.

Word documents are built in memory with python-docx; content controls are
appended to the body as raw WordprocessingML.
"""

import io
import zipfile
from collections.abc import Callable
from xml.sax.saxutils import quoteattr

import pytest
from docx import Document
from docx.oxml import parse_xml
from docx.oxml.ns import nsdecls

from template_ingest.core.config import Settings

WORD_DOCUMENT_CONTENT_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"
)


def _sdt_properties(tag: str | None, alias: str | None) -> str:
    parts = []
    if alias is not None:
        parts.append(f"<w:alias w:val={quoteattr(alias)}/>")
    if tag is not None:
        parts.append(f"<w:tag w:val={quoteattr(tag)}/>")
    return "<w:sdtPr>" + "".join(parts) + "</w:sdtPr>"


@pytest.fixture
def content_control() -> Callable[..., str]:
    """Return a builder for block- or run-level content control XML."""

    def build(
        tag: str | None = None,
        alias: str | None = None,
        text: str = "placeholder",
        inline: bool = False,
        with_properties: bool = True,
    ) -> str:
        sdt_pr = _sdt_properties(tag, alias) if with_properties else ""
        if inline:
            return (
                f"<w:p {nsdecls('w')}><w:r><w:t xml:space=\"preserve\">Dear </w:t></w:r>"
                f"<w:sdt>{sdt_pr}<w:sdtContent><w:r><w:t>{text}</w:t></w:r></w:sdtContent></w:sdt>"
                "</w:p>"
            )
        return (
            f"<w:sdt {nsdecls('w')}>{sdt_pr}"
            f"<w:sdtContent><w:p><w:r><w:t>{text}</w:t></w:r></w:p></w:sdtContent>"
            "</w:sdt>"
        )

    return build


@pytest.fixture
def docx_bytes() -> Callable[..., bytes]:
    """Return a builder that packages body XML fragments into a .docx."""

    def build(*fragments: str, paragraphs: tuple[str, ...] = ("Engagement letter",)) -> bytes:
        doc = Document()
        for text in paragraphs:
            doc.add_paragraph(text)
        body = doc.element.body
        for fragment in fragments:
            body.append(parse_xml(fragment))
        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()

    return build


@pytest.fixture
def tagged_docx(docx_bytes, content_control) -> Callable[..., bytes]:
    """Return a builder for a .docx holding one content control per tag."""

    def build(*tags: str) -> bytes:
        return docx_bytes(*(content_control(tag=tag) for tag in tags))

    return build


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated to a temporary directory."""
    return Settings(
        _env_file=None,
        template_storage_dir=tmp_path / "templates",
        template_store_type="filesystem",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'templates.db'}",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def repackage() -> Callable[..., bytes]:
    """Return a builder that rewrites parts of an existing Word package.

    ``main_content_type`` replaces the content type of the main document
    part, turning a .docx into a .dotx, .docm or .dotm. ``parts`` replaces
    whole part bodies by zip member name.
    """

    def build(
        content: bytes,
        main_content_type: str | None = None,
        parts: dict[str, bytes] | None = None,
    ) -> bytes:
        parts = parts or {}
        buffer = io.BytesIO()
        with (
            zipfile.ZipFile(io.BytesIO(content)) as source,
            zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as target,
        ):
            for item in source.infolist():
                data = parts.get(item.filename, source.read(item.filename))
                if item.filename == "[Content_Types].xml" and main_content_type:
                    data = data.replace(
                        WORD_DOCUMENT_CONTENT_TYPE.encode("ascii"),
                        main_content_type.encode("ascii"),
                    )
                target.writestr(item, data)
        return buffer.getvalue()

    return build
