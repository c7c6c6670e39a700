"""Content control tag extractor strategy.

Opens a Word package with python-docx and collects the identifiers of its
content controls (``w:sdt`` elements) in document order. Documents,
templates and their macro-enabled variants are all read the same way: the
part behind the package's officeDocument relationship is parsed whatever
its content type.
"""

import asyncio
import io
import logging
from typing import Any

from docx.oxml.ns import qn

from template_ingest.interfaces.template import BaseTagExtractor, MalformedDocumentError

logger = logging.getLogger(__name__)


def open_document_tree(content: bytes) -> Any:
    """Open a Word package and return the root element of its main document part.

    Args:
        content: Raw bytes of the .docx, .dotx, .docm or .dotm package.

    Returns:
        The lxml root element (``w:document``) of the main document part.

    Raises:
        MalformedDocumentError: If the bytes are not a readable Word package.
    """
    try:
        from docx.opc.constants import RELATIONSHIP_TYPE as RT
        from docx.opc.package import OpcPackage
        from docx.oxml import parse_xml
    except ImportError:
        logger.error("python-docx not installed. Run: pip install python-docx")
        raise

    if not content:
        raise MalformedDocumentError("Document body is empty")

    try:
        package = OpcPackage.open(io.BytesIO(content))
        main_part = package.part_related_by(RT.OFFICE_DOCUMENT)
        root = parse_xml(main_part.blob)
    except Exception as e:
        logger.warning(f"Could not open document package: {e}")
        raise MalformedDocumentError(
            f"Could not open document package: {e}",
            context={"size": len(content), "reason": type(e).__name__},
        ) from e

    if root.tag != qn("w:document"):
        raise MalformedDocumentError(
            "Package main part is not a Word document",
            context={"size": len(content), "root": root.tag},
        )
    return root


def _property_value(sdt_pr: Any, name: str) -> str | None:
    """Return the trimmed ``w:val`` of a direct child of ``w:sdtPr``, or None if blank."""
    child = sdt_pr.find(qn(name))
    if child is None:
        return None
    value = child.get(qn("w:val"))
    if value is None or not value.strip():
        return None
    return value.strip()


def extract_tags_from_tree(root: Any) -> list[str]:
    """Collect placeholder identifiers from a WordprocessingML element tree.

    The tag (``w:tag``) of each content control is used when set; otherwise
    its alias (``w:alias``). Controls with neither are skipped. Exact
    duplicates are collapsed and the first occurrence keeps its position.

    Args:
        root: Root lxml element to traverse.

    Returns:
        Ordered list of unique identifiers.
    """
    tags: dict[str, None] = {}

    for sdt in root.iter(qn("w:sdt")):
        sdt_pr = sdt.find(qn("w:sdtPr"))
        if sdt_pr is None:
            continue

        value = _property_value(sdt_pr, "w:tag") or _property_value(sdt_pr, "w:alias")
        if value is None:
            continue

        tags.setdefault(value, None)

    return list(tags)


def read_document_tags(content: bytes) -> list[str]:
    """Open a package and extract its tags; blocking, run off the event loop."""
    return extract_tags_from_tree(open_document_tree(content))


class ContentControlTagExtractor(BaseTagExtractor):
    """Extracts placeholder tags from Word content controls."""

    async def extract(self, content: bytes) -> list[str]:
        """Extract placeholder tags from a Word package body.

        Parsing runs in the default executor so a large upload does not
        stall other requests.

        Args:
            content: Raw bytes of the Word package.

        Returns:
            Ordered, de-duplicated list of tag identifiers.

        Raises:
            MalformedDocumentError: If the package cannot be opened or parsed.
        """
        logger.info(f"Starting tag extraction: {len(content)} bytes")

        loop = asyncio.get_running_loop()
        try:
            tags = await loop.run_in_executor(None, read_document_tags, content)
        except MalformedDocumentError:
            raise
        except Exception as e:
            logger.error(f"Tag extraction failed: {e}", exc_info=True)
            raise MalformedDocumentError(f"Tag extraction failed: {e}") from e

        logger.info(f"Extraction complete: {len(tags)} tags found")
        return tags

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".docx", ".docm", ".dotx", ".dotm"}
