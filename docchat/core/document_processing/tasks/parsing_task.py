"""
PDF extraction task using LangChain PyPDFLoader.

Turns downloaded bytes into page-level chunks. PyPDFLoader reads from a
path, so the bytes are staged in a temporary directory that is always
removed afterwards.

Dependencies: langchain_community.document_loaders, pypdf
System role: Extraction stage of the ingestion pipeline
"""

import hashlib
import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from langchain_community.document_loaders import PyPDFLoader

from docchat.core.document_processing.models import Chunk
from docchat.core.document_processing.tasks.fetch_task import is_recognized_document_type
from docchat.core.exceptions import ParsingError

logger = logging.getLogger(__name__)


@dataclass
class ExtractedDocument:
    """Pages found in a PDF and the chunks worth embedding."""

    page_count: int
    chunks: list[Chunk] = field(default_factory=list)


def chunk_id_for(document_id: str, page: int, content: str) -> str:
    digest = hashlib.sha256(f"{document_id}:{page}:{content}".encode("utf-8")).hexdigest()
    return f"p{page}-{digest[:16]}"


class ParsingTask:
    """Parse PDF bytes into page-level chunks."""

    def parse_bytes(
        self,
        content: bytes,
        document_id: str,
        file_name: str | None = None,
        content_type: str | None = None,
    ) -> ExtractedDocument:
        """
        Extract page text from PDF bytes.

        Every page counts towards page_count; pages without text are not
        turned into chunks.

        Args:
            content: Raw file bytes
            document_id: Owning document ID (feeds chunk IDs)
            file_name: Display name, for logs and errors
            content_type: Declared content type; unrecognized types only warn

        Returns:
            ExtractedDocument: Page count and non-empty page chunks

        Raises:
            ParsingError: Empty input or unreadable PDF
        """
        if not is_recognized_document_type(content_type):
            logger.warning(
                f"{__name__}:parse_bytes - File type is not PDF: {content_type}, attempting extraction anyway",
                extra={"document_id": document_id, "file_name": file_name},
            )

        if not content:
            raise ParsingError("Downloaded file is empty", document_id=document_id, file_name=file_name)

        temp_dir = tempfile.mkdtemp(prefix="docchat_")
        try:
            path = Path(temp_dir) / "document.pdf"
            path.write_bytes(content)
            pages = PyPDFLoader(str(path)).load()
        except Exception as e:
            raise ParsingError(
                f"Failed to parse PDF: {e}",
                document_id=document_id,
                file_name=file_name,
            ) from e
        finally:
            shutil.rmtree(temp_dir, ignore_errors=True)

        chunks = []
        for position, page in enumerate(pages):
            text = page.page_content.strip()
            if not text:
                continue
            page_number = int(page.metadata.get("page", position)) + 1
            chunks.append(
                Chunk(
                    id=chunk_id_for(document_id, page_number, text),
                    content=text,
                    page=page_number,
                    metadata={"page_label": page.metadata.get("page_label")},
                )
            )

        logger.info(
            f"{__name__}:parse_bytes - Extracted {len(pages)} pages, {len(chunks)} with text",
            extra={"document_id": document_id},
        )
        return ExtractedDocument(page_count=len(pages), chunks=chunks)
