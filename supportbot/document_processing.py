"""Loading uploaded files into knowledge-base documents."""

import sqlite3
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import pypdf
from pypdf.errors import PyPdfError

from .config import config
from .models import Document, DocumentType
from .storage import KnowledgeStore

logger = config.get_logger(__name__)

UNEXTRACTED_TEMPLATE = (
    "File uploaded: {name}. Content extraction not implemented for this file type."
)
MAX_BATCH_FILES = 10


@dataclass
class BatchUploadResult:
    """Documents saved by a multi-file upload and the files that failed."""

    uploaded: list[Document] = field(default_factory=list)
    errors: list[dict[str, str]] = field(default_factory=list)


class DocumentLoader:
    """Handles loading of PDF, text, markdown and Word uploads."""

    @staticmethod
    def load_pdf(file_path: Path) -> str:
        """Load text content from a PDF file.

        Returns:
            The extracted text content from the PDF as a string.
        """
        try:
            with file_path.open("rb") as file:
                pdf_reader = pypdf.PdfReader(file)
                text = ""
                for page_num, page in enumerate(pdf_reader.pages):
                    page_text = page.extract_text()
                    text += f"\n--- Page {page_num + 1} ---\n{page_text}\n"
        except Exception:
            logger.exception("Error loading PDF %s", file_path)
            raise
        else:
            return text

    @staticmethod
    def load_text(file_path: Path) -> str:
        """Load content from a TXT or Markdown file, keeping line endings as stored.

        Returns:
            The file content as a string.
        """
        try:
            with file_path.open(encoding="utf-8", newline="") as file:
                text = file.read()
            logger.info("Successfully loaded text file %s", file_path.name)
        except Exception:
            logger.exception("Error loading text file %s", file_path)
            raise
        else:
            return text

    @classmethod
    def extract_content(cls, file_path: Path, doc_type: DocumentType) -> str:
        """Extract text for a document type.

        Returns:
            The extracted text, or a placeholder for Word documents.
        """
        if doc_type is DocumentType.PDF:
            return cls.load_pdf(file_path)
        if doc_type in {DocumentType.TXT, DocumentType.MD}:
            return cls.load_text(file_path)
        logger.warning("No text extraction for %s, storing placeholder", file_path.name)
        return UNEXTRACTED_TEMPLATE.format(name=file_path.name)

    @classmethod
    def load_document(
        cls,
        file_path: Path,
        *,
        category: str | None = None,
        tags: Iterable[str] | str | None = None,
        max_size: int | None = None,
    ) -> Document:
        """Load an uploaded file as a knowledge-base document.

        Args:
            file_path: Path to the uploaded file.
            category: Optional document category.
            tags: Tags as an iterable or a comma-separated string.
            max_size: Upload size limit in bytes; defaults to config.MAX_FILE_SIZE.

        Returns:
            Document: Unsaved document with extracted content.

        Raises:
            ValueError: If the file type is not supported or the file is too large.
            FileNotFoundError: If the file does not exist.
        """
        doc_type = DocumentType.from_filename(file_path)
        if not file_path.exists():
            msg = f"No such file: {file_path}"
            raise FileNotFoundError(msg)

        size = file_path.stat().st_size
        limit = config.MAX_FILE_SIZE if max_size is None else max_size
        if size > limit:
            msg = f"File too large: {size} bytes (limit {limit})"
            raise ValueError(msg)

        content = cls.extract_content(file_path, doc_type)
        return Document(
            name=file_path.name,
            original_name=file_path.name,
            content=content,
            type=doc_type,
            size=size,
            category=category,
            tags=tags,  # type: ignore[arg-type]
        )

    @classmethod
    def upload_batch(
        cls,
        file_paths: Iterable[Path],
        store: KnowledgeStore,
        *,
        category: str | None = None,
        tags: Iterable[str] | str | None = None,
        max_size: int | None = None,
    ) -> BatchUploadResult:
        """Load and save several uploads, one document per file.

        A file that fails to load or save is reported in ``errors`` and does
        not stop the remaining files.

        Returns:
            BatchUploadResult: Saved documents and per-file errors.

        Raises:
            ValueError: If no files or more than MAX_BATCH_FILES are given.
        """
        paths = list(file_paths)
        if not paths:
            msg = "No files uploaded"
            raise ValueError(msg)
        if len(paths) > MAX_BATCH_FILES:
            msg = f"At most {MAX_BATCH_FILES} files can be uploaded at once"
            raise ValueError(msg)

        result = BatchUploadResult()
        for path in paths:
            try:
                document = cls.load_document(
                    path, category=category, tags=tags, max_size=max_size
                )
                result.uploaded.append(store.add_document(document))
            except (OSError, ValueError, sqlite3.Error, PyPdfError) as e:
                logger.exception("Error processing file %s", path.name)
                result.errors.append({"filename": path.name, "error": str(e)})

        logger.info(
            "%d files uploaded successfully, %d failed",
            len(result.uploaded),
            len(result.errors),
        )
        return result
