"""
Handles loading text from PDF, DOCX and TXT/MD files.
The caller declares the format; nothing is sniffed from the bytes.
Returns raw text string, or raises EmptyDocument / ExtractionFailed.
"""
import io

import docx
import fitz  # PyMuPDF

from core.errors import EmptyDocument, ExtractionFailed

# File-picker filters for each declared format
ACCEPTED_EXTENSIONS = {
    "pdf": (".pdf",),
    "docx": (".docx",),
    "txt": (".txt", ".md"),
}


def load_pdf(file_bytes: bytes) -> str:
    doc = fitz.open(stream=file_bytes, filetype="pdf")
    pages = []
    try:
        for page in doc:
            # words are (x0, y0, x1, y1, text, block, line, word)
            words = page.get_text("words")
            pages.append(" ".join(w[4] for w in words))
    finally:
        doc.close()
    return "\n".join(pages)


def load_docx(file_bytes: bytes) -> str:
    document = docx.Document(io.BytesIO(file_bytes))
    return "\n".join(p.text for p in document.paragraphs)


def load_txt(file_bytes: bytes) -> str:
    try:
        return file_bytes.decode("utf-8")
    except UnicodeDecodeError:
        return file_bytes.decode("latin-1")


LOADERS = {
    "pdf": load_pdf,
    "docx": load_docx,
    "txt": load_txt,
}


def ingest_source(source_type: str, data: bytes) -> str:
    """
    source_type: 'pdf', 'docx', 'txt'
    data: raw file bytes
    """
    loader = LOADERS.get(source_type)
    if loader is None:
        raise ExtractionFailed(f"Unsupported document format: {source_type}")

    try:
        text = loader(data)
    except Exception as e:
        raise ExtractionFailed(f"Could not read this {source_type.upper()} file: {e}") from e

    if not text.strip():
        raise EmptyDocument()
    return text
