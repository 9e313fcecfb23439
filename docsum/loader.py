from pathlib import Path
from typing import List

try:
    import fitz  # PyMuPDF
except ImportError:  # pragma: no cover
    fitz = None  # type: ignore

from .errors import EmptyInputError


def load_pdf(path: str) -> List[str]:
    """Extract text per page from a PDF using PyMuPDF (fitz).

    Raises:
        RuntimeError: if PyMuPDF is not installed in current environment.
    """
    if fitz is None:
        raise RuntimeError("PyMuPDF (pymupdf) is not installed. Run 'pip install pymupdf'.")
    doc = fitz.open(path)
    pages = []
    try:
        for page in doc:
            text = page.get_text("text")
            if text:
                pages.append(text)
    finally:
        doc.close()
    return pages


def load_document(path: str) -> str:
    """Read a plain-text or PDF file into one string.

    Raises:
        FileNotFoundError: if ``path`` does not exist.
        EmptyInputError: if the file holds no text.
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"No such document: {path}")
    if p.suffix.lower() == ".pdf":
        text = "\n".join(load_pdf(str(p)))
    else:
        text = p.read_text(encoding="utf-8", errors="replace")
    if not text.strip():
        raise EmptyInputError(f"{path} contains no extractable text")
    return text
