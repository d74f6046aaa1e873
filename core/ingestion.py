"""
Handles loading plain text from uploaded question-bank files (DOCX, PDF, TXT).
Returns raw text string, one paragraph per line.
"""
import io

import fitz  # PyMuPDF
from docx import Document


def load_pdf(file_bytes: bytes) -> str:
    doc = fitz.open(stream=file_bytes, filetype="pdf")
    text = ""
    for page in doc:
        text += page.get_text()
    doc.close()
    return text.strip()


def load_docx(file_bytes: bytes) -> str:
    doc = Document(io.BytesIO(file_bytes))
    return "\n".join(p.text for p in doc.paragraphs).strip()


def load_txt(file_bytes: bytes) -> str:
    # Chinese question banks saved from older editors are often GBK
    for encoding in ("utf-8", "gbk"):
        try:
            return file_bytes.decode(encoding).strip()
        except UnicodeDecodeError:
            continue
    return file_bytes.decode("latin-1").strip()


def ingest_source(source_type: str, data: bytes) -> str:
    """
    source_type: 'docx', 'pdf', 'txt'
    data: raw file bytes
    """
    if source_type == "docx":
        return load_docx(data)
    elif source_type == "pdf":
        return load_pdf(data)
    elif source_type == "txt":
        return load_txt(data)
    else:
        raise ValueError(f"Unsupported source type: {source_type}")
