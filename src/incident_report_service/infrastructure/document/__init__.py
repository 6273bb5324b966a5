"""Document export collaborators."""

from incident_report_service.infrastructure.document.pdf_writer import PdfDocumentWriter

__all__ = [
    "PdfDocumentWriter",
]
