# src/invoice_analysis/errors.py

class InvoiceAnalysisError(Exception):
    """Base class for every failure raised by the invoice analysis pipeline."""


class ConfigurationError(InvoiceAnalysisError, ValueError):
    """Endpoint or API key for Document Intelligence is missing."""


class InvalidRequestError(InvoiceAnalysisError, ValueError):
    """The caller sent something we cannot work with (maps to HTTP 400)."""


class AnalyzerError(InvoiceAnalysisError, RuntimeError):
    """Document Intelligence rejected the document or the operation failed."""


class NoDocumentsFoundError(InvoiceAnalysisError):
    """The analysis finished but produced zero analyzed documents."""

    def __init__(self, message: str = "No documents found in the analysis result."):
        super().__init__(message)


class DocumentDownloadError(InvoiceAnalysisError):
    """The document behind a fileUrl could not be downloaded."""
