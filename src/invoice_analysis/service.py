# src/invoice_analysis/service.py

import logging

from src.invoice_analysis.analyze_client import DocumentAnalysisClient
from src.invoice_analysis.config import AnalyzerConfig
from src.invoice_analysis.download import download_document
from src.invoice_analysis.errors import InvalidRequestError
from src.invoice_analysis.normalize_output import normalize_invoice

logger = logging.getLogger(__name__)


class InvoiceProcessor:
    """
    Core business logic shared by the Azure Function and the FastAPI app:
    - Takes raw document bytes (or a URL to fetch them from)
    - Calls Azure Document Intelligence
    - Normalizes the result

    It does NOT know anything about HTTP, status codes, request headers,
    or frameworks.
    """

    def __init__(self, config: AnalyzerConfig, client=None, downloader=None):
        self.config = config
        self.client = client or DocumentAnalysisClient(config)
        self.downloader = downloader or download_document

    def process_bytes(
        self, document_bytes: bytes, content_type: str = "application/octet-stream"
    ) -> dict:
        if not document_bytes:
            raise ValueError("Document bytes are empty.")

        raw_result = self.client.analyze(document_bytes, content_type=content_type)
        return normalize_invoice(raw_result)

    def process_url(self, file_url: str) -> dict:
        document_bytes = self.downloader(file_url, timeout=self.config.download_timeout)
        return self.process_bytes(document_bytes)

    def process_ocr_text(self, ocr_text: str) -> dict:
        # Placeholder: no field extraction from plain text yet.
        return {"ProcessedText": ocr_text}

    def process_request(self, ocr_text: str = None, file_url: str = None) -> dict:
        """
        Route a {ocrText, fileUrl} request. fileUrl wins when both are set.
        """
        if not ocr_text and not file_url:
            raise InvalidRequestError("Either OCR text or File URL must be provided.")

        if file_url:
            return self.process_url(file_url)

        logger.info("Processing invoice using provided OCR text.")
        return self.process_ocr_text(ocr_text)
