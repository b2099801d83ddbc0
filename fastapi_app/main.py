import logging
from typing import Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.invoice_analysis.config import AnalyzerConfig
from src.invoice_analysis.errors import InvalidRequestError
from src.invoice_analysis.service import InvoiceProcessor

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
)
logger = logging.getLogger(__name__)

ACCEPTED_UPLOAD_TYPES = ("application/pdf", "application/octet-stream")

app = FastAPI(
    title="Invoice Analysis API (FastAPI + Azure Document Intelligence)",
    description="Send an invoice (file URL or upload) and get normalized JSON back.",
    version="1.0.0",
)


class InvoiceRequest(BaseModel):
    ocr_text: Optional[str] = Field(default=None, alias="ocrText")
    file_url: Optional[str] = Field(default=None, alias="fileUrl")


def get_processor() -> InvoiceProcessor:
    return InvoiceProcessor(AnalyzerConfig.from_env())


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return error_response("Malformed request body.", 400)


@app.get("/health")
def health_check():
    """
    Simple health endpoint so we can check the service is running.
    """
    return {"status": "ok"}


@app.post("/api/analyze-invoice")
def analyze_invoice_endpoint(request: InvoiceRequest):
    """
    Accepts {"ocrText": ..., "fileUrl": ...}. A fileUrl is downloaded and
    sent to Azure Document Intelligence; OCR text alone is echoed back.
    """
    logger.info(
        "Received analyze request (ocr_text=%s chars, file_url=%r)",
        len(request.ocr_text or ""),
        request.file_url,
    )

    if not request.ocr_text and not request.file_url:
        logger.warning("Invalid request received. Both OCR text and File URL are empty.")
        return error_response("Either OCR text or File URL must be provided.", 400)

    # Built here rather than via Depends so configuration errors surface as 500s.
    try:
        result = get_processor().process_request(request.ocr_text, request.file_url)
    except InvalidRequestError as e:
        return error_response(str(e), 400)
    except Exception as e:
        logger.error("Error processing invoice: %s", e)
        return error_response(str(e), 500)

    logger.info("Successfully processed invoice.")
    return JSONResponse(content=result)


@app.post("/extract")
def extract_invoice_endpoint(file: UploadFile = File(...)):
    """
    Accepts an invoice file upload, sends it to Azure Document Intelligence,
    normalizes the result, and returns JSON.
    """
    content_type = file.content_type or ""
    if content_type not in ACCEPTED_UPLOAD_TYPES and not content_type.startswith("image/"):
        return error_response(
            f"Unsupported content type: {content_type}. Expected application/pdf.", 400
        )

    try:
        document_bytes = file.file.read()
    except Exception as e:
        return error_response(f"Failed to read file: {e}", 400)

    if not document_bytes:
        return error_response("Uploaded file is empty.", 400)

    try:
        normalized = get_processor().process_bytes(document_bytes, content_type=content_type)
    except Exception as e:
        logger.error("Error processing invoice: %s", e)
        return error_response(f"Error processing invoice: {e}", 500)

    return JSONResponse(content=normalized)
