import json
import logging

import azure.functions as func

from src.invoice_analysis.config import AnalyzerConfig
from src.invoice_analysis.service import InvoiceProcessor


def build_processor() -> InvoiceProcessor:
    return InvoiceProcessor(AnalyzerConfig.from_env())


def main(req: func.HttpRequest) -> func.HttpResponse:
    """
    Azure Function HTTP trigger (POST /api/analyze-invoice):
    - Accepts an invoice as a multipart/form-data upload
    - Sends it to Azure Document Intelligence
    - Normalizes the result
    - Returns the NormalizedInvoice as JSON
    """
    logging.info("AnalyzeInvoice function triggered.")

    try:
        # 1. Basic input validation
        content_type = req.headers.get("Content-Type", "")
        if "multipart/form-data" not in content_type.lower():
            logging.warning(f"Unexpected Content-Type: {content_type}")
            return _json_response({"error": "Multipart content expected."}, status_code=400)

        try:
            upload = next(iter(req.files.values()), None)
        except Exception as e:
            logging.warning(f"Could not parse multipart body: {e}")
            return _json_response({"error": "Malformed multipart body."}, status_code=400)

        if upload is None:
            return _json_response(
                {"error": "No document found in multipart body."}, status_code=400
            )

        document_bytes = upload.read()
        if not document_bytes:
            logging.warning("Uploaded document is empty.")
            return _json_response({"error": "Uploaded document is empty."}, status_code=400)

        # 2. Call core service logic
        try:
            normalized = build_processor().process_bytes(
                document_bytes,
                content_type=upload.content_type or "application/octet-stream",
            )
        except Exception as e:
            logging.exception(f"Error processing invoice: {e}")
            return _json_response(
                {"error": f"Error processing invoice: {e}"}, status_code=500
            )

        # 3. Success response
        logging.info(
            "Invoice analysis completed successfully. "
            f"invoice_number={normalized.get('InvoiceNumber')!r}, "
            f"total_amount={normalized.get('TotalAmount')!r}"
        )

        return _json_response(normalized, status_code=200)

    except Exception as e:
        # Catch-all safeguard
        logging.exception(f"Unexpected error in analyze_invoice: {e}")
        return _json_response({"error": f"Unexpected server error: {e}"}, status_code=500)


def _json_response(payload: dict, status_code: int = 200) -> func.HttpResponse:
    """
    Small helper to return JSON responses consistently.
    """
    return func.HttpResponse(
        json.dumps(payload, indent=2),
        status_code=status_code,
        mimetype="application/json",
    )
