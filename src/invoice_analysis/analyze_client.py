# src/invoice_analysis/analyze_client.py

import json
import logging
import time

import requests

from src.invoice_analysis.config import AnalyzerConfig
from src.invoice_analysis.errors import AnalyzerError

logger = logging.getLogger(__name__)

INVOICE_MODEL_ID = "prebuilt-invoice"
REQUEST_TIMEOUT = 30          # seconds per individual HTTP call


class DocumentAnalysisClient:
    """
    Minimal client for the Azure Document Intelligence REST API.

    Submits a document to a prebuilt model and blocks until the long-running
    operation finishes, returning the raw JSON result.
    """

    def __init__(self, config: AnalyzerConfig):
        self.config = config

    def _headers(self, content_type: str = None) -> dict:
        headers = {"Ocp-Apim-Subscription-Key": self.config.api_key}
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    def analyze_url(self, model_id: str) -> str:
        return (
            f"{self.config.base_url}/formrecognizer/documentModels/{model_id}:analyze"
            f"?api-version={self.config.api_version}"
        )

    def analyze(
        self,
        document_bytes: bytes,
        model_id: str = INVOICE_MODEL_ID,
        content_type: str = "application/octet-stream",
    ) -> dict:
        """
        Sends document bytes to Document Intelligence and returns the raw
        operation result once its status is 'succeeded'.

        Raises AnalyzerError when the document is rejected or the operation
        fails, and TimeoutError when polling exceeds max_wait_seconds.
        """
        logger.info(
            "Sending %s bytes to Azure DI (model=%s)...", len(document_bytes), model_id
        )

        response = requests.post(
            self.analyze_url(model_id),
            headers=self._headers(content_type),
            data=document_bytes,
            timeout=REQUEST_TIMEOUT,
        )

        if response.status_code != 202:
            logger.error("Azure DI did not accept the document: %s", response.text[:200])
            raise AnalyzerError(
                f"Azure DI error: {response.status_code}. Expected 202. Body: {response.text}"
            )

        operation_url = response.headers.get("Operation-Location")
        if not operation_url:
            raise AnalyzerError("Azure DI response missing Operation-Location header.")

        return self.poll(operation_url)

    def poll(self, operation_url: str) -> dict:
        logger.info("Polling Azure DI for result...")

        max_wait = self.config.max_wait_seconds
        start_time = time.time()

        while True:
            elapsed = time.time() - start_time

            if elapsed > max_wait:
                logger.error("Azure DI polling timed out after %s seconds", max_wait)
                raise TimeoutError(f"Azure Document Intelligence timeout ({max_wait}s)")

            poll_resp = requests.get(
                operation_url, headers=self._headers(), timeout=REQUEST_TIMEOUT
            )

            if not 200 <= poll_resp.status_code < 300:
                logger.error(
                    "Azure DI polling returned %s: %s", poll_resp.status_code, poll_resp.text[:200]
                )
                raise AnalyzerError(
                    f"Azure DI polling error: {poll_resp.status_code}. Body: {poll_resp.text}"
                )

            # Empty body is possible while the operation warms up
            try:
                result_json = poll_resp.json()
            except json.JSONDecodeError:
                logger.warning("Azure DI returned invalid JSON during polling.")
                time.sleep(self.config.poll_interval)
                continue

            status = result_json.get("status")

            if status == "succeeded":
                duration = int((time.time() - start_time) * 1000)
                logger.info("Azure DI analysis succeeded in %sms", duration)
                return result_json

            if status == "failed":
                error = result_json.get("error") or {}
                logger.error("Azure DI reported failure: %s", error)
                message = error.get("message") if isinstance(error, dict) else None
                raise AnalyzerError(
                    "Azure DI failed to process the document."
                    + (f" {message}" if message else "")
                )

            # notStarted / running
            logger.debug("Azure DI status: %s (elapsed=%s)", status, int(elapsed))
            time.sleep(self.config.poll_interval)
