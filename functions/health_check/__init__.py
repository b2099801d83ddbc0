import datetime as dt
import json
import logging
import os

import azure.functions as func
import requests

from src.invoice_analysis.config import AnalyzerConfig, missing_env_vars


def check_env_vars() -> dict:
    """
    Verify that required environment variables are present.
    """
    missing = missing_env_vars()

    status = "ok" if not missing else "error"
    details: dict = {}
    if missing:
        details["missing"] = missing

    return {
        "name": "environment",
        "status": status,
        "details": details,
    }


def check_document_intelligence() -> dict:
    """
    Light connectivity check to Azure Document Intelligence.

    Calls the 'info' endpoint, which is cheap and read-only.
    Does NOT send any documents, so it's safe to run every few minutes.
    """
    try:
        config = AnalyzerConfig.from_env()
    except ValueError as exc:  # ConfigurationError or a non-numeric setting
        return {
            "name": "document_intelligence",
            "status": "error",
            "details": str(exc),
        }

    url = f"{config.base_url}/formrecognizer/info?api-version={config.api_version}"

    headers = {
        "Ocp-Apim-Subscription-Key": config.api_key,
    }

    try:
        resp = requests.get(url, headers=headers, timeout=5)
    except requests.RequestException as exc:
        logging.exception("Document Intelligence health check failed with exception.")
        return {
            "name": "document_intelligence",
            "status": "error",
            "details": {"error": str(exc)},
        }

    if resp.status_code == 200:
        return {
            "name": "document_intelligence",
            "status": "ok",
            "details": {"status_code": 200},
        }

    logging.error(
        "Document Intelligence health check returned %s: %s",
        resp.status_code,
        resp.text[:200],
    )
    return {
        "name": "document_intelligence",
        "status": "error",
        "details": {
            "status_code": resp.status_code,
            "body_preview": resp.text[:200],
        },
    }


def main(req: func.HttpRequest) -> func.HttpResponse:
    """
    HTTP GET /api/health

    Returns a JSON payload summarizing the health of external dependencies.
    """
    logging.info("Health check request received.")

    checks = [
        check_env_vars(),
        check_document_intelligence(),
    ]

    overall_ok = all(c["status"] == "ok" for c in checks)

    body = {
        "status": "ok" if overall_ok else "degraded",
        "service": "invoice-analysis-api",
        "timestamp_utc": dt.datetime.now(dt.timezone.utc).isoformat(),
        "version": os.getenv("APP_VERSION", "v0.1.0"),
        "checks": checks,
    }

    return func.HttpResponse(
        body=json.dumps(body, indent=2),
        status_code=200 if overall_ok else 503,
        mimetype="application/json",
    )
