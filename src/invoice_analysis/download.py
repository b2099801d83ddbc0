# src/invoice_analysis/download.py

import logging
from urllib.parse import urlparse

import requests

from src.invoice_analysis.errors import DocumentDownloadError

logger = logging.getLogger(__name__)


def download_document(file_url: str, timeout: float = 30) -> bytes:
    """
    Fetch the invoice behind file_url and return its raw bytes.
    """
    scheme = urlparse(file_url).scheme.lower()
    if scheme not in ("http", "https"):
        raise DocumentDownloadError(f"Unsupported URL scheme: {scheme or 'none'!r}")

    logger.info("Downloading invoice from URL: %s", file_url[:200])

    try:
        response = requests.get(file_url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.error("Download of %s failed: %s", file_url[:200], exc)
        raise DocumentDownloadError(f"Failed to download document: {exc}") from exc

    if not response.content:
        raise DocumentDownloadError("Downloaded document is empty.")

    return response.content
