# tests/test_service.py

import json
from pathlib import Path

import pytest

from src.invoice_analysis.config import AnalyzerConfig
from src.invoice_analysis.errors import InvalidRequestError, NoDocumentsFoundError
from src.invoice_analysis.service import InvoiceProcessor

ROOT = Path(__file__).resolve().parents[1]


def load_json(path: Path):
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


class FakeClient:
    """Stands in for DocumentAnalysisClient and records what it was sent."""

    def __init__(self, result):
        self.result = result
        self.calls = []

    def analyze(self, document_bytes, content_type="application/octet-stream"):
        self.calls.append((document_bytes, content_type))
        return self.result


@pytest.fixture
def config():
    return AnalyzerConfig(endpoint="https://fake.example.com", api_key="fake-key")


def test_process_bytes_happy_path(config):
    """
    The bytes are forwarded to the client and the raw sample result is
    normalized into the expected JSON.
    """
    raw_sample = load_json(ROOT / "samples" / "raw_output_example.json")
    expected = load_json(ROOT / "samples" / "normalized_output_example.json")
    client = FakeClient(raw_sample)

    processor = InvoiceProcessor(config, client=client)
    result = processor.process_bytes(b"fake-pdf-data", content_type="application/pdf")

    assert result == expected
    assert client.calls == [(b"fake-pdf-data", "application/pdf")]


def test_process_bytes_empty_raises(config):
    processor = InvoiceProcessor(config, client=FakeClient({}))

    with pytest.raises(ValueError):
        processor.process_bytes(b"")


def test_process_bytes_without_documents_raises(config):
    client = FakeClient({"status": "succeeded", "analyzeResult": {"documents": []}})

    with pytest.raises(NoDocumentsFoundError):
        InvoiceProcessor(config, client=client).process_bytes(b"fake")


def test_process_url_downloads_then_analyzes(config):
    raw_sample = load_json(ROOT / "samples" / "raw_output_example.json")
    client = FakeClient(raw_sample)
    downloads = []

    def fake_download(url, timeout):
        downloads.append((url, timeout))
        return b"downloaded-pdf"

    processor = InvoiceProcessor(config, client=client, downloader=fake_download)
    result = processor.process_request(file_url="https://files.example.com/inv.pdf")

    assert downloads == [("https://files.example.com/inv.pdf", 30)]
    assert client.calls[0][0] == b"downloaded-pdf"
    assert result["InvoiceNumber"] == "INV-100"


def test_file_url_wins_over_ocr_text(config):
    client = FakeClient({"analyzeResult": {"documents": [{"fields": {}}]}})
    processor = InvoiceProcessor(
        config, client=client, downloader=lambda url, timeout: b"bytes"
    )

    result = processor.process_request(ocr_text="some text", file_url="https://x.example.com/a.pdf")

    assert result["Vendor"] == "Unknown"
    assert len(client.calls) == 1


def test_ocr_text_is_echoed(config):
    client = FakeClient({})
    processor = InvoiceProcessor(config, client=client)

    assert processor.process_request(ocr_text="INVOICE #1") == {"ProcessedText": "INVOICE #1"}
    assert client.calls == []


@pytest.mark.parametrize("ocr_text, file_url", [(None, None), ("", ""), ("", None)])
def test_empty_request_raises(config, ocr_text, file_url):
    processor = InvoiceProcessor(config, client=FakeClient({}))

    with pytest.raises(InvalidRequestError):
        processor.process_request(ocr_text, file_url)
