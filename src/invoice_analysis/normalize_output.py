# src/invoice_analysis/normalize_output.py

import logging
from collections import namedtuple

from src.invoice_analysis.errors import NoDocumentsFoundError

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
DEFAULT_CURRENCY = "USD"
PAYMENT_METHOD_PLACEHOLDER = "Bank Transfer (Extract manually if available)"

# One output slot: which field to read, and what to use when it has no content.
Slot = namedtuple("Slot", ["name", "source", "default"])

INVOICE_SLOTS = (
    Slot("Vendor", "VendorName", UNKNOWN),
    Slot("InvoiceNumber", "InvoiceId", UNKNOWN),
    Slot("TotalAmount", "InvoiceTotal", UNKNOWN),
    Slot("InvoiceDate", "InvoiceDate", UNKNOWN),
    Slot("DueDate", "DueDate", UNKNOWN),
    Slot("CustomerName", "CustomerName", UNKNOWN),
    Slot("CustomerAddress", "CustomerAddress", UNKNOWN),
    Slot("Currency", "Currency", DEFAULT_CURRENCY),
    Slot("SubTotal", "SubTotal", UNKNOWN),
    Slot("Tax", "TotalTax", UNKNOWN),
)

LINE_ITEM_SLOTS = (
    Slot("Description", "Description", UNKNOWN),
    Slot("Quantity", "Quantity", UNKNOWN),
    Slot("Price", "Price", UNKNOWN),
    Slot("SubTotal", "Subtotal", UNKNOWN),
)

# Output key order of a NormalizedInvoice.
INVOICE_KEYS = (
    "Vendor", "InvoiceNumber", "TotalAmount", "InvoiceDate", "DueDate",
    "CustomerName", "CustomerAddress", "Items", "PaymentMethod", "Currency",
    "SubTotal", "Tax", "AdditionalFields",
)


def field_content(field):
    """
    Azure Document Intelligence fields look like:
        {"type": "string", "content": "Contoso Ltd.", "valueString": "..."}

    We only ever pass through the textual 'content' as the service printed
    it. Returns None when the field is missing or has no content.
    """
    if not isinstance(field, dict):
        return None

    content = field.get("content")
    if content is None or content == "":
        return None

    return content


def project(fields: dict, slots) -> dict:
    """Apply a slot table to a field map."""
    projected = {}
    for slot in slots:
        value = field_content(fields.get(slot.source))
        projected[slot.name] = value if value is not None else slot.default
    return projected


def extract_line_items(items_field) -> list:
    """
    Turn the 'Items' array field into LineItem dicts.

    A missing or non-array field yields no items. Elements that are not
    object fields are skipped.
    """
    if not isinstance(items_field, dict) or items_field.get("type") != "array":
        return []

    elements = items_field.get("valueArray")
    if not isinstance(elements, list):
        return []

    items = []
    for index, element in enumerate(elements):
        sub_fields = element.get("valueObject") if isinstance(element, dict) else None

        if not isinstance(sub_fields, dict):
            logger.warning("Skipping malformed line item at index %s.", index)
            continue

        items.append(project(sub_fields, LINE_ITEM_SLOTS))

    return items


def flatten_fields(fields: dict) -> dict:
    """Every source field name mapped to its content ('Unknown' when empty)."""
    flattened = {}
    for name, field in fields.items():
        content = field_content(field)
        flattened[name] = content if content is not None else UNKNOWN
    return flattened


def first_document(raw_json: dict) -> dict:
    """
    Accepts the full operation result or a bare analyzeResult and returns
    its first analyzed document. Additional documents are ignored.
    """
    analyze_result = raw_json.get("analyzeResult", raw_json) or {}
    documents = analyze_result.get("documents") or []

    if not documents:
        raise NoDocumentsFoundError()

    if len(documents) > 1:
        logger.info("Analysis returned %s documents; using the first.", len(documents))

    return documents[0]


def normalize_invoice(raw_json: dict) -> dict:
    """
    Takes the raw JSON returned by DocumentAnalysisClient.analyze()
    and returns a NormalizedInvoice dict where every slot is populated.
    """
    doc = first_document(raw_json)
    fields = doc.get("fields") or {}

    scalars = project(fields, INVOICE_SLOTS)
    scalars["Items"] = extract_line_items(fields.get("Items"))
    # Not extracted by the invoice model; always the placeholder.
    scalars["PaymentMethod"] = PAYMENT_METHOD_PLACEHOLDER
    scalars["AdditionalFields"] = flatten_fields(fields)

    return {key: scalars[key] for key in INVOICE_KEYS}
