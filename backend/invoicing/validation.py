"""Request validation.

Every validator runs all of its checks and returns the list of problems found.
An empty list means the request is valid. Validators never raise; the caller
decides what to do with a non-empty list (the routes answer with a 400).
"""
import re
from decimal import Decimal
from typing import List, Optional

from .calculations import TRANSACTION_TYPES

INVOICE_STATUSES = ('draft', 'sent', 'paid', 'overdue')

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

MIN_INVOICE_QUANTITY = Decimal('0.01')

_RATE_FIELDS = (
    ('cgst_rate', 'CGST'),
    ('sgst_rate', 'SGST'),
    ('igst_rate', 'IGST'),
)


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def _number(value) -> Optional[Decimal]:
    """Return a finite Decimal or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except Exception:
        return None
    return d if d.is_finite() else None


def _in_percent_range(value) -> bool:
    d = _number(value)
    return d is not None and Decimal(0) <= d <= Decimal(100)


def _check_rates(request, errors: List[str]) -> None:
    for field, label in _RATE_FIELDS:
        value = getattr(request, field, None)
        if value is not None and not _in_percent_range(value):
            errors.append(f'{label} rate must be between 0 and 100')


def _check_transaction_type(request, errors: List[str]) -> None:
    ttype = getattr(request, 'transaction_type', None)
    if ttype and ttype not in TRANSACTION_TYPES:
        errors.append('Transaction type must be either intrastate or interstate')


def _check_email(email: Optional[str], errors: List[str]) -> None:
    if email and not EMAIL_RE.match(email):
        errors.append('Invalid email format')


def _check_invoice_items(items, errors: List[str]) -> None:
    for idx, item in enumerate(items, start=1):
        if _blank(item.name):
            errors.append(f'Item {idx}: Name is required')
        qty = _number(item.quantity)
        if qty is None or qty < MIN_INVOICE_QUANTITY:
            errors.append(f'Item {idx}: Quantity must be greater than 0')
        price = _number(item.unit_price)
        if price is None or price < 0:
            errors.append(f'Item {idx}: Unit price must be 0 or greater')


def validate_invoice_request(request) -> List[str]:
    errors: List[str] = []

    if _blank(request.customer_name):
        errors.append('Customer name is required')

    if not request.items:
        errors.append('At least one item is required')
    else:
        _check_invoice_items(request.items, errors)

    _check_rates(request, errors)
    _check_transaction_type(request, errors)
    _check_email(request.customer_email, errors)
    return errors


def validate_invoice_update(changes) -> List[str]:
    """Checks only the fields the caller actually sent."""
    errors: List[str] = []
    sent = changes.model_fields_set

    if 'status' in sent and changes.status not in INVOICE_STATUSES:
        errors.append('Invalid status')
    if 'customer_name' in sent and _blank(changes.customer_name):
        errors.append('Customer name is required')
    if 'items' in sent:
        if not changes.items:
            errors.append('At least one item is required')
        else:
            _check_invoice_items(changes.items, errors)

    _check_rates(changes, errors)
    _check_transaction_type(changes, errors)
    _check_email(changes.customer_email, errors)
    return errors


def validate_quotation_request(request) -> List[str]:
    errors: List[str] = []

    if _blank(request.to_name):
        errors.append('Recipient name is required')

    if not request.items:
        errors.append('At least one item is required')

    for idx, item in enumerate(request.items or [], start=1):
        if _blank(item.name):
            errors.append(f'Item {idx}: Name is required')
        if item.quantity is not None:
            qty = _number(item.quantity)
            if qty is None or qty < 1 or qty != qty.to_integral_value():
                errors.append(f'Item {idx}: Quantity must be a whole number of at least 1')
        rate = _number(item.rate_including_gst)
        if rate is None or rate < 0:
            errors.append(f'Item {idx}: Rate must be 0 or greater')
        if item.mrp is not None:
            mrp = _number(item.mrp)
            if mrp is None or mrp < 0:
                errors.append(f'Item {idx}: MRP must be 0 or greater')
    return errors


def validate_item(item, partial: bool = False) -> List[str]:
    """Catalog item checks. With partial=True only the fields that were sent are checked."""
    errors: List[str] = []
    fields = item.model_fields_set if partial else set(type(item).model_fields)

    if 'name' in fields and _blank(item.name):
        errors.append('Item name is required')
    if 'category' in fields and _blank(item.category):
        errors.append('Category is required')
    if 'unit_price' in fields:
        price = _number(item.unit_price)
        if price is None or price < 0:
            errors.append('Unit price must be 0 or greater')
    if 'gst_rate' in fields and item.gst_rate is not None and not _in_percent_range(item.gst_rate):
        errors.append('GST rate must be between 0 and 100')
    return errors
