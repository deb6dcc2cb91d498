"""Document number generation.

Numbers look like ``TAX-000005``: a prefix for the document kind followed by the
count of existing documents of that kind plus one, zero padded to six digits.

Counting and then inserting is a best-effort approach and may race under
concurrent writers: two documents created at nearly the same instant can be
given the same number. The storage layer should carry a unique index on the
number columns so such a collision fails the insert instead of being stored.
"""

SERIAL_WIDTH = 6

INVOICE_PREFIXES = {
    'tax': 'TAX',
    'proforma': 'INV',
}
QUOTATION_PREFIX = 'QTN'


def invoice_prefix(invoice_type: str) -> str:
    try:
        return INVOICE_PREFIXES[invoice_type]
    except KeyError:
        raise ValueError(f'Unknown invoice type: {invoice_type!r}')


def format_document_number(prefix: str, existing_count: int, width: int = SERIAL_WIDTH) -> str:
    if existing_count < 0:
        raise ValueError('existing_count must not be negative')
    return f"{prefix}-{existing_count + 1:0{width}d}"


def next_invoice_number(invoice_type: str, existing_count: int) -> str:
    return format_document_number(invoice_prefix(invoice_type), existing_count)


def next_quotation_number(existing_count: int) -> str:
    return format_document_number(QUOTATION_PREFIX, existing_count)
