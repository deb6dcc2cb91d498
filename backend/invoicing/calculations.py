from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, getcontext
from typing import Dict, Iterable, List, Optional

getcontext().prec = 28

INTRASTATE = 'intrastate'
INTERSTATE = 'interstate'
TRANSACTION_TYPES = (INTRASTATE, INTERSTATE)

DEFAULT_CGST_RATE = Decimal('6')
DEFAULT_SGST_RATE = Decimal('6')
DEFAULT_IGST_RATE = Decimal('12')
DEFAULT_TRANSACTION_TYPE = INTRASTATE

ZERO = Decimal('0')
HUNDRED = Decimal('100')


class ComputationError(ValueError):
    """Raised when a non-numeric, NaN or infinite value reaches the arithmetic."""


def to_decimal(value) -> Decimal:
    # floats go through str so 10.005 means the literal, not its binary neighbour
    if isinstance(value, bool):
        raise ComputationError(f'Not a number: {value!r}')
    try:
        if isinstance(value, Decimal):
            d = value
        elif isinstance(value, float):
            d = Decimal(str(value))
        else:
            d = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ComputationError(f'Not a number: {value!r}')
    if not d.is_finite():
        raise ComputationError(f'Non-finite value: {value!r}')
    return d


def quantize_two(d: Decimal) -> Decimal:
    return d.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def _ensure_finite(amounts: Dict) -> Dict:
    for key, val in amounts.items():
        if isinstance(val, Decimal) and not val.is_finite():
            raise ComputationError(f'{key} is not finite')
    return amounts


def compute_line_total(quantity, unit_price) -> Decimal:
    """quantity x unit_price rounded half away from zero to the cent."""
    return quantize_two(to_decimal(quantity) * to_decimal(unit_price))


def compute_subtotal(items: Iterable[Dict]) -> Decimal:
    """Sum of the already rounded item totals. Not re-rounded."""
    subtotal = ZERO
    for it in items:
        subtotal += to_decimal(it['total'])
    return subtotal


def resolve_tax_config(transaction_type: Optional[str] = None,
                       cgst_rate=None, sgst_rate=None, igst_rate=None) -> Dict:
    """Fill omitted (None) values with the defaults. An explicit 0 rate is kept."""
    return {
        'transaction_type': transaction_type or DEFAULT_TRANSACTION_TYPE,
        'cgst_rate': DEFAULT_CGST_RATE if cgst_rate is None else to_decimal(cgst_rate),
        'sgst_rate': DEFAULT_SGST_RATE if sgst_rate is None else to_decimal(sgst_rate),
        'igst_rate': DEFAULT_IGST_RATE if igst_rate is None else to_decimal(igst_rate),
    }


def compute_taxes(subtotal, config: Optional[Dict] = None) -> Dict:
    """
    config: { transaction_type, cgst_rate, sgst_rate, igst_rate } (missing keys use defaults)
    returns: { cgst_amount, sgst_amount, igst_amount, total_tax_amount, total_amount }

    Only one regime contributes: intrastate -> CGST + SGST, interstate -> IGST.
    Amounts are not rounded here; display rounding belongs to the presentation layer.
    """
    config = config or {}
    cfg = resolve_tax_config(
        config.get('transaction_type'),
        config.get('cgst_rate'),
        config.get('sgst_rate'),
        config.get('igst_rate'),
    )
    subtotal = to_decimal(subtotal)

    cgst = ZERO
    sgst = ZERO
    igst = ZERO
    if cfg['transaction_type'] == INTRASTATE:
        cgst = subtotal * cfg['cgst_rate'] / HUNDRED
        sgst = subtotal * cfg['sgst_rate'] / HUNDRED
    elif cfg['transaction_type'] == INTERSTATE:
        igst = subtotal * cfg['igst_rate'] / HUNDRED
    else:
        raise ComputationError(f"Unknown transaction type: {cfg['transaction_type']!r}")

    total_tax = cgst + sgst + igst
    return _ensure_finite({
        'cgst_amount': cgst,
        'sgst_amount': sgst,
        'igst_amount': igst,
        'total_tax_amount': total_tax,
        'total_amount': subtotal + total_tax,
    })


def _with_totals(items: Iterable[Dict], price_key: str, default_qty=None) -> List[Dict]:
    out = []
    for it in items:
        line = dict(it)
        qty = line.get('quantity')
        if qty is None:
            qty = default_qty
        line['quantity'] = qty
        # caller supplied totals are never trusted
        line['total'] = compute_line_total(qty, line.get(price_key))
        out.append(line)
    return out


def calculate_invoice(items: Iterable[Dict], config: Optional[Dict] = None) -> Dict:
    """
    items: list of { name, description, quantity, unit_price }
    returns the items with recomputed totals, the resolved tax configuration and
    { subtotal, cgst_amount, sgst_amount, igst_amount, total_tax_amount, total_amount }
    """
    config = config or {}
    cfg = resolve_tax_config(
        config.get('transaction_type'),
        config.get('cgst_rate'),
        config.get('sgst_rate'),
        config.get('igst_rate'),
    )
    lines = _with_totals(items, 'unit_price')
    subtotal = compute_subtotal(lines)
    result = {'items': lines, 'subtotal': subtotal}
    result.update(cfg)
    result.update(compute_taxes(subtotal, cfg))
    return result


def calculate_quotation(items: Iterable[Dict]) -> Dict:
    """Quotation rates already include GST, so only line totals and the subtotal apply."""
    lines = _with_totals(items, 'rate_including_gst', default_qty=1)
    return {'items': lines, 'subtotal': compute_subtotal(lines)}
