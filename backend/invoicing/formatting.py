from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Union

from .calculations import quantize_two, to_decimal

CURRENCY_SYMBOL = '₹'

SUMMARY_FIELDS = (
    'subtotal',
    'cgst_amount',
    'sgst_amount',
    'igst_amount',
    'total_tax_amount',
    'total_amount',
)


def _group_indian(whole: str) -> str:
    # last three digits, then groups of two (lakh / crore)
    if len(whole) <= 3:
        return whole
    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ','.join(groups + [tail])


def format_currency(amount, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format an amount as INR with en-IN grouping, e.g. 123456.785 -> '₹1,23,456.79'.

    Rounding happens here for display only; stored amounts are left untouched.
    """
    value = quantize_two(to_decimal(amount))
    sign = '-' if value < 0 else ''
    whole, frac = f'{abs(value):.2f}'.split('.')
    return f'{sign}{symbol}{_group_indian(whole)}.{frac}'


def format_date(value: Union[date, datetime, str]) -> str:
    """'2026-10-19' -> '19 October 2026'"""
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    return f"{value.day} {value.strftime('%B')} {value.year}"


def format_summary(calculation: Dict) -> Dict[str, str]:
    """Currency strings for the monetary fields of a calculation result.

    The round-off line shown on printed invoices is cosmetic and always zero.
    """
    out = {k: format_currency(calculation[k]) for k in SUMMARY_FIELDS if k in calculation}
    out['round_off'] = format_currency(Decimal('0'))
    return out
