from typing import Optional, Dict, List, Any
import logging
from datetime import date, datetime
from decimal import Decimal

from supabase import Client

INVOICES = 'invoices'
QUOTATIONS = 'quotations'
ITEMS = 'items'


def _to_json(value: Any) -> Any:
    """Convert Decimals and dates (also nested in item lists) into JSON friendly values."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    return value


def _first(data) -> Optional[Dict]:
    # res.data is typically a list of affected rows
    if isinstance(data, list):
        return data[0] if data else None
    return data


def _insert(client: Client, table: str, record: Dict) -> Optional[Dict]:
    try:
        res = client.table(table).insert(_to_json(record)).execute()
    except Exception as exc:
        logging.exception('Supabase insert into %s exception: %s', table, exc)
        return None
    if getattr(res, 'error', None):
        logging.error('Supabase insert into %s error: %s', table, res.error)
        return None
    return _first(res.data)


def _get(client: Client, table: str, row_id: str) -> Optional[Dict]:
    try:
        res = client.table(table).select('*').eq('id', row_id).limit(1).execute()
    except Exception as exc:
        # postgrest raises on malformed ids as well; treat as not found
        logging.debug('Supabase get from %s exception (treated as not found): %s', table, exc)
        return None
    if getattr(res, 'error', None):
        logging.error('Supabase get from %s error: %s', table, res.error)
        return None
    return _first(res.data)


def _list(client: Client, table: str, order_by: str = 'created_at', desc: bool = True) -> Optional[List[Dict]]:
    try:
        res = client.table(table).select('*').order(order_by, desc=desc).execute()
    except Exception as exc:
        logging.exception('Supabase list %s exception: %s', table, exc)
        return None
    if getattr(res, 'error', None):
        logging.error('Supabase list %s error: %s', table, res.error)
        return None
    return res.data or []


def _update(client: Client, table: str, row_id: str, changes: Dict) -> Optional[Dict]:
    try:
        res = client.table(table).update(_to_json(changes)).eq('id', row_id).execute()
    except Exception as exc:
        logging.exception('Supabase update %s exception: %s', table, exc)
        return None
    if getattr(res, 'error', None):
        logging.error('Supabase update %s error: %s', table, res.error)
        return None
    return _first(res.data)


def _delete(client: Client, table: str, row_id: str) -> bool:
    try:
        res = client.table(table).delete().eq('id', row_id).execute()
    except Exception as exc:
        logging.exception('Supabase delete from %s exception: %s', table, exc)
        return False
    if getattr(res, 'error', None):
        logging.error('Supabase delete from %s error: %s', table, res.error)
        return False
    return True


def _count(client: Client, table: str, filters: Optional[Dict] = None) -> Optional[int]:
    try:
        q = client.table(table).select('id', count='exact')
        for k, v in (filters or {}).items():
            q = q.eq(k, v)
        res = q.execute()
    except Exception as exc:
        logging.exception('Supabase count %s exception: %s', table, exc)
        return None
    if getattr(res, 'error', None):
        logging.error('Supabase count %s error: %s', table, res.error)
        return None
    if res.count is not None:
        return res.count
    return len(res.data or [])


# invoices

def create_invoice(client: Client, record: Dict) -> Optional[Dict]:
    """
    Insert an invoice record and return the created row or None on error.
    record: invoice_number, invoice_type, customer fields, items (with totals),
    tax rates and the computed amounts.
    """
    return _insert(client, INVOICES, record)


def get_invoice(client: Client, invoice_id: str) -> Optional[Dict]:
    return _get(client, INVOICES, invoice_id)


def list_invoices(client: Client) -> Optional[List[Dict]]:
    return _list(client, INVOICES)


def update_invoice(client: Client, invoice_id: str, changes: Dict) -> Optional[Dict]:
    return _update(client, INVOICES, invoice_id, changes)


def delete_invoice(client: Client, invoice_id: str) -> bool:
    return _delete(client, INVOICES, invoice_id)


def count_invoices(client: Client, invoice_type: str) -> Optional[int]:
    return _count(client, INVOICES, {'invoice_type': invoice_type})


# quotations

def create_quotation(client: Client, record: Dict) -> Optional[Dict]:
    return _insert(client, QUOTATIONS, record)


def get_quotation(client: Client, quotation_id: str) -> Optional[Dict]:
    return _get(client, QUOTATIONS, quotation_id)


def list_quotations(client: Client) -> Optional[List[Dict]]:
    return _list(client, QUOTATIONS)


def count_quotations(client: Client) -> Optional[int]:
    return _count(client, QUOTATIONS)


# catalog items

def create_item(client: Client, record: Dict) -> Optional[Dict]:
    return _insert(client, ITEMS, record)


def get_item(client: Client, item_id: str) -> Optional[Dict]:
    return _get(client, ITEMS, item_id)


def list_items(client: Client) -> Optional[List[Dict]]:
    try:
        res = client.table(ITEMS).select('*').order('category').order('name').execute()
    except Exception as exc:
        logging.exception('Supabase list_items exception: %s', exc)
        return None
    if getattr(res, 'error', None):
        logging.error('Supabase list_items error: %s', res.error)
        return None
    return res.data or []


def update_item(client: Client, item_id: str, changes: Dict) -> Optional[Dict]:
    return _update(client, ITEMS, item_id, changes)


def delete_item(client: Client, item_id: str) -> bool:
    return _delete(client, ITEMS, item_id)


def count_items(client: Client) -> Optional[int]:
    return _count(client, ITEMS)


def find_item(client: Client, name: str, unit_packing: Optional[str]) -> Optional[Dict]:
    """Look up a catalog item by its (name, unit_packing) identity."""
    try:
        q = client.table(ITEMS).select('*').eq('name', name)
        if unit_packing is None:
            q = q.is_('unit_packing', 'null')
        else:
            q = q.eq('unit_packing', unit_packing)
        res = q.limit(1).execute()
    except Exception as exc:
        logging.exception('Supabase find_item exception: %s', exc)
        return None
    if getattr(res, 'error', None):
        logging.error('Supabase find_item error: %s', res.error)
        return None
    return _first(res.data)
