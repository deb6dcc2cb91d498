from datetime import date
from decimal import Decimal

from backend.invoicing import repository as repo


def test_insert_converts_decimals_and_dates(fake_supabase):
    rec = {
        'invoice_number': 'INV-000001',
        'invoice_type': 'proforma',
        'subtotal': Decimal('250.00'),
        'due_date': date(2026, 11, 1),
        'items': [{'name': 'A', 'quantity': Decimal('2'), 'total': Decimal('200.00')}],
    }

    created = repo.create_invoice(fake_supabase, rec)

    assert created['id']
    stored = fake_supabase.tables['invoices'][0]
    assert stored['subtotal'] == 250.0
    assert stored['due_date'] == '2026-11-01'
    assert stored['items'][0]['total'] == 200.0


def test_count_invoices_filters_by_type(fake_supabase):
    for t in ('tax', 'tax', 'proforma'):
        repo.create_invoice(fake_supabase, {'invoice_type': t})

    assert repo.count_invoices(fake_supabase, 'tax') == 2
    assert repo.count_invoices(fake_supabase, 'proforma') == 1
    assert repo.count_quotations(fake_supabase) == 0


def test_get_update_delete(fake_supabase):
    created = repo.create_quotation(fake_supabase, {'to_name': 'X'})

    assert repo.get_quotation(fake_supabase, created['id'])['to_name'] == 'X'
    assert repo.get_quotation(fake_supabase, 'missing') is None

    inv = repo.create_invoice(fake_supabase, {'status': 'draft'})
    assert repo.update_invoice(fake_supabase, inv['id'], {'status': 'paid'})['status'] == 'paid'
    assert repo.delete_invoice(fake_supabase, inv['id']) is True
    assert repo.get_invoice(fake_supabase, inv['id']) is None


def test_find_item_matches_missing_packing(fake_supabase):
    repo.create_item(fake_supabase, {'name': 'Tape', 'unit_packing': None})
    repo.create_item(fake_supabase, {'name': 'Tape', 'unit_packing': '1 Roll'})

    assert repo.find_item(fake_supabase, 'Tape', None)['unit_packing'] is None
    assert repo.find_item(fake_supabase, 'Tape', '1 Roll')['unit_packing'] == '1 Roll'
    assert repo.find_item(fake_supabase, 'Tape', '2 Roll') is None


def test_storage_errors_are_logged_not_raised(fake_supabase, caplog):
    fake_supabase.fail_tables.update({'invoices', 'items'})

    assert repo.create_invoice(fake_supabase, {'invoice_type': 'tax'}) is None
    assert repo.list_invoices(fake_supabase) is None
    assert repo.count_invoices(fake_supabase, 'tax') is None
    assert repo.delete_invoice(fake_supabase, 'x') is False
    assert repo.list_items(fake_supabase) is None
    assert 'Supabase insert into invoices exception' in caplog.text


def test_error_attribute_on_result_is_respected(fake_supabase, monkeypatch):
    class Errored:
        data = None
        count = None
        error = 'permission denied'

    class Query:
        def __getattr__(self, name):
            return lambda *a, **kw: self

        def execute(self):
            return Errored()

    monkeypatch.setattr(fake_supabase, 'table', lambda name: Query())

    assert repo.get_item(fake_supabase, 'x') is None
    assert repo.update_item(fake_supabase, 'x', {'name': 'y'}) is None
    assert repo.count_items(fake_supabase) is None
