from decimal import Decimal
import asyncio

import pytest
from fastapi import HTTPException

from backend.invoicing import catalog
from backend.invoicing.routes import create_item, delete_item, get_item, list_items, seed_items, update_item
from backend.invoicing.schemas import ItemCreate, ItemUpdate


def test_create_item_defaults(fake_supabase):
    created = asyncio.run(create_item(ItemCreate(name=' Cotton Roll ', unit_price=Decimal('25')), client=fake_supabase))['data']

    assert created['name'] == 'Cotton Roll'
    assert created['category'] == 'General'
    assert created['is_active'] is True
    assert created['unit_price'] == 25.0


def test_invalid_item_is_rejected(fake_supabase):
    with pytest.raises(HTTPException) as exc:
        asyncio.run(create_item(ItemCreate(name='', unit_price=Decimal('-5')), client=fake_supabase))
    assert exc.value.status_code == 400
    assert fake_supabase.tables['items'] == []


def test_list_is_sorted_by_category_then_name(fake_supabase):
    for name, category in (('Zinc Tape', 'A'), ('Bandage', 'B'), ('Adhesive', 'B')):
        asyncio.run(create_item(ItemCreate(name=name, category=category, unit_price=Decimal('1')), client=fake_supabase))

    names = [it['name'] for it in asyncio.run(list_items(client=fake_supabase))['data']]
    assert names == ['Zinc Tape', 'Adhesive', 'Bandage']


def test_update_and_delete_item(fake_supabase):
    created = asyncio.run(create_item(ItemCreate(name='Gauze', unit_price=Decimal('10')), client=fake_supabase))['data']

    updated = asyncio.run(update_item(created['id'], ItemUpdate(unit_price=Decimal('12.50'), gst_rate=Decimal('5')), client=fake_supabase))['data']
    assert updated['unit_price'] == 12.5
    assert updated['gst_rate'] == 5.0
    assert updated['name'] == 'Gauze'

    with pytest.raises(HTTPException) as exc:
        asyncio.run(update_item(created['id'], ItemUpdate(gst_rate=Decimal('150')), client=fake_supabase))
    assert exc.value.status_code == 400

    asyncio.run(delete_item(created['id'], client=fake_supabase))
    with pytest.raises(HTTPException) as exc:
        asyncio.run(get_item(created['id'], client=fake_supabase))
    assert exc.value.status_code == 404


def test_seed_is_idempotent(fake_supabase):
    first = asyncio.run(seed_items(client=fake_supabase))
    assert first['inserted'] == len(catalog.SEED_ITEMS)
    assert first['total'] == len(catalog.SEED_ITEMS)

    second = asyncio.run(seed_items(client=fake_supabase))
    assert second['inserted'] == 0
    assert second['total'] == len(catalog.SEED_ITEMS)


def test_seed_keeps_existing_prices(fake_supabase):
    asyncio.run(create_item(ItemCreate(name='Absorbent Cotton Wool IP', unit_packing='500 gm', unit_price=Decimal('95')),
                            client=fake_supabase))

    res = asyncio.run(seed_items(client=fake_supabase))

    assert res['inserted'] == len(catalog.SEED_ITEMS) - 1
    wool = [it for it in fake_supabase.tables['items'] if it['name'] == 'Absorbent Cotton Wool IP']
    assert len(wool) == 1
    assert wool[0]['unit_price'] == 95.0


def test_seed_records_shape():
    records = catalog.seed_records()
    assert records[0]['description'] == 'Per: Pkt'
    assert all(r['unit_price'] == 0 and r['category'] == 'Medical Supplies' for r in records)
