import logging
from typing import Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from supabase import Client

from . import calculations
from . import catalog
from . import formatting
from . import numbering
from . import repository
from . import validation
from .database import Settings
from .schemas import InvoiceCreate, InvoiceUpdate, QuotationCreate, ItemCreate, ItemUpdate


router = APIRouter(prefix="/api", tags=["Invoicing"])

# changing any of these means the stored amounts must be recomputed
RECALC_FIELDS = {'items', 'transaction_type', 'cgst_rate', 'sgst_rate', 'igst_rate'}


def get_db(request: Request) -> Client:
    return request.app.state.db.client


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _validation_failed(errors: List[str]) -> HTTPException:
    logging.info('Validation failed: %s', errors)
    return HTTPException(status_code=400, detail={'error': 'Validation failed', 'details': errors})


def _normalise_email(email):
    # blank emails are stored as missing
    email = (email or '').strip().lower()
    return email or None


def _invoice_lines(items) -> List[Dict]:
    return [
        {'name': it.name.strip(), 'description': it.description, 'quantity': it.quantity, 'unit_price': it.unit_price}
        for it in items
    ]


def _tax_config(source) -> Dict:
    return {
        'transaction_type': source.get('transaction_type'),
        'cgst_rate': source.get('cgst_rate'),
        'sgst_rate': source.get('sgst_rate'),
        'igst_rate': source.get('igst_rate'),
    }


def _compute_invoice(items: List[Dict], config: Dict) -> Dict:
    try:
        return calculations.calculate_invoice(items, config)
    except calculations.ComputationError as exc:
        logging.exception('Invoice computation failed: %s', exc)
        raise HTTPException(status_code=500, detail='Failed to compute invoice totals')


@router.get('/health')
async def health(request: Request):
    db = request.app.state.db
    ok = await run_in_threadpool(db.ping)
    if not ok:
        return JSONResponse(status_code=503, content={'status': 'unhealthy', 'database': 'disconnected'})
    return {'status': 'healthy', 'database': 'connected'}


# invoices

@router.post('/invoices/preview')
async def preview_invoice(payload: InvoiceCreate):
    """Compute the breakdown for an invoice without storing it (edit and summary views)."""
    errors = validation.validate_invoice_request(payload)
    if errors:
        raise _validation_failed(errors)
    calc = _compute_invoice(_invoice_lines(payload.items), _tax_config(payload.model_dump()))
    calc['formatted'] = formatting.format_summary(calc)
    for field in ('order_date', 'due_date'):
        value = getattr(payload, field)
        if value:
            calc['formatted'][field] = formatting.format_date(value)
    return {"status": "success", "data": calc}


@router.post('/invoices')
async def create_invoice(payload: InvoiceCreate, client: Client = Depends(get_db),
                         settings: Settings = Depends(get_settings)):
    errors = validation.validate_invoice_request(payload)
    if errors:
        raise _validation_failed(errors)
    try:
        calc = _compute_invoice(_invoice_lines(payload.items), _tax_config(payload.model_dump()))

        invoice_number = payload.invoice_number
        if not invoice_number:
            count = await run_in_threadpool(repository.count_invoices, client, payload.invoice_type)
            if count is None:
                raise HTTPException(status_code=500, detail='Failed to generate invoice number')
            invoice_number = numbering.next_invoice_number(payload.invoice_type, count)

        record = {
            'invoice_number': invoice_number,
            'invoice_type': payload.invoice_type,
            # the business's registered state unless the caller overrides it
            'state': payload.state or settings.supplier_state,
            'state_code': payload.state_code or settings.supplier_state_code,
            'order_number': payload.order_number,
            'order_date': payload.order_date,
            'customer_name': payload.customer_name.strip(),
            'customer_email': _normalise_email(payload.customer_email),
            'customer_phone': payload.customer_phone,
            'customer_address': payload.customer_address,
            'status': 'draft',
            'due_date': payload.due_date,
            'user_id': payload.user_id,
        }
        record.update(calc)

        created = await run_in_threadpool(repository.create_invoice, client, record)
        if not created:
            raise HTTPException(status_code=500, detail='Failed to create invoice')
        logging.info('Created invoice %s (total %s)', invoice_number, calc['total_amount'])
        return {"status": "success", "data": created}
    except HTTPException:
        raise
    except Exception as exc:
        logging.exception('create_invoice route exception: %s', exc)
        raise HTTPException(status_code=500, detail='Internal error creating invoice')


@router.get('/invoices')
async def list_invoices(client: Client = Depends(get_db)):
    res = await run_in_threadpool(repository.list_invoices, client)
    if res is None:
        raise HTTPException(status_code=500, detail='Failed to fetch invoices')
    return {"status": "success", "data": res}


@router.get('/invoices/{invoice_id}')
async def get_invoice(invoice_id: str, client: Client = Depends(get_db)):
    inv = await run_in_threadpool(repository.get_invoice, client, invoice_id)
    if not inv:
        raise HTTPException(status_code=404, detail='Invoice not found')
    return {"status": "success", "data": inv}


@router.put('/invoices/{invoice_id}')
async def update_invoice(invoice_id: str, changes: InvoiceUpdate = Body(...), client: Client = Depends(get_db)):
    errors = validation.validate_invoice_update(changes)
    if errors:
        raise _validation_failed(errors)
    rec = changes.model_dump(exclude_unset=True)
    if not rec:
        raise HTTPException(status_code=400, detail='No changes provided')

    existing = await run_in_threadpool(repository.get_invoice, client, invoice_id)
    if not existing:
        raise HTTPException(status_code=404, detail='Invoice not found')

    if 'customer_email' in rec:
        rec['customer_email'] = _normalise_email(rec['customer_email'])
    if rec.keys() & RECALC_FIELDS:
        merged = dict(existing)
        merged.update(rec)
        if 'items' in rec:
            lines = _invoice_lines(changes.items)
        else:
            lines = [
                {'name': it.get('name'), 'description': it.get('description'),
                 'quantity': it.get('quantity'), 'unit_price': it.get('unit_price')}
                for it in existing.get('items') or []
            ]
        rec.update(_compute_invoice(lines, _tax_config(merged)))

    updated = await run_in_threadpool(repository.update_invoice, client, invoice_id, rec)
    if not updated:
        raise HTTPException(status_code=500, detail='Failed to update invoice')
    return {"status": "success", "data": updated}


@router.delete('/invoices/{invoice_id}')
async def delete_invoice(invoice_id: str, client: Client = Depends(get_db)):
    inv = await run_in_threadpool(repository.get_invoice, client, invoice_id)
    if not inv:
        raise HTTPException(status_code=404, detail='Invoice not found')
    ok = await run_in_threadpool(repository.delete_invoice, client, invoice_id)
    if not ok:
        raise HTTPException(status_code=500, detail='Failed to delete invoice')
    return {"status": "success"}


# quotations

@router.post('/quotations')
async def create_quotation(payload: QuotationCreate, client: Client = Depends(get_db)):
    errors = validation.validate_quotation_request(payload)
    if errors:
        raise _validation_failed(errors)
    try:
        lines = [
            {'name': it.name.strip(), 'description': it.description, 'unit_packing': it.unit_packing,
             'quantity': it.quantity, 'rate_including_gst': it.rate_including_gst, 'mrp': it.mrp}
            for it in payload.items
        ]
        try:
            calc = calculations.calculate_quotation(lines)
        except calculations.ComputationError as exc:
            logging.exception('Quotation computation failed: %s', exc)
            raise HTTPException(status_code=500, detail='Failed to compute quotation totals')

        quotation_number = payload.quotation_number
        if not quotation_number:
            count = await run_in_threadpool(repository.count_quotations, client)
            if count is None:
                raise HTTPException(status_code=500, detail='Failed to generate quotation number')
            quotation_number = numbering.next_quotation_number(count)

        record = {
            'quotation_number': quotation_number,
            'reference_letter': payload.reference_letter,
            'to_name': payload.to_name.strip(),
            'to_designation': payload.to_designation,
            'to_department': payload.to_department,
            'to_address': payload.to_address,
            'subject': payload.subject,
            'items': calc['items'],
            'subtotal': calc['subtotal'],
            'notes': payload.notes,
            'user_id': payload.user_id,
        }
        # quotation_date defaults to now on the database side
        if payload.quotation_date:
            record['quotation_date'] = payload.quotation_date

        created = await run_in_threadpool(repository.create_quotation, client, record)
        if not created:
            raise HTTPException(status_code=500, detail='Failed to create quotation')
        return {"status": "success", "data": created}
    except HTTPException:
        raise
    except Exception as exc:
        logging.exception('create_quotation route exception: %s', exc)
        raise HTTPException(status_code=500, detail='Internal error creating quotation')


@router.get('/quotations')
async def list_quotations(client: Client = Depends(get_db)):
    res = await run_in_threadpool(repository.list_quotations, client)
    if res is None:
        raise HTTPException(status_code=500, detail='Failed to fetch quotations')
    return {"status": "success", "data": res}


@router.get('/quotations/{quotation_id}')
async def get_quotation(quotation_id: str, client: Client = Depends(get_db)):
    qtn = await run_in_threadpool(repository.get_quotation, client, quotation_id)
    if not qtn:
        raise HTTPException(status_code=404, detail='Quotation not found')
    return {"status": "success", "data": qtn}


# catalog items

@router.get('/items/seed')
@router.post('/items/seed')
async def seed_items(client: Client = Depends(get_db)):
    """Insert the built-in catalog entries that are not present yet (matched by name and packing)."""
    inserted = 0
    for rec in catalog.seed_records():
        existing = await run_in_threadpool(repository.find_item, client, rec['name'], rec['unit_packing'])
        if existing:
            continue
        created = await run_in_threadpool(repository.create_item, client, rec)
        if not created:
            raise HTTPException(status_code=500, detail='Failed to seed items')
        inserted += 1
    total = await run_in_threadpool(repository.count_items, client)
    return {"status": "success", "inserted": inserted, "total": total}


@router.post('/items')
async def create_item(payload: ItemCreate, client: Client = Depends(get_db)):
    errors = validation.validate_item(payload)
    if errors:
        raise _validation_failed(errors)
    rec = payload.model_dump()
    rec['name'] = rec['name'].strip()
    rec['category'] = rec['category'].strip()
    created = await run_in_threadpool(repository.create_item, client, rec)
    if not created:
        raise HTTPException(status_code=500, detail='Failed to create item')
    return {"status": "success", "data": created}


@router.get('/items')
async def list_items(client: Client = Depends(get_db)):
    res = await run_in_threadpool(repository.list_items, client)
    if res is None:
        raise HTTPException(status_code=500, detail='Failed to fetch items')
    return {"status": "success", "data": res}


@router.get('/items/{item_id}')
async def get_item(item_id: str, client: Client = Depends(get_db)):
    item = await run_in_threadpool(repository.get_item, client, item_id)
    if not item:
        raise HTTPException(status_code=404, detail='Item not found')
    return {"status": "success", "data": item}


@router.put('/items/{item_id}')
async def update_item(item_id: str, changes: ItemUpdate = Body(...), client: Client = Depends(get_db)):
    # allow partial updates from the frontend
    errors = validation.validate_item(changes, partial=True)
    if errors:
        raise _validation_failed(errors)
    rec = changes.model_dump(exclude_unset=True)
    if not rec:
        raise HTTPException(status_code=400, detail='No changes provided')
    existing = await run_in_threadpool(repository.get_item, client, item_id)
    if not existing:
        raise HTTPException(status_code=404, detail='Item not found')
    updated = await run_in_threadpool(repository.update_item, client, item_id, rec)
    if not updated:
        raise HTTPException(status_code=500, detail='Failed to update item')
    return {"status": "success", "data": updated}


@router.delete('/items/{item_id}')
async def delete_item(item_id: str, client: Client = Depends(get_db)):
    item = await run_in_threadpool(repository.get_item, client, item_id)
    if not item:
        raise HTTPException(status_code=404, detail='Item not found')
    ok = await run_in_threadpool(repository.delete_item, client, item_id)
    if not ok:
        raise HTTPException(status_code=500, detail='Failed to delete item')
    return {"status": "success"}
