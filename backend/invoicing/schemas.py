from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


# Request models stay loose on purpose: the rules live in validation.py so a
# caller sees every problem at once instead of the first parse failure.

class InvoiceItem(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None
    # ignored, always recomputed from quantity and unit_price
    total: Optional[Decimal] = None


class InvoiceCreate(BaseModel):
    invoice_number: Optional[str] = None
    invoice_type: Literal['proforma', 'tax'] = 'proforma'
    state: Optional[str] = None
    state_code: Optional[str] = None
    order_number: Optional[str] = None
    order_date: Optional[date] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    items: List[InvoiceItem] = Field(default_factory=list)
    cgst_rate: Optional[Decimal] = None
    sgst_rate: Optional[Decimal] = None
    igst_rate: Optional[Decimal] = None
    transaction_type: Optional[str] = None
    due_date: Optional[date] = None
    user_id: Optional[str] = None


class InvoiceUpdate(BaseModel):
    status: Optional[str] = None
    state: Optional[str] = None
    state_code: Optional[str] = None
    order_number: Optional[str] = None
    order_date: Optional[date] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    items: Optional[List[InvoiceItem]] = None
    cgst_rate: Optional[Decimal] = None
    sgst_rate: Optional[Decimal] = None
    igst_rate: Optional[Decimal] = None
    transaction_type: Optional[str] = None
    due_date: Optional[date] = None


class QuotationItem(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    unit_packing: Optional[str] = None
    quantity: Optional[Decimal] = None
    rate_including_gst: Optional[Decimal] = None
    mrp: Optional[Decimal] = None
    total: Optional[Decimal] = None


class QuotationCreate(BaseModel):
    quotation_number: Optional[str] = None
    reference_letter: Optional[str] = None
    quotation_date: Optional[date] = None
    to_name: Optional[str] = None
    to_designation: Optional[str] = None
    to_department: Optional[str] = None
    to_address: Optional[str] = None
    subject: Optional[str] = None
    items: List[QuotationItem] = Field(default_factory=list)
    notes: Optional[str] = None
    user_id: Optional[str] = None


class ItemCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = 'General'
    unit_price: Optional[Decimal] = None
    unit_packing: Optional[str] = None
    hsn_code: Optional[str] = None
    gst_rate: Optional[Decimal] = None
    is_active: bool = True


class ItemUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    unit_price: Optional[Decimal] = None
    unit_packing: Optional[str] = None
    hsn_code: Optional[str] = None
    gst_rate: Optional[Decimal] = None
    is_active: Optional[bool] = None
