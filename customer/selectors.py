"""Read-only customer lookups."""

from typing import Optional

from common.db import translate_db_errors
from common.errors import NotFoundError

from .models import Customer


def get_customer(customer_id: int) -> Customer:
    with translate_db_errors("customer.get_customer"):
        try:
            return Customer.objects.get(id=customer_id)
        except Customer.DoesNotExist:
            raise NotFoundError(f"Customer {customer_id} not found", field="customer_id")


def customer_summary(customer: Optional[Customer]) -> dict:
    if customer is None:
        return {"id": None, "name": "", "phone": "", "address": ""}
    return {"id": customer.id, "name": customer.name, "phone": customer.phone, "address": customer.address}
