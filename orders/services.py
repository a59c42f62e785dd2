"""Order fulfillment: create, update and delete orders against inventory.

Every operation that touches stock runs inside one ``UnitOfWork``: the
inventory rows involved are locked in ascending product id order, each
stock movement goes through ``inventory.store.apply_locked_delta`` (version
checked, history logged) and the order rows are written in the same
transaction. Any error rolls the whole operation back.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from catalog.models import Product
from catalog.selectors import get_products_by_ids
from common.choices import DeliveryStatus, ExportSource, FulfillmentMode, parse_choice
from common.db import Session, UnitOfWork, translate_db_errors
from common.errors import (
    BadRequestError,
    DuplicateOrderItemsError,
    NotFoundError,
    QuantityExceededError,
    VersionMismatchError,
)
from customer.selectors import get_customer
from django.conf import settings
from django.utils import timezone
from inventory import store as inventory_store
from inventory.models import Inventory
from users.selectors import get_actor

from .models import Order, OrderItem

logger = logging.getLogger("tradeflow.orders")


@dataclass(frozen=True)
class OrderLine:
    """One requested line of a new order."""

    product_id: int
    quantity: int
    selling_price: int
    export_from: str = ExportSource.INVENTORY
    version: str = ""
    discount: int = 0
    number_of_boxes: Optional[int] = None
    spec: Optional[int] = None
    final_amount: Optional[int] = None


@dataclass
class CreateOrderCommand:
    customer_id: int
    order_date: datetime
    lines: Sequence[OrderLine]
    delivery_status: str = DeliveryStatus.PENDING
    debt_status: str = ""
    additional_cost: int = 0
    additional_cost_note: str = ""


@dataclass
class _Allocation:
    """Quantity of one line assigned to one export source."""

    line: OrderLine
    source: str
    quantity: int
    final_amount: Optional[int] = None


@dataclass
class _Totals:
    original_cost: int = 0
    sales_revenue: int = 0
    items: List[OrderItem] = field(default_factory=list)


def compute_final_amount(quantity: int, selling_price: int, discount: int) -> int:
    """``quantity * selling_price * (1 - discount/100)`` rounded half up to whole VND."""

    gross = int(quantity) * int(selling_price) * (100 - int(discount))
    return (gross + 50) // 100


def create_order(
    *,
    actor_id: Optional[int],
    command: CreateOrderCommand,
    mode: Optional[str] = None,
    uow: Optional[UnitOfWork] = None,
) -> Order:
    """Create an order and deduct stock for its inventory-sourced lines.

    In ``declared`` mode each line's ``export_from`` is trusted and an
    INVENTORY line larger than the stock on hand fails with
    QuantityExceededError. In ``auto_split`` mode the engine takes what it
    can from inventory and sources the remainder externally.
    """

    actor = get_actor(actor_id)
    mode = parse_choice(FulfillmentMode, mode or settings.ORDER_FULFILLMENT_MODE, field="mode")
    delivery_status = parse_choice(DeliveryStatus, command.delivery_status, field="delivery_status")
    _validate_lines(command.lines, mode)
    customer = get_customer(command.customer_id)

    uow = uow or UnitOfWork()
    with uow.atomic() as session:
        products = get_products_by_ids([line.product_id for line in command.lines], session)
        if mode == FulfillmentMode.DECLARED:
            stock_ids = [line.product_id for line in command.lines if line.export_from == ExportSource.INVENTORY]
        else:
            stock_ids = [line.product_id for line in command.lines]
        locked = inventory_store.lock_many(stock_ids, session)

        with translate_db_errors("orders.create"):
            order = Order.objects.using(session.using).create(
                customer=customer,
                order_date=command.order_date,
                delivery_status=delivery_status,
                debt_status=command.debt_status or "",
                status_transitioned_at=timezone.now(),
                additional_cost=int(command.additional_cost or 0),
                additional_cost_note=command.additional_cost_note or "",
            )

        if mode == FulfillmentMode.DECLARED:
            allocations = _allocate_declared(command.lines, locked)
        else:
            allocations = _allocate_auto_split(command.lines, locked)

        totals = _Totals()
        for alloc in allocations:
            if alloc.source == ExportSource.INVENTORY:
                inventory_store.apply_locked_delta(
                    locked[alloc.line.product_id],
                    -alloc.quantity,
                    actor_name=actor.display_name,
                    note=f"Order #{order.id}",
                    reference_id=order.id,
                    session=session,
                )
            totals.items.append(_build_item(order, products[alloc.line.product_id], alloc, totals))

        with translate_db_errors("orders.create_items"):
            OrderItem.objects.using(session.using).bulk_create(totals.items)
            order.total_original_cost = totals.original_cost
            order.total_sales_revenue = totals.sales_revenue
            order.save(using=session.using, update_fields=["total_original_cost", "total_sales_revenue"])

    logger.info(
        "order.created",
        extra={
            "event": "order.created",
            "order_id": order.id,
            "user_id": actor.id,
            "customer_id": customer.id,
            "mode": str(mode),
            "lines": len(totals.items),
        },
    )
    return order


def update_order(
    *,
    actor_id: Optional[int],
    order_id: int,
    customer_id: Optional[int] = None,
    order_date: Optional[datetime] = None,
    delivery_status: Optional[str] = None,
    debt_status: Optional[str] = None,
    additional_cost: Optional[int] = None,
    additional_cost_note: Optional[str] = None,
    uow: Optional[UnitOfWork] = None,
) -> Order:
    """Change order metadata. Lines and stock are never touched here."""

    actor = get_actor(actor_id)
    new_status = None
    if delivery_status:
        new_status = parse_choice(DeliveryStatus, delivery_status, field="delivery_status")
    if additional_cost is not None and int(additional_cost) < 0:
        raise BadRequestError("Additional cost must be zero or positive", field="additional_cost")
    customer = get_customer(customer_id) if customer_id else None

    uow = uow or UnitOfWork()
    with uow.atomic() as session:
        order = _lock_order(order_id, session)
        previous_status = order.delivery_status
        changed = []
        if customer is not None:
            order.customer = customer
            changed.append("customer")
        if order_date is not None:
            order.order_date = order_date
            changed.append("order_date")
        if new_status is not None and new_status != order.delivery_status:
            order.delivery_status = new_status
            order.status_transitioned_at = timezone.now()
            changed += ["delivery_status", "status_transitioned_at"]
        if debt_status is not None:
            order.debt_status = debt_status
            changed.append("debt_status")
        if additional_cost is not None:
            order.additional_cost = int(additional_cost)
            changed.append("additional_cost")
        if additional_cost_note is not None:
            order.additional_cost_note = additional_cost_note
            changed.append("additional_cost_note")
        if changed:
            with translate_db_errors("orders.update"):
                order.save(using=session.using, update_fields=changed + ["updated_at"])

    logger.info(
        "order.updated",
        extra={
            "event": "order.updated",
            "order_id": order.id,
            "user_id": actor.id,
            "fields": changed,
            "status_from": previous_status,
            "status_to": order.delivery_status,
        },
    )
    return order


def delete_order(*, actor_id: Optional[int], order_id: int, uow: Optional[UnitOfWork] = None) -> None:
    """Delete an order, putting inventory-sourced quantities back in stock.

    Orders without INVENTORY lines are deleted directly. Otherwise each such
    line is restored with a positive delta against the currently locked
    version, logged with the restore note and no order reference.
    """

    actor = get_actor(actor_id)
    with translate_db_errors("orders.delete_lookup"):
        try:
            order = Order.objects.get(id=order_id)
        except Order.DoesNotExist:
            raise NotFoundError(f"Order {order_id} not found", field="order_id")
        stock_lines = list(order.items.filter(export_from=ExportSource.INVENTORY))

    if not stock_lines:
        with translate_db_errors("orders.delete"):
            Order.objects.filter(id=order.id).delete()
        logger.info(
            "order.deleted",
            extra={"event": "order.deleted", "order_id": order.id, "user_id": actor.id, "restored_lines": 0},
        )
        return

    restored: List[Tuple[int, int]] = []
    uow = uow or UnitOfWork()
    with uow.atomic() as session:
        order = _lock_order(order_id, session)
        stock_lines = list(
            OrderItem.objects.using(session.using)
            .filter(order_id=order.id, export_from=ExportSource.INVENTORY)
            .order_by("id")
        )
        locked = inventory_store.lock_many([item.product_id for item in stock_lines], session)
        note = settings.ORDER_DELETE_RESTORE_NOTE
        for item in stock_lines:
            inventory_store.apply_locked_delta(
                locked[item.product_id],
                int(item.quantity),
                actor_name=actor.display_name,
                note=note,
                reference_id=None,
                session=session,
            )
            restored.append((item.product_id, int(item.quantity)))
        with translate_db_errors("orders.delete"):
            Order.objects.using(session.using).filter(id=order.id).delete()

    logger.info(
        "order.deleted",
        extra={
            "event": "order.deleted",
            "order_id": order_id,
            "user_id": actor.id,
            "restored_lines": len(restored),
            "restored_quantity": sum(qty for _, qty in restored),
        },
    )


def _validate_lines(lines: Sequence[OrderLine], mode: str) -> None:
    """Input checks that must fail before any row is locked."""

    if not lines:
        raise BadRequestError("Order must contain at least one item", field="order_items")
    for line in lines:
        parse_choice(ExportSource, line.export_from, field="export_from")
        if int(line.quantity) <= 0:
            raise BadRequestError("Quantity must be positive", field="quantity")
        if int(line.selling_price) < 0:
            raise BadRequestError("Selling price must be zero or positive", field="selling_price")
        if not 0 <= int(line.discount) <= 100:
            raise BadRequestError("Discount must be between 0 and 100", field="discount")
        if line.final_amount is not None and int(line.final_amount) < 0:
            raise BadRequestError("Final amount must be zero or positive", field="final_amount")
        if mode == FulfillmentMode.DECLARED and line.export_from == ExportSource.INVENTORY and not line.version:
            raise BadRequestError("Inventory version is required", field="version")

    if mode == FulfillmentMode.DECLARED:
        keys = Counter((line.product_id, str(line.export_from)) for line in lines)
    else:
        # the engine picks the source, so one line per product
        keys = Counter(line.product_id for line in lines)
    if any(count > 1 for count in keys.values()):
        raise DuplicateOrderItemsError(field="order_items")


def _check_stock(inventory: Inventory, line: OrderLine, wanted: int) -> None:
    if inventory.version != line.version:
        raise VersionMismatchError(field="version")
    if int(inventory.quantity) < wanted:
        raise QuantityExceededError(
            f"Only {inventory.quantity} left in stock for product {line.product_id}", field="quantity"
        )


def _allocate_declared(lines: Sequence[OrderLine], locked: Dict[int, Inventory]) -> List[_Allocation]:
    allocations = []
    for line in lines:
        if line.export_from == ExportSource.INVENTORY:
            # checked against the snapshot only; apply_locked_delta refreshes it
            _check_stock(locked[line.product_id], line, int(line.quantity))
        allocations.append(
            _Allocation(line=line, source=str(line.export_from), quantity=int(line.quantity), final_amount=line.final_amount)
        )
    return allocations


def _allocate_auto_split(lines: Sequence[OrderLine], locked: Dict[int, Inventory]) -> List[_Allocation]:
    allocations = []
    for line in lines:
        inventory = locked[line.product_id]
        from_stock = min(int(line.quantity), max(int(inventory.quantity), 0))
        if from_stock > 0:
            if not line.version:
                raise BadRequestError("Inventory version is required", field="version")
            _check_stock(inventory, line, from_stock)
            allocations.append(_Allocation(line=line, source=ExportSource.INVENTORY, quantity=from_stock))
        remainder = int(line.quantity) - from_stock
        if remainder > 0:
            allocations.append(_Allocation(line=line, source=ExportSource.EXTERNAL, quantity=remainder))
    return allocations


def _build_item(order: Order, product: Product, alloc: _Allocation, totals: _Totals) -> OrderItem:
    line = alloc.line
    if alloc.final_amount is not None:
        final_amount = int(alloc.final_amount)
    else:
        final_amount = compute_final_amount(alloc.quantity, line.selling_price, line.discount)
    totals.original_cost += alloc.quantity * int(product.original_price)
    totals.sales_revenue += final_amount
    return OrderItem(
        order=order,
        product=product,
        number_of_boxes=line.number_of_boxes,
        spec=line.spec if line.spec is not None else product.spec,
        quantity=alloc.quantity,
        selling_price=int(line.selling_price),
        original_price=int(product.original_price),
        discount=int(line.discount),
        final_amount=final_amount,
        export_from=alloc.source,
    )


def _lock_order(order_id: int, session: Session) -> Order:
    with translate_db_errors("orders.lock"):
        try:
            return Order.objects.using(session.using).select_for_update().get(id=order_id)
        except Order.DoesNotExist:
            raise NotFoundError(f"Order {order_id} not found", field="order_id")


# EOF
