"""Read models for orders.

Everything here is derived from persisted order rows and their snapshots;
no inventory row is read or locked.
"""

from typing import Iterable, Optional

from common.choices import DeliveryStatus, OrderSort, parse_choice
from common.db import translate_db_errors
from common.errors import NotFoundError
from customer.selectors import customer_summary

from .models import Order, OrderItem
from .storage import image_url

SORT_ORDERING = {
    OrderSort.ID_DESC: ["-id"],
    OrderSort.ORDER_DATE_ASC: ["order_date", "id"],
    OrderSort.ORDER_DATE_DESC: ["-order_date", "-id"],
}


def _base_queryset():
    return Order.objects.select_related("customer").prefetch_related("items__product", "images")


def list_orders(
    customer_id: Optional[int] = None,
    delivery_statuses: Optional[Iterable[str]] = None,
    sort: Optional[str] = None,
):
    qs = _base_queryset()
    if customer_id:
        qs = qs.filter(customer_id=customer_id)
    statuses = [s.strip() for s in (delivery_statuses or []) if s and s.strip()]
    if statuses:
        qs = qs.filter(
            delivery_status__in=[parse_choice(DeliveryStatus, s, field="delivery_statuses") for s in statuses]
        )
    order_by = parse_choice(OrderSort, sort, field="sort") if sort else OrderSort.ID_DESC
    return qs.order_by(*SORT_ORDERING[order_by])


def get_order(order_id: int) -> Order:
    with translate_db_errors("orders.get_order"):
        try:
            return _base_queryset().get(id=order_id)
        except Order.DoesNotExist:
            raise NotFoundError(f"Order {order_id} not found", field="order_id")


def profit_loss_percentage(profit_loss: int, cost: int) -> Optional[float]:
    """Profit or loss as a percentage of cost; ``None`` when there is no cost."""

    if not cost:
        return None
    return round(profit_loss * 100.0 / cost, 2)


def item_final_amount(item: OrderItem) -> int:
    if item.final_amount is not None:
        return int(item.final_amount)
    gross = int(item.quantity) * int(item.selling_price) * (100 - int(item.discount))
    return (gross + 50) // 100


def build_item_view(item: OrderItem) -> dict:
    final_amount = item_final_amount(item)
    cost = int(item.original_price) * int(item.quantity)
    profit_loss = final_amount - cost
    return {
        "id": item.id,
        "order_id": item.order_id,
        "product_id": item.product_id,
        "product_name": item.product.name if item.product_id else "",
        "number_of_boxes": item.number_of_boxes,
        "spec": item.spec,
        "quantity": item.quantity,
        "selling_price": item.selling_price,
        "discount": item.discount,
        "final_amount": final_amount,
        "export_from": item.export_from,
        "original_price": item.original_price,
        "profit_loss": profit_loss,
        "profit_loss_percentage": profit_loss_percentage(profit_loss, cost),
    }


def build_order_view(order: Order, with_items: bool = True) -> dict:
    """Assemble the order read model with totals, profit/loss and image URLs."""

    items = list(order.items.all())
    total_profit_loss = int(order.total_sales_revenue) - int(order.total_original_cost)
    view = {
        "id": order.id,
        "order_date": order.order_date,
        "delivery_status": order.delivery_status,
        "debt_status": order.debt_status or None,
        "status_transitioned_at": order.status_transitioned_at,
        "additional_cost": order.additional_cost,
        "additional_cost_note": order.additional_cost_note or None,
        "customer": customer_summary(order.customer),
        "total_amount": sum(item_final_amount(item) for item in items),
        "product_count": len({item.product_id for item in items}),
        "total_original_cost": order.total_original_cost,
        "total_sales_revenue": order.total_sales_revenue,
        "total_profit_loss": total_profit_loss,
        "total_profit_loss_percentage": profit_loss_percentage(total_profit_loss, int(order.total_original_cost)),
        "images": [
            {"id": img.id, "image_type": img.image_type, "s3_key": img.storage_key, "image_url": image_url(img.storage_key)}
            for img in order.images.all()
        ],
    }
    if with_items:
        view["order_items"] = [build_item_view(item) for item in items]
    return view


# EOF
