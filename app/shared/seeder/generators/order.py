"""Order generator with line items, pricing and status history."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any

from app.shared.seeder.resolver import DependencyPool

if TYPE_CHECKING:
    from app.shared.seeder.resolver import PoolRecord
    from app.shared.seeder.templates import EntityTemplate
    from app.shared.seeder.values import ValueGenerator


CENT = Decimal("0.01")

CANCELLED = "cancelled"

# Statuses from which a parcel has left the warehouse
SHIPPED_STATUSES = frozenset({"shipped", "delivered", "completed"})

# Maximum gap between two consecutive status changes
STATUS_STEP = timedelta(days=2)


def _money(value: Any) -> Decimal:
    """Convert a stored price into a 2 dp Decimal."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_pricing(
    line_items: Sequence[Mapping[str, Any]],
    tax_rate: float | Decimal,
    shipping_cost: float | Decimal,
) -> dict[str, float]:
    """Compute order totals from line items.

    All arithmetic is done in Decimal and quantised to cents, so the stored
    figures satisfy ``total == subtotal + taxAmount + shippingCost`` exactly.

    Args:
        line_items: Items with ``price`` and ``quantity``.
        tax_rate: Fractional tax rate (0.08 = 8%).
        shipping_cost: Flat shipping cost.

    Returns:
        Dictionary with subtotal, taxRate, taxAmount, shippingCost and total.
    """
    subtotal = sum(
        (_money(item["price"]) * int(item["quantity"]) for item in line_items),
        Decimal("0"),
    ).quantize(CENT)
    rate = Decimal(str(tax_rate))
    tax_amount = (subtotal * rate).quantize(CENT, rounding=ROUND_HALF_UP)
    shipping = _money(shipping_cost)
    total = subtotal + tax_amount + shipping

    return {
        "subtotal": float(subtotal),
        "taxRate": float(rate),
        "taxAmount": float(tax_amount),
        "shippingCost": float(shipping),
        "total": float(total),
    }


class OrderGenerator:
    """Generator for order documents.

    Customers and products are sampled from the dependency pools captured
    before generation; an empty pool yields a null reference instead of a
    failure.
    """

    def __init__(
        self,
        values: ValueGenerator,
        template: EntityTemplate,
        pools: dict[str, DependencyPool] | None = None,
    ) -> None:
        """Initialize the order generator.

        Args:
            values: Value generator for this pass.
            template: ``orders`` template.
            pools: Dependency pools keyed by collection (``users``, ``products``).

        Raises:
            InvalidConstraint: If a required template field is missing or malformed.
        """
        pools = pools or {}
        self.values = values
        self.users = pools.get("users") or DependencyPool("users")
        self.products = pools.get("products") or DependencyPool("products")

        self.workflow = [step["status"] for step in template.require("statusWorkflow")]
        self.descriptions = {
            step["status"]: step.get("description", "")
            for step in template.require("statusWorkflow")
        }
        self.payment_methods = template.require("paymentMethods")
        self.shipping_options = template.require("shippingOptions")
        self.tax_rate = template.require("taxRates", "default")
        self.line_item_range = template.require_range("lineItems")
        self.quantity_range = template.require_range("quantity")
        self.fallback_price = template.require_range("fallbackPrice")
        self.age_days = int(template.get("orderAgeDays", 30))
        self.discount_probability = template.get("discountProbability", 0.5)

    def _generate_order_number(self, created_at: datetime) -> str:
        return f"ORD-{created_at:%Y%m%d}-{self.values.string(6)}"

    def _price_for(self, record: PoolRecord | None) -> Decimal:
        price = record.get("price") if record else None
        if isinstance(price, int | float) and not isinstance(price, bool) and price >= 0:
            return _money(price)
        return self.values.decimal(*self.fallback_price, precision=2)

    def _generate_line_items(self) -> list[dict[str, Any]]:
        size = self.values.integer(int(self.line_item_range[0]), int(self.line_item_range[1]))
        picked: list[PoolRecord | None] = list(self.products.pick_many(self.values, size))
        if not picked:
            picked = [None] * size

        items = []
        for record in picked:
            price = self._price_for(record)
            quantity = self.values.integer(
                int(self.quantity_range[0]), int(self.quantity_range[1])
            )
            items.append(
                {
                    "productId": record.id if record else None,
                    "name": (record.get("name") if record else None)
                    or f"{self.values.word().title()} {self.values.word().title()}",
                    "price": float(price),
                    "quantity": quantity,
                    "lineTotal": float((price * quantity).quantize(CENT)),
                }
            )
        return items

    def _status_path(self, status: str) -> list[str]:
        """Statuses an order passed through to reach ``status``."""
        if status == CANCELLED:
            return [self.workflow[0], CANCELLED] if self.workflow[0] != CANCELLED else [CANCELLED]
        return self.workflow[: self.workflow.index(status) + 1]

    def _generate_status_history(self, status: str, created_at: datetime) -> list[dict[str, Any]]:
        history = []
        timestamp = created_at
        for index, step in enumerate(self._status_path(status)):
            if index:
                upper = min(timestamp + STATUS_STEP, max(timestamp, self.values.now))
                timestamp = self.values.date_between(timestamp, upper)
            history.append(
                {
                    "status": step,
                    "timestamp": timestamp,
                    "note": self.descriptions.get(step, ""),
                }
            )
        return history

    def _build(self) -> dict[str, Any]:
        created_at = self.values.recent(self.age_days)
        status = self.values.choice(self.workflow)
        history = self._generate_status_history(status, created_at)
        payment = self.values.choice(self.payment_methods)
        shipping = self.values.choice(self.shipping_options)
        customer = self.users.pick_one(self.values)
        line_items = self._generate_line_items()

        if status == CANCELLED:
            payment_status = "refunded"
        elif status == self.workflow[0]:
            payment_status = "pending"
        else:
            payment_status = "paid"

        shipped = status in SHIPPED_STATUSES
        delivery_days = int(shipping.get("deliveryDays", 5))

        return {
            "orderNumber": self._generate_order_number(created_at),
            "userId": customer.id if customer else None,
            "customer": (
                {"displayName": customer.get("displayName"), "email": customer.get("email")}
                if customer
                else None
            ),
            "status": status,
            "statusHistory": history,
            "lineItems": line_items,
            "itemCount": sum(item["quantity"] for item in line_items),
            "pricing": compute_pricing(line_items, self.tax_rate, shipping.get("cost", 0)),
            "payment": {
                "method": payment["id"],
                "methodName": payment["name"],
                "status": payment_status,
            },
            "shipping": {
                "method": shipping["id"],
                "methodName": shipping["name"],
                "address": self.values.address(),
                "trackingNumber": f"TRK{self.values.string(12)}" if shipped else None,
                "estimatedDelivery": (
                    None
                    if status == CANCELLED
                    else self.values.future(delivery_days, created_at)
                ),
            },
            "notes": self.values.sentence() if self.values.boolean(0.3) else None,
            "discountCode": (
                f"SAVE{self.values.integer(5, 30)}"
                if self.values.boolean(self.discount_probability)
                else None
            ),
            "createdAt": created_at,
            "updatedAt": history[-1]["timestamp"],
        }

    def generate(self, count: int) -> list[dict[str, Any]]:
        """Generate order records.

        Returns:
            List of order documents ready for persistence.
        """
        return [self._build() for _ in range(count)]
