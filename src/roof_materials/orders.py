"""
Order draft construction from a routed, SKU-bearing estimate
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

from .config import get_order_config
from .models import (
    DeliveryAddress, DeliveryMethod, MaterialEstimate, MaterialLine,
    OrderDraft, SupplyBranch
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def to_cents(amount) -> Decimal:
    """Round a money amount to the cent, half up"""
    return Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)


def orderable_lines(lines: Iterable[MaterialLine]) -> List[MaterialLine]:
    """Lines that can be placed on a supplier order (those with a SKU)"""
    return [line for line in lines if line.sku]


def compute_totals(lines: Iterable[MaterialLine], tax_rate: float):
    """
    Subtotal, tax and total for the ordered lines, each rounded to the cent

    Returns:
        (subtotal, estimated_tax, total) as floats
    """
    subtotal = to_cents(sum((Decimal(str(line.quantity)) * Decimal(str(line.unit_price)) for line in lines),
                            Decimal(0)))
    estimated_tax = to_cents(subtotal * Decimal(str(tax_rate)))
    total = to_cents(subtotal + estimated_tax)
    return float(subtotal), float(estimated_tax), float(total)


def build_order_draft(
    estimate: MaterialEstimate,
    branch: SupplyBranch,
    delivery_method: DeliveryMethod,
    delivery_address: Optional[DeliveryAddress] = None,
    requested_date: Optional[str] = None,
    tax_rate: Optional[float] = None
) -> Optional[OrderDraft]:
    """
    Package an estimate's SKU-bearing lines as an order draft

    Lines without a SKU cannot be ordered and are left off the draft, so the
    subtotal reflects what is actually ordered. Returns None when no line
    carries a SKU.
    """
    if tax_rate is None:
        tax_rate = get_order_config().tax_rate

    lines = orderable_lines(estimate.materials)
    skipped = len(estimate.materials) - len(lines)
    if skipped:
        logger.warning(f"Estimate {estimate.id}: {skipped} line(s) without SKU left off the order")

    if not lines:
        logger.info(f"Estimate {estimate.id}: no orderable lines, no draft created")
        return None

    subtotal, estimated_tax, total = compute_totals(lines, tax_rate)

    draft = OrderDraft(
        estimate_id=estimate.id,
        branch_id=branch.id,
        delivery_method=delivery_method,
        line_items=lines,
        subtotal=subtotal,
        estimated_tax=estimated_tax,
        total=total,
        delivery_address=delivery_address,
        requested_date=requested_date
    )
    logger.info(
        f"Order draft for estimate {estimate.id} at branch {branch.id}: "
        f"{len(lines)} lines, total ${total:,.2f} ({delivery_method.value})"
    )
    return draft
