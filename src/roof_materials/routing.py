"""
Order routing: admit or reject an order for a routed estimate
"""

import logging
from typing import Optional, Union

from .models import DeliveryAddress, DeliveryMethod, OrderDraft, RoutingContext
from .orders import build_order_draft

logger = logging.getLogger(__name__)


def parse_delivery_method(value: Union[DeliveryMethod, str]) -> DeliveryMethod:
    if isinstance(value, DeliveryMethod):
        return value
    try:
        return DeliveryMethod(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Delivery method must be 'pickup' or 'delivery', got {value!r}") from None


def create_order_draft(
    ctx: RoutingContext,
    delivery_method: Union[DeliveryMethod, str],
    delivery_address: Optional[DeliveryAddress] = None,
    requested_date: Optional[str] = None,
    tax_rate: Optional[float] = None
) -> Optional[OrderDraft]:
    """
    Create an order draft when the routing context allows one

    The estimate's lines are expected to already carry catalog SKUs
    (see CatalogResolver.attach_skus).

    Returns:
        OrderDraft, or None when no branch was found or the branch cannot
        fill the order. None is an expected outcome; ctx.unavailable_items
        says why.
    """
    method = parse_delivery_method(delivery_method)
    estimate_id = ctx.estimate.id

    if ctx.branch is None:
        logger.info(f"Estimate {estimate_id}: no supply branch available, no order draft")
        return None

    if not ctx.order_ready:
        logger.info(
            f"Estimate {estimate_id}: branch {ctx.branch.id} not ready "
            f"({len(ctx.unavailable_items)} unavailable item(s))"
        )
        return None

    if method == DeliveryMethod.DELIVERY and not ctx.branch.delivery_available:
        logger.warning(f"Branch {ctx.branch.id} does not advertise delivery; drafting anyway")

    return build_order_draft(
        ctx.estimate,
        ctx.branch,
        method,
        delivery_address=delivery_address,
        requested_date=requested_date,
        tax_rate=tax_rate
    )
