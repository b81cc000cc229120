"""
Kitchen ticket timing.

For an order with at least one line in preparation the ready estimate is:

    per product:  prep_minutes * 60 + (quantity - 1) * EXTRA_UNIT_PENALTY_SECONDS
    order time:   the slowest product
    large order:  x LARGE_ORDER_MULTIPLIER when it has LARGE_ORDER_PRODUCT_COUNT
                  or more distinct products (rounded half-up to the second)
    batch:        + (orders in the same kitchen action - 1) * BATCH_PENALTY_SECONDS

Quantities of lines sharing a product are summed first, so two lines of the
same burger cost the same as one line of two. Lines without a catalog product
carry no preparation time and are ignored.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Optional

from django.conf import settings


@dataclass(frozen=True)
class KitchenTimingConfig:
    default_prep_minutes: int = 1
    extra_unit_penalty_seconds: int = 2 * 60
    batch_penalty_seconds: int = 2 * 60
    large_order_product_count: int = 3
    large_order_multiplier: Decimal = Decimal("1.2")

    @classmethod
    def from_settings(cls) -> "KitchenTimingConfig":
        conf = getattr(settings, "POS_KITCHEN", {})
        defaults = cls()
        return cls(
            default_prep_minutes=int(conf.get("DEFAULT_PREP_MINUTES", defaults.default_prep_minutes)),
            extra_unit_penalty_seconds=int(
                conf.get("EXTRA_UNIT_PENALTY_SECONDS", defaults.extra_unit_penalty_seconds)
            ),
            batch_penalty_seconds=int(conf.get("BATCH_PENALTY_SECONDS", defaults.batch_penalty_seconds)),
            large_order_product_count=int(
                conf.get("LARGE_ORDER_PRODUCT_COUNT", defaults.large_order_product_count)
            ),
            large_order_multiplier=Decimal(
                str(conf.get("LARGE_ORDER_MULTIPLIER", defaults.large_order_multiplier))
            ),
        )


@dataclass(frozen=True)
class PrepLine:
    product_id: int
    prep_minutes: Optional[int]
    quantity: int


def product_seconds(prep_minutes: Optional[int], quantity: int, config: KitchenTimingConfig) -> int:
    prep = prep_minutes or config.default_prep_minutes
    return prep * 60 + (max(quantity, 1) - 1) * config.extra_unit_penalty_seconds


def estimate_prep_seconds(
    lines: Iterable[PrepLine],
    orders_in_call: int = 1,
    config: Optional[KitchenTimingConfig] = None,
) -> int:
    """Seconds from now until the order should be ready."""
    config = config or KitchenTimingConfig.from_settings()

    quantities: Dict[int, int] = {}
    prep_minutes: Dict[int, Optional[int]] = {}
    for line in lines:
        quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity
        prep_minutes[line.product_id] = line.prep_minutes

    seconds = max(
        (product_seconds(prep_minutes[pid], qty, config) for pid, qty in quantities.items()),
        default=0,
    )
    if len(quantities) >= config.large_order_product_count:
        seconds = int(
            (Decimal(seconds) * config.large_order_multiplier).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        )

    return seconds + max(orders_in_call - 1, 0) * config.batch_penalty_seconds
