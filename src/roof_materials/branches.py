"""
Supply branch lookup and inventory availability checks.

Picks the nearest open branch to the job site and checks each priced line of
an estimate against that branch's stock, producing the RoutingContext the
order routing engine consumes.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple

from geopy.distance import geodesic
from tenacity import Retrying, stop_after_attempt, wait_exponential, retry_if_exception_type

from .config import RoutingConfig, get_routing_config
from .exceptions import InventoryLookupError
from .models import InventoryRecord, MaterialEstimate, RoutingContext, SupplyBranch

logger = logging.getLogger(__name__)


class InventorySource(ABC):
    """Interface for per-branch stock lookups"""

    @abstractmethod
    def check_inventory(self, sku: str, branch_id: str) -> Optional[InventoryRecord]:
        """
        Stock for one SKU at one branch, or None when the branch does not
        carry it.

        Raises:
            InventoryLookupError: transient failure; the caller may retry
        """


class InMemoryInventory(InventorySource):
    """Inventory held in a dict keyed by (branch_id, sku)"""

    def __init__(self, records: Iterable[InventoryRecord] = ()):
        self._stock: Dict[Tuple[str, str], InventoryRecord] = {}
        for record in records:
            self.add(record)

    def add(self, record: InventoryRecord):
        self._stock[(record.branch_id, record.sku)] = record

    def check_inventory(self, sku: str, branch_id: str) -> Optional[InventoryRecord]:
        return self._stock.get((branch_id, sku))


class BranchLocator:
    """Finds the branch to route an estimate to and checks its stock"""

    def __init__(
        self,
        branches: Iterable[SupplyBranch],
        inventory: InventorySource,
        config: Optional[RoutingConfig] = None
    ):
        self.branches: List[SupplyBranch] = list(branches)
        self.inventory = inventory
        self.config = config or get_routing_config()
        self.logger = logging.getLogger(__name__)

    def find_nearest_branches(
        self,
        job_location: Tuple[float, float],
        limit: Optional[int] = None
    ) -> List[SupplyBranch]:
        """Branches ordered by geodesic distance from the job site"""
        if limit is None:
            limit = self.config.branch_search_limit
        candidates = [
            b for b in self.branches
            if b.is_open or self.config.include_closed_branches
        ]
        candidates.sort(key=lambda b: geodesic(job_location, b.coordinates).miles)
        return candidates[:limit]

    def _check_inventory(self, sku: str, branch_id: str) -> Optional[InventoryRecord]:
        retrying = Retrying(
            stop=stop_after_attempt(self.config.inventory_retry_attempts),
            wait=wait_exponential(
                multiplier=self.config.inventory_retry_wait,
                max=self.config.inventory_retry_max_wait
            ),
            retry=retry_if_exception_type(InventoryLookupError),
            reraise=True
        )
        try:
            return retrying(self.inventory.check_inventory, sku, branch_id)
        except InventoryLookupError as e:
            self.logger.error(f"Inventory lookup for {sku} at branch {branch_id} failed: {e}")
            raise

    def resolve_routing(
        self,
        estimate: MaterialEstimate,
        job_location: Tuple[float, float]
    ) -> RoutingContext:
        """
        Route an estimate to the nearest branch with an inventory check

        Args:
            estimate: Estimate whose lines carry catalog SKUs
            job_location: (latitude, longitude) of the job site

        Returns:
            RoutingContext: order_ready is True only when a branch was found
            and every SKU-bearing line is in stock there
        """
        branches = self.find_nearest_branches(job_location)
        if not branches:
            self.logger.info(f"No supply branches found near {job_location}")
            return RoutingContext(
                estimate=estimate,
                branch=None,
                order_ready=False,
                unavailable_items=[f"No supply branches found near {job_location[0]:.4f}, {job_location[1]:.4f}"]
            )

        primary = branches[0]
        inventory: List[InventoryRecord] = []
        unavailable: List[str] = []

        for line in estimate.materials:
            if not line.sku:
                continue
            record = self._check_inventory(line.sku, primary.id)
            if record is None:
                continue
            inventory.append(record)
            if not record.covers(line.quantity):
                unavailable.append(
                    f"{line.product_name}: need {line.quantity}, only {record.quantity_available} in stock"
                )

        ctx = RoutingContext(
            estimate=estimate,
            branch=primary,
            inventory=inventory,
            order_ready=not unavailable,
            unavailable_items=unavailable,
            alternative_branches=branches[1:]
        )
        self.logger.info(
            f"Estimate {estimate.id} routed to branch {primary.id} "
            f"({'ready' if ctx.order_ready else f'{len(unavailable)} short'})"
        )
        return ctx
