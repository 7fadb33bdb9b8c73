"""
Catalog/pricing resolution: attaches supplier SKUs and prices to estimate lines
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Any

from .models import MaterialEstimate, MaterialLine

SEARCH_TERMS = 3  # leading words of a product name used as search terms


@dataclass(frozen=True)
class CatalogProduct:
    """Supplier catalog entry"""
    sku: str
    name: str
    category: str
    price_per_unit: float
    unit: str = "each"

    def matches_category(self, category: str) -> bool:
        return self.category.strip().lower() == category.strip().lower()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sku': self.sku,
            'name': self.name,
            'category': self.category,
            'price_per_unit': self.price_per_unit,
            'unit': self.unit
        }


class CatalogResolver:
    """Resolves estimate lines against a supplier product catalog"""

    def __init__(self, products: Iterable[CatalogProduct]):
        self.products: List[CatalogProduct] = list(products)
        self.logger = logging.getLogger(__name__)

    def search(self, query: str, limit: int = 5) -> List[CatalogProduct]:
        """Products whose name shares a word with the query, best overlap first"""
        terms = {t.lower() for t in query.split()}
        scored = []
        for index, product in enumerate(self.products):
            overlap = len(terms & {w.lower() for w in product.name.split()})
            if overlap:
                scored.append((-overlap, index, product))
        scored.sort(key=lambda item: (item[0], item[1]))
        return [product for _, _, product in scored[:limit]]

    def find_match(self, line: MaterialLine) -> Optional[CatalogProduct]:
        query = " ".join(line.product_name.split()[:SEARCH_TERMS])
        for product in self.search(query):
            if product.matches_category(line.category):
                return product
        # Fall back to any product in the right category
        for product in self.products:
            if product.matches_category(line.category):
                return product
        return None

    def attach_skus(self, estimate: MaterialEstimate) -> MaterialEstimate:
        """
        Return a copy of the estimate with catalog SKU, name and price on
        every line that has a catalog match. Unmatched lines stay unpriced.
        """
        lines = []
        unmatched = []
        for line in estimate.materials:
            product = self.find_match(line)
            if product is None:
                unmatched.append(line.category)
                lines.append(line)
                continue
            lines.append(line.priced(product.sku, unit_price=product.price_per_unit, product_name=product.name))

        if unmatched:
            self.logger.warning(f"Estimate {estimate.id}: no catalog match for {', '.join(unmatched)}")

        priced = estimate.with_materials(lines)
        self.logger.info(
            f"Estimate {estimate.id}: priced {len(lines) - len(unmatched)}/{len(lines)} lines, "
            f"total ${priced.total_cost:,.2f}"
        )
        return priced
