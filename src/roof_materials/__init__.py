"""
Roof Materials

Material quantity estimation from roof measurements and supply order routing
against a branch's inventory.
"""

__version__ = "1.0.0"

from .models import (
    Complexity, ShingleType, DeliveryMethod, RoofMeasurements, ShingleSpec,
    MaterialLine, PricedMaterialLine, MaterialEstimate, SupplyBranch,
    InventoryRecord, RoutingContext, DeliveryAddress, OrderLine, OrderDraft
)
from .exceptions import RoofMaterialsError, InvalidMeasurement, InventoryLookupError
from .estimation import MaterialEstimator, calculate_materials
from .normalizer import PartialClaimData, estimate_from_claim_data, normalize_claim_data
from .routing import create_order_draft
from .orders import build_order_draft
from .catalog import CatalogProduct, CatalogResolver
from .branches import BranchLocator, InventorySource, InMemoryInventory

__all__ = [
    'Complexity',
    'ShingleType',
    'DeliveryMethod',
    'RoofMeasurements',
    'ShingleSpec',
    'MaterialLine',
    'PricedMaterialLine',
    'MaterialEstimate',
    'SupplyBranch',
    'InventoryRecord',
    'RoutingContext',
    'DeliveryAddress',
    'OrderLine',
    'OrderDraft',
    'RoofMaterialsError',
    'InvalidMeasurement',
    'InventoryLookupError',
    'MaterialEstimator',
    'calculate_materials',
    'PartialClaimData',
    'estimate_from_claim_data',
    'normalize_claim_data',
    'create_order_draft',
    'build_order_draft',
    'CatalogProduct',
    'CatalogResolver',
    'BranchLocator',
    'InventorySource',
    'InMemoryInventory'
]
