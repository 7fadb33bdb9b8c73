"""
Core data models for material estimation and order routing
"""

from dataclasses import dataclass, field, replace
from typing import List, Dict, Optional, Tuple, Any
from datetime import datetime, timezone
from enum import Enum


class Complexity(Enum):
    """Roof complexity tier driving the waste factor"""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"


class ShingleType(Enum):
    """Shingle product families"""
    THREE_TAB = "THREE_TAB"
    ARCHITECTURAL = "ARCHITECTURAL"
    PREMIUM = "PREMIUM"


class DeliveryMethod(Enum):
    """How the branch hands the order over"""
    PICKUP = "pickup"
    DELIVERY = "delivery"


@dataclass(frozen=True)
class RoofMeasurements:
    """Field measurements of a roof"""
    total_area: float  # sq ft, plan area before pitch correction
    pitch: str  # "rise/12"
    complexity: Complexity
    ridge_length: float = 0.0
    hip_length: float = 0.0
    valley_length: float = 0.0
    eave_length: float = 0.0
    rake_length: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_area': self.total_area,
            'pitch': self.pitch,
            'complexity': self.complexity.value if isinstance(self.complexity, Complexity) else self.complexity,
            'ridge_length': self.ridge_length,
            'hip_length': self.hip_length,
            'valley_length': self.valley_length,
            'eave_length': self.eave_length,
            'rake_length': self.rake_length
        }


@dataclass(frozen=True)
class ShingleSpec:
    """Shingle selection for the job"""
    type: ShingleType = ShingleType.ARCHITECTURAL
    manufacturer: Optional[str] = None
    color: Optional[str] = None
    product_line: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value if isinstance(self.type, ShingleType) else self.type,
            'manufacturer': self.manufacturer,
            'color': self.color,
            'product_line': self.product_line
        }


@dataclass(frozen=True)
class MaterialLine:
    """One line of the bill of materials, before catalog pricing"""
    category: str
    product_name: str
    quantity: int
    unit: str  # "bundle", "roll", "piece", "box", "each"
    unit_price: float
    coverage: Optional[str] = None
    sku: Optional[str] = None

    @property
    def total_price(self) -> float:
        return self.quantity * self.unit_price

    def priced(self, sku: str, unit_price: Optional[float] = None,
               product_name: Optional[str] = None) -> 'PricedMaterialLine':
        """Attach catalog SKU (and optionally the catalog's price and name)"""
        return PricedMaterialLine(
            category=self.category,
            product_name=product_name or self.product_name,
            quantity=self.quantity,
            unit=self.unit,
            unit_price=self.unit_price if unit_price is None else unit_price,
            coverage=self.coverage,
            sku=sku
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category,
            'product_name': self.product_name,
            'sku': self.sku,
            'quantity': self.quantity,
            'unit': self.unit,
            'unit_price': self.unit_price,
            'total_price': self.total_price,
            'coverage': self.coverage
        }


@dataclass(frozen=True)
class PricedMaterialLine(MaterialLine):
    """Material line carrying a resolved catalog SKU"""

    def __post_init__(self):
        if not self.sku:
            raise ValueError(f"Priced line '{self.category}' requires a SKU")


@dataclass(frozen=True)
class MaterialEstimate:
    """Bill of materials computed for one roof"""
    id: str
    measurements: RoofMeasurements
    shingle_spec: ShingleSpec
    materials: Tuple[MaterialLine, ...]
    waste_factor: float
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    notes: Tuple[str, ...] = ()

    @property
    def total_cost(self) -> float:
        return sum(line.total_price for line in self.materials)

    @property
    def categories(self) -> List[str]:
        return [line.category for line in self.materials]

    def line_for(self, category: str) -> Optional[MaterialLine]:
        for line in self.materials:
            if line.category == category:
                return line
        return None

    def with_materials(self, materials) -> 'MaterialEstimate':
        """Copy of this estimate (same id) with replaced material lines"""
        return replace(self, materials=tuple(materials))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'created_at': self.created_at.isoformat(),
            'measurements': self.measurements.to_dict(),
            'shingle_spec': self.shingle_spec.to_dict(),
            'materials': [line.to_dict() for line in self.materials],
            'waste_factor': self.waste_factor,
            'total_cost': self.total_cost,
            'notes': list(self.notes)
        }


@dataclass
class SupplyBranch:
    """Supplier branch location"""
    id: str
    name: str
    address: str
    latitude: float
    longitude: float
    is_open: bool = True
    delivery_available: bool = True
    phone: Optional[str] = None

    @property
    def coordinates(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'address': self.address,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'is_open': self.is_open,
            'delivery_available': self.delivery_available,
            'phone': self.phone
        }


@dataclass
class InventoryRecord:
    """Stock level of one SKU at one branch"""
    sku: str
    branch_id: str
    quantity_available: int

    def covers(self, quantity: float) -> bool:
        return self.quantity_available >= quantity


@dataclass
class RoutingContext:
    """Branch and inventory snapshot for an estimate"""
    estimate: MaterialEstimate
    branch: Optional[SupplyBranch]
    inventory: List[InventoryRecord] = field(default_factory=list)
    order_ready: bool = False
    unavailable_items: List[str] = field(default_factory=list)
    alternative_branches: List[SupplyBranch] = field(default_factory=list)


@dataclass
class DeliveryAddress:
    """Job site address for delivered orders"""
    street: str
    city: str
    state: str
    zip_code: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'street': self.street,
            'city': self.city,
            'state': self.state,
            'zip_code': self.zip_code
        }


@dataclass(frozen=True)
class OrderLine:
    """SKU and quantity as submitted to the supplier"""
    sku: str
    quantity: int


@dataclass
class OrderDraft:
    """Priced, tax-inclusive order that has not been submitted"""
    estimate_id: str
    branch_id: str
    delivery_method: DeliveryMethod
    line_items: List[MaterialLine]
    subtotal: float
    estimated_tax: float
    total: float
    delivery_address: Optional[DeliveryAddress] = None
    requested_date: Optional[str] = None

    @property
    def order_lines(self) -> List[OrderLine]:
        return [OrderLine(sku=line.sku, quantity=line.quantity) for line in self.line_items]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'estimate_id': self.estimate_id,
            'branch_id': self.branch_id,
            'delivery_method': self.delivery_method.value,
            'lines': [{'sku': line.sku, 'quantity': line.quantity} for line in self.order_lines],
            'line_items': [line.to_dict() for line in self.line_items],
            'subtotal': self.subtotal,
            'estimated_tax': self.estimated_tax,
            'total': self.total,
            'delivery_address': self.delivery_address.to_dict() if self.delivery_address else None,
            'requested_date': self.requested_date
        }
