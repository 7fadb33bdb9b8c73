"""
Pytest configuration and fixtures for the roof materials test suite.
"""

import re
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from roof_materials import config as config_module
from roof_materials.branches import BranchLocator, InMemoryInventory
from roof_materials.catalog import CatalogProduct, CatalogResolver
from roof_materials.config import RoutingConfig
from roof_materials.estimation import calculate_materials
from roof_materials.models import (
    Complexity, InventoryRecord, RoofMeasurements, ShingleSpec, ShingleType, SupplyBranch
)

UUID4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"
)

JOB_SITE = (32.7800, -96.8000)  # Dallas


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Keep environment overrides and the cached config from leaking between tests."""
    for var in ('ORDER_TAX_RATE', 'BRANCH_SEARCH_LIMIT', 'INCLUDE_CLOSED_BRANCHES',
                'INVENTORY_RETRY_ATTEMPTS', 'INVENTORY_RETRY_WAIT', 'INVENTORY_RETRY_MAX_WAIT',
                'LOG_LEVEL', 'DEBUG', 'ENVIRONMENT', 'ROOF_MATERIALS_CONFIG'):
        monkeypatch.delenv(var, raising=False)
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def standard_measurements():
    """2000 sq ft, 6/12, medium complexity roof without valleys."""
    return RoofMeasurements(
        total_area=2000,
        pitch="6/12",
        complexity=Complexity.MEDIUM,
        ridge_length=40,
        hip_length=0,
        valley_length=0,
        eave_length=120,
        rake_length=80
    )


@pytest.fixture
def architectural_spec():
    return ShingleSpec(
        type=ShingleType.ARCHITECTURAL,
        manufacturer="GAF",
        color="Charcoal",
        product_line="Timberline HDZ"
    )


@pytest.fixture
def standard_estimate(standard_measurements, architectural_spec):
    return calculate_materials(standard_measurements, architectural_spec)


@pytest.fixture
def catalog_products():
    return [
        CatalogProduct("GAF-THDZ-CHR", "GAF Timberline HDZ Charcoal", "Shingles", 38.50, "bundle"),
        CatalogProduct("GAF-FB-UL", "GAF FeltBuster Synthetic Underlayment", "Underlayment", 115.00, "roll"),
        CatalogProduct("GAF-WW-IWS", "GAF WeatherWatch Ice & Water Shield", "Ice & Water Shield", 92.00, "roll"),
        CatalogProduct("GAF-PS-STR", "GAF Pro-Start Starter Strip", "Starter Strip", 40.00, "bundle"),
        CatalogProduct("GAF-TT-RDG", "GAF TimberTex Ridge Cap", "Ridge Cap", 60.00, "bundle"),
        CatalogProduct("ALU-DE-WHT", "Aluminum Drip Edge White", "Drip Edge", 6.25, "piece"),
        CatalogProduct("VAL-W-GALV", "W-Type Valley Metal Galvanized", "Valley Flashing", 27.00, "piece"),
        CatalogProduct("NAIL-125-30", "Galvanized Roofing Nails 30lb", "Fasteners", 62.00, "box"),
        CatalogProduct("OAT-PB-3", "Oatey No-Calk Pipe Boot", "Pipe Boots", 17.50, "each"),
    ]


@pytest.fixture
def catalog(catalog_products):
    return CatalogResolver(catalog_products)


@pytest.fixture
def priced_estimate(catalog, standard_estimate):
    return catalog.attach_skus(standard_estimate)


@pytest.fixture
def branches():
    return [
        SupplyBranch("DAL-01", "Dallas Central", "100 Commerce St, Dallas, TX", 32.7767, -96.7970),
        SupplyBranch("DAL-02", "Plano", "2000 Preston Rd, Plano, TX", 33.0198, -96.6989),
        SupplyBranch("FTW-01", "Fort Worth", "500 Main St, Fort Worth, TX", 32.7555, -97.3308,
                     delivery_available=False),
        SupplyBranch("HOU-01", "Houston", "900 Main St, Houston, TX", 29.7604, -95.3698, is_open=False),
    ]


@pytest.fixture
def routing_config():
    return RoutingConfig(branch_search_limit=3, inventory_retry_attempts=3, inventory_retry_wait=0)


@pytest.fixture
def stocked_inventory(catalog_products):
    return InMemoryInventory(
        InventoryRecord(sku=p.sku, branch_id="DAL-01", quantity_available=500)
        for p in catalog_products
    )


@pytest.fixture
def locator(branches, stocked_inventory, routing_config):
    return BranchLocator(branches, stocked_inventory, config=routing_config)


# Custom pytest markers
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (estimate through order draft)"
    )


def assert_valid_estimate(estimate):
    """Assert that an estimate is structurally sound."""
    assert UUID4_PATTERN.match(estimate.id)
    assert estimate.materials
    for line in estimate.materials:
        assert line.quantity >= 0
        assert line.unit_price >= 0
        assert line.total_price == line.quantity * line.unit_price
    assert estimate.total_cost == sum(line.total_price for line in estimate.materials)
