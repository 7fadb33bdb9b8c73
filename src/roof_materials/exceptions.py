"""
Error types raised by the material estimation and order routing core
"""


class RoofMaterialsError(Exception):
    """Base class for roof materials errors"""


class InvalidMeasurement(RoofMaterialsError, ValueError):
    """Non-positive area, negative length, unknown pitch or complexity tier"""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field

    def __str__(self):
        if self.field:
            return f"{self.field}: {self.args[0]}"
        return self.args[0]


class InventoryLookupError(RoofMaterialsError):
    """Transient failure while querying a branch's inventory"""

    def __init__(self, message: str, sku: str = None, branch_id: str = None):
        super().__init__(message)
        self.sku = sku
        self.branch_id = branch_id
