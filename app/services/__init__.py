"""Services package for the project part tracker."""

from app.services.container import ServiceContainer
from app.services.inventory_service import InventoryService
from app.services.part_service import PartService
from app.services.qr_service import QRService
from app.services.test_data_service import TestDataService

__all__ = [
    "ServiceContainer",
    "InventoryService",
    "PartService",
    "QRService",
    "TestDataService",
]
