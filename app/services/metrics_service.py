"""Prometheus metrics service for collecting and exposing application metrics."""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from prometheus_client import Counter, Gauge, generate_latest

if TYPE_CHECKING:
    from app.services.part_service import PartService

logger = logging.getLogger(__name__)


class MetricsServiceProtocol(ABC):
    """Protocol for metrics service implementations."""

    @abstractmethod
    def initialize_metrics(self) -> None:
        """Initialize metric objects."""
        pass

    @abstractmethod
    def update_inventory_metrics(self, part_service: "PartService") -> None:
        """Update inventory-related gauges."""
        pass

    @abstractmethod
    def record_quantity_change(self, operation: str, delta: int) -> None:
        """Record quantity change events."""
        pass

    @abstractmethod
    def record_status_change(self, old_status: str, new_status: str) -> None:
        """Record status transitions."""
        pass

    @abstractmethod
    def get_metrics_text(self) -> str:
        """Get metrics in Prometheus text format."""
        pass

    @abstractmethod
    def record_part_created(self) -> None:
        """Record part creation events."""
        pass

    @abstractmethod
    def record_part_deleted(self) -> None:
        """Record part deletion events."""
        pass

    @abstractmethod
    def record_version_conflict(self, operation: str) -> None:
        """Record optimistic concurrency conflicts."""
        pass


class MetricsService(MetricsServiceProtocol):
    """Service class for Prometheus metrics collection and exposure."""

    def __init__(self):
        self.initialize_metrics()

    def initialize_metrics(self) -> None:
        """Define all Prometheus metric objects."""
        # Check if already initialized (for container singleton reuse)
        if hasattr(self, 'inventory_total_parts'):
            return

        # Inventory Metrics
        self.inventory_total_parts = Gauge(
            'inventory_total_parts',
            'Total parts in system'
        )

        self.inventory_total_quantity = Gauge(
            'inventory_total_quantity',
            'Sum of all quantities'
        )

        self.inventory_parts_by_status = Gauge(
            'inventory_parts_by_status',
            'Parts per workflow status',
            ['status']
        )

        # Activity Metrics
        self.inventory_quantity_changes_total = Counter(
            'inventory_quantity_changes_total',
            'Total quantity changes by type',
            ['operation']
        )

        self.inventory_status_changes_total = Counter(
            'inventory_status_changes_total',
            'Total status transitions',
            ['old_status', 'new_status']
        )

        self.inventory_parts_created_total = Counter(
            'inventory_parts_created_total',
            'Total parts created'
        )

        self.inventory_parts_deleted_total = Counter(
            'inventory_parts_deleted_total',
            'Total parts deleted'
        )

        self.inventory_version_conflicts_total = Counter(
            'inventory_version_conflicts_total',
            'Writes that lost an optimistic concurrency race',
            ['operation']
        )

    def update_inventory_metrics(self, part_service: "PartService") -> None:
        """Update inventory-related gauges with current database values."""
        try:
            stats = part_service.get_inventory_stats()

            self.inventory_total_parts.set(stats['total_parts'])
            self.inventory_total_quantity.set(stats['total_quantity'])
            for status, count in stats['parts_by_status'].items():
                self.inventory_parts_by_status.labels(status=status).set(count)

        except Exception as e:
            logger.error(f"Error updating inventory metrics: {e}")

    def record_quantity_change(self, operation: str, delta: int) -> None:
        """Record quantity change events.

        Args:
            operation: Type of operation ('check-in', 'check-out' or 'initial-add')
            delta: Absolute change amount
        """
        try:
            self.inventory_quantity_changes_total.labels(operation=operation).inc(delta)
        except Exception as e:
            logger.error(f"Error recording quantity change: {e}")

    def record_status_change(self, old_status: str, new_status: str) -> None:
        try:
            self.inventory_status_changes_total.labels(
                old_status=old_status, new_status=new_status
            ).inc()
        except Exception as e:
            logger.error(f"Error recording status change: {e}")

    def record_part_created(self) -> None:
        self.inventory_parts_created_total.inc()

    def record_part_deleted(self) -> None:
        self.inventory_parts_deleted_total.inc()

    def record_version_conflict(self, operation: str) -> None:
        self.inventory_version_conflicts_total.labels(operation=operation).inc()

    def get_metrics_text(self) -> str:
        """Generate metrics in Prometheus text format.

        Returns:
            Metrics data in Prometheus exposition format
        """
        return generate_latest().decode('utf-8')
