"""Dependency injection container for services."""

from dependency_injector import containers, providers
from sqlalchemy.orm import sessionmaker

from app.config import Settings
from app.services.inventory_service import InventoryService
from app.services.metrics_service import MetricsService
from app.services.part_service import PartService
from app.services.qr_service import QRService
from app.services.test_data_service import TestDataService


class ServiceContainer(containers.DeclarativeContainer):
    """Container for service dependency injection."""

    # Configuration and database session providers
    config = providers.Dependency(instance_of=Settings)
    session_maker = providers.Dependency(instance_of=sessionmaker)
    db_session = providers.ContextLocalSingleton(
        session_maker.provided.call()
    )

    # Metrics service - Singleton so counters are registered once per app
    metrics_service = providers.Singleton(MetricsService)

    # Service providers - Factory creates new instances for each request
    part_service = providers.Factory(PartService, db=db_session)
    test_data_service = providers.Factory(
        TestDataService,
        db=db_session,
        part_service=part_service,
    )

    # InventoryService depends on PartService and MetricsService
    inventory_service = providers.Factory(
        InventoryService,
        db=db_session,
        part_service=part_service,
        metrics_service=metrics_service,
        max_attempts=config.provided.LIFECYCLE_MAX_ATTEMPTS,
    )

    qr_service = providers.Factory(QRService, settings=config)
