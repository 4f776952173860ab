"""Dependency injection container."""
from dependency_injector import containers, providers

from src.repositories.service_session_repository import ServiceSessionRepository
from src.repositories.inventory_item_repository import InventoryItemRepository
from src.repositories.service_session_edit_repository import ServiceSessionEditRepository

from src.services.activity_logger import ActivityLogger
from src.services.payment_proof_storage import PaymentProofStorage
from src.services.session_ledger_service import SessionLedgerService
from src.services.session_report_service import SessionReportService

from src.events.domain import DomainEventDispatcher


class Container(containers.DeclarativeContainer):
    """
    Application dependency injection container.

    Uses dependency-injector for managing service dependencies
    and lifecycle.

    Usage:
        container = Container()
        container.db_session.override(db.session)
        container.config.from_dict({...})

        ledger = container.session_ledger_service()
    """

    # Configuration
    config = providers.Configuration()

    # Database session - must be overridden with actual db.session
    db_session = providers.Dependency()

    # ==================
    # Repositories
    # ==================

    session_repository = providers.Factory(
        ServiceSessionRepository,
        session=db_session
    )

    inventory_repository = providers.Factory(
        InventoryItemRepository,
        session=db_session
    )

    session_edit_repository = providers.Factory(
        ServiceSessionEditRepository,
        session=db_session
    )

    # ==================
    # Collaborators
    # ==================

    proof_storage = providers.Singleton(
        PaymentProofStorage,
        base_url=config.proof_storage_url,
        api_key=config.proof_storage_key,
        bucket=config.proof_storage_bucket.as_(lambda v: v or "comprobantes"),
        max_size_bytes=config.proof_max_size_bytes.as_(lambda v: int(v or 5 * 1024 * 1024)),
    )

    activity_logger = providers.Singleton(
        ActivityLogger
    )

    # ==================
    # Event System
    # ==================

    event_dispatcher = providers.Singleton(
        DomainEventDispatcher
    )

    # Note: Handlers are registered in app.py after container is wired

    # ==================
    # Services
    # ==================

    session_ledger_service = providers.Factory(
        SessionLedgerService,
        session_repo=session_repository,
        inventory_repo=inventory_repository,
        edit_repo=session_edit_repository,
        proof_storage=proof_storage,
        event_dispatcher=event_dispatcher,
        rooms=config.venue_rooms,
        warning_seconds=config.expiry_warning_seconds.as_(lambda v: int(v or 300)),
    )

    session_report_service = providers.Factory(
        SessionReportService,
        session_repo=session_repository,
        rooms=config.venue_rooms,
    )
