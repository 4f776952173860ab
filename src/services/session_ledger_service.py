"""SessionLedgerService - lifecycle and billing of timed services."""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Type, TypeVar, Union
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.errors import (
    ConflictError,
    InsufficientStockError,
    InvalidStateError,
    LedgerError,
    NotFoundError,
    ProofRequiredError,
    UpstreamError,
    ValidationError,
)
from src.events.domain import DomainEvent, DomainEventDispatcher
from src.events.session_events import (
    BoutiqueConsumptionRecordedEvent,
    SessionAddOnAddedEvent,
    SessionEditedEvent,
    SessionExpiryWarningEvent,
    SessionFinalizedEvent,
    SessionStartedEvent,
    SessionTimeExtendedEvent,
)
from src.models.enums import (
    DurationCategory,
    ExtensionLabel,
    LedgerEntryType,
    LocationKind,
    PaymentMethod,
    SessionStatus,
)
from src.models.ledger_entry import LedgerEntry
from src.models.service_session import ServiceSession
from src.models.service_session_edit import ServiceSessionEdit
from src.repositories.inventory_item_repository import InventoryItemRepository
from src.repositories.service_session_edit_repository import ServiceSessionEditRepository
from src.repositories.service_session_repository import ServiceSessionRepository
from src.services.payment_proof_storage import PaymentProofStorage, ProofUpload
from src.services.session_timing import (
    EXPIRY_WARNING_SECONDS,
    EXTENSION_MINUTES,
    EXTENSION_PRICES,
    SessionCountdown,
    compute_countdown,
    crossed_warning_threshold,
    minutes_for_category,
)
from src.utils.transaction import TransactionContext

logger = logging.getLogger(__name__)

E = TypeVar("E")

SessionId = Union[UUID, str]


@dataclass
class BoutiqueItem:
    """One product line of a boutique purchase."""

    product_id: Union[UUID, str]
    quantity: int
    unit_price: Optional[Decimal] = None
    product_name: Optional[str] = None


@dataclass
class FailedBoutiqueItem:
    """A boutique line that was skipped, with the reason."""

    item: BoutiqueItem
    error: LedgerError

    def to_dict(self) -> dict:
        return {
            "product_id": str(self.item.product_id),
            "product_name": self.item.product_name,
            "quantity": self.item.quantity,
            "error": self.error.message,
            "code": self.error.code,
        }


@dataclass
class BoutiqueConsumptionResult:
    """Outcome of a boutique batch: applied entries and skipped lines."""

    applied: List[LedgerEntry] = field(default_factory=list)
    failed: List[FailedBoutiqueItem] = field(default_factory=list)

    @property
    def amount(self) -> Decimal:
        return sum((e.line_total for e in self.applied), Decimal("0"))


class SessionLedgerService:
    """
    Service owning the lifecycle of timed services.

    Every mutation is written through the repositories before the caller
    sees the result. Validation always happens before any write or
    collaborator call.
    """

    def __init__(
        self,
        session_repo: ServiceSessionRepository,
        inventory_repo: InventoryItemRepository,
        edit_repo: ServiceSessionEditRepository,
        proof_storage: Optional[PaymentProofStorage] = None,
        event_dispatcher: Optional[DomainEventDispatcher] = None,
        rooms: Optional[Sequence[str]] = None,
        warning_seconds: int = EXPIRY_WARNING_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._session_repo = session_repo
        self._inventory_repo = inventory_repo
        self._edit_repo = edit_repo
        self._proof_storage = proof_storage or PaymentProofStorage()
        self._event_dispatcher = event_dispatcher
        self._rooms = list(rooms) if rooms else []
        self._warning_seconds = warning_seconds
        self._clock = clock or datetime.utcnow

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_session(
        self,
        model_id: str,
        model_name: str,
        location_kind: Union[LocationKind, str],
        duration_category: Union[DurationCategory, str],
        base_price: Union[Decimal, int, float, str],
        payment_method: Union[PaymentMethod, str],
        client_id: Optional[str] = None,
        client_name: Optional[str] = None,
        client_phone: Optional[str] = None,
        room: Optional[str] = None,
        proof_ref: Optional[str] = None,
        proof: Optional[ProofUpload] = None,
        service_notes: Optional[str] = None,
    ) -> ServiceSession:
        """
        Start a timed service for a model.

        Raises:
            ValidationError: Unknown labels, negative price, bad room, missing proof
            ConflictError: Model already busy, or room occupied
            UpstreamError: Proof upload or persistence failed
        """
        if not model_id or not str(model_id).strip():
            raise ValidationError("Model is required")
        if not model_name or not str(model_name).strip():
            raise ValidationError("Model name is required")

        kind = self._parse_enum(LocationKind, location_kind, "location kind")
        category = self._parse_enum(DurationCategory, duration_category, "service duration")
        method = self._parse_enum(PaymentMethod, payment_method, "payment method")
        price = self._parse_money(base_price, "base price")
        room = self._validate_room(kind, room)
        self._require_proof(method, proof_ref, proof)

        if self._session_repo.find_active_by_model(model_id):
            raise ConflictError()
        if room and self._session_repo.find_active_by_room(room):
            raise ConflictError(f"Room {room} is already occupied", code="room_occupied")

        proof_ref = self._store_proof(proof, proof_ref, "comprobantes-servicio")

        duration = minutes_for_category(category)
        session = ServiceSession(
            model_id=model_id,
            model_name=model_name,
            client_id=client_id,
            client_name=client_name,
            client_phone=client_phone,
            location_kind=kind.value,
            room=room,
            duration_category=category.value,
            duration_minutes=duration,
            base_price=price,
            payment_method=method.value,
            payment_proof_ref=proof_ref,
            status=SessionStatus.ACTIVE.value,
            started_at=self._clock(),
            service_notes=service_notes,
            expiry_warning_sent=False,
            edited_by_admin=False,
        )

        try:
            self._session_repo.save(session)
        except IntegrityError as e:
            # Lost a race against a concurrent start for the same model
            self._session_repo.session.rollback()
            raise ConflictError() from e
        except SQLAlchemyError as e:
            self._fail_persist(e, "start session")

        logger.info(
            f"Session {session.id} started for {model_id} ({category.value}, {duration} min)"
        )
        self._emit(
            SessionStartedEvent(
                session_id=session.id,
                model_id=model_id,
                model_name=model_name,
                room=room,
                duration_minutes=duration,
                base_price=price,
            )
        )
        return session

    def finalize_session(
        self, session_id: SessionId, closing_notes: Optional[str] = None
    ) -> ServiceSession:
        """
        Close an active session. Terminal.

        Raises:
            NotFoundError: Unknown session
            InvalidStateError: Session already finalized
        """
        session = self._get_active(session_id)

        session.ended_at = self._clock()
        session.status = SessionStatus.FINALIZED.value
        session.closing_notes = closing_notes or ""
        self._persist(session, "finalize session")

        countdown = compute_countdown(
            session.started_at, session.duration_minutes, session.ended_at
        )
        total = self.compute_total(session)
        logger.info(f"Session {session.id} finalized, total {total}")
        self._emit(
            SessionFinalizedEvent(
                session_id=session.id,
                model_id=session.model_id,
                total_cost=total,
                overtime_seconds=countdown.overtime_seconds,
            )
        )
        return session

    # ------------------------------------------------------------------
    # Charges
    # ------------------------------------------------------------------

    def add_time_extension(
        self,
        session_id: SessionId,
        duration_label: Union[ExtensionLabel, str],
        payment_method: Union[PaymentMethod, str] = PaymentMethod.CASH,
        proof_ref: Optional[str] = None,
        proof: Optional[ProofUpload] = None,
    ) -> ServiceSession:
        """
        Purchase extra time for an active session.

        Appends a time-extension entry and grows ``duration_minutes`` by
        30, 60 or 120 minutes. There is no limit on extensions.
        """
        label = self._parse_enum(ExtensionLabel, duration_label, "extra time")
        method = self._parse_enum(PaymentMethod, payment_method, "payment method")
        self._require_proof(method, proof_ref, proof)
        session = self._get_active(session_id)

        proof_ref = self._store_proof(proof, proof_ref, "comprobantes-tiempo")

        minutes = EXTENSION_MINUTES[label]
        cost = EXTENSION_PRICES[label]
        session.entries.append(
            LedgerEntry(
                entry_type=LedgerEntryType.TIME_EXTENSION,
                description=f"Extra time ({label.value})",
                cost=cost,
                quantity=1,
                duration_label=label.value,
                minutes=minutes,
                proof_ref=proof_ref,
                recorded_at=self._clock(),
            )
        )
        session.duration_minutes = session.duration_minutes + minutes
        self._persist(session, "add time extension")

        self._emit(
            SessionTimeExtendedEvent(
                session_id=session.id,
                model_id=session.model_id,
                duration_label=label.value,
                minutes=minutes,
                cost=cost,
                duration_minutes=session.duration_minutes,
            )
        )
        return session

    def add_add_on(
        self,
        session_id: SessionId,
        description: str,
        cost: Union[Decimal, int, float, str],
        payment_method: Union[PaymentMethod, str] = PaymentMethod.CASH,
        proof_ref: Optional[str] = None,
        proof: Optional[ProofUpload] = None,
    ) -> ServiceSession:
        """
        Charge a free-form extra (drinks, tips) to an active session.

        A cost of zero is accepted for courtesy lines; negative costs raise
        ValidationError.
        """
        description = (description or "").strip()
        if not description:
            raise ValidationError("Description is required")
        amount = self._parse_money(cost, "cost")
        method = self._parse_enum(PaymentMethod, payment_method, "payment method")
        self._require_proof(method, proof_ref, proof)
        session = self._get_active(session_id)

        proof_ref = self._store_proof(proof, proof_ref, "comprobantes-adicionales")

        session.entries.append(
            LedgerEntry(
                entry_type=LedgerEntryType.ADD_ON,
                description=description,
                cost=amount,
                quantity=1,
                proof_ref=proof_ref,
                recorded_at=self._clock(),
            )
        )
        self._persist(session, "add add-on")

        self._emit(
            SessionAddOnAddedEvent(
                session_id=session.id,
                model_id=session.model_id,
                description=description,
                cost=amount,
            )
        )
        return session

    def record_boutique_consumption(
        self, session_id: SessionId, items: Sequence[BoutiqueItem]
    ) -> BoutiqueConsumptionResult:
        """
        Sell boutique products into an active session.

        All lines are validated against live stock first; nothing is
        written if any line is invalid. Each line is then applied in its
        own transaction (stock decrement plus add-on entry). A line that
        fails at that point is skipped and reported; lines applied before
        it stay applied.

        Raises:
            ValidationError, InsufficientStockError: Before any write
            NotFoundError: Unknown session, unknown or archived product
            InvalidStateError: Session not active
        """
        session = self._get_active(session_id)
        if not items:
            raise ValidationError("At least one product is required")

        requested: Dict[str, int] = {}
        for item in items:
            if not isinstance(item.quantity, int) or item.quantity <= 0:
                raise ValidationError("Quantity must be a positive whole number")
            if item.unit_price is not None:
                self._parse_money(item.unit_price, "unit price")
            key = str(item.product_id)
            requested[key] = requested.get(key, 0) + item.quantity

        for product_id, quantity in requested.items():
            product = self._find_product(product_id)
            if not product.has_stock(quantity):
                raise InsufficientStockError(
                    f"Insufficient stock for {product.name}: {product.stock} left"
                )

        result = BoutiqueConsumptionResult()
        for item in items:
            try:
                entry = self._apply_boutique_item(session, item)
            except LedgerError as e:
                logger.warning(f"Boutique item {item.product_id} skipped: {e.message}")
                result.failed.append(FailedBoutiqueItem(item=item, error=e))
                continue
            except SQLAlchemyError as e:
                logger.error(f"Boutique item {item.product_id} could not be saved: {e}")
                error = UpstreamError()
                error.__cause__ = e
                result.failed.append(FailedBoutiqueItem(item=item, error=error))
                continue
            result.applied.append(entry)

        self._emit(
            BoutiqueConsumptionRecordedEvent(
                session_id=session.id,
                model_id=session.model_id,
                applied=[e.description for e in result.applied],
                failed=[str(f.item.product_id) for f in result.failed],
                amount=result.amount,
            )
        )
        return result

    def _apply_boutique_item(self, session: ServiceSession, item: BoutiqueItem) -> LedgerEntry:
        with TransactionContext(self._session_repo.session):
            product = self._find_product(item.product_id)
            if not product.has_stock(item.quantity):
                raise InsufficientStockError(
                    f"Insufficient stock for {product.name}: {product.stock} left"
                )

            unit_price = (
                self._parse_money(item.unit_price, "unit price")
                if item.unit_price is not None
                else Decimal(product.service_price)
            )
            name = item.product_name or product.name

            self._inventory_repo.decrement_stock(product, item.quantity)
            entry = LedgerEntry(
                entry_type=LedgerEntryType.ADD_ON,
                description=f"{name} (x{item.quantity})",
                cost=unit_price * item.quantity,
                quantity=1,
                product_id=product.id,
                recorded_at=self._clock(),
            )
            session.entries.append(entry)
            self._session_repo.add(session)
        return entry

    def record_detailed_consumption(
        self,
        session_id: SessionId,
        description: str,
        unit_cost: Union[Decimal, int, float, str],
        quantity: int = 1,
    ) -> ServiceSession:
        """Append a detailed-consumption line (unit cost times quantity)."""
        description = (description or "").strip()
        if not description:
            raise ValidationError("Description is required")
        amount = self._parse_money(unit_cost, "unit cost")
        if not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("Quantity must be a positive whole number")
        session = self._get_active(session_id)

        session.entries.append(
            LedgerEntry(
                entry_type=LedgerEntryType.CONSUMPTION,
                description=description,
                cost=amount,
                quantity=quantity,
                recorded_at=self._clock(),
            )
        )
        self._persist(session, "record consumption")
        return session

    @staticmethod
    def compute_total(session: ServiceSession) -> Decimal:
        """Base price plus all three ledgers. Never cached."""
        return session.total_cost

    # ------------------------------------------------------------------
    # Countdown
    # ------------------------------------------------------------------

    def tick(self, session: ServiceSession, now: Optional[datetime] = None) -> SessionCountdown:
        """Recompute remaining and overtime seconds for one session."""
        if not session.is_active:
            return compute_countdown(
                session.started_at,
                session.duration_minutes,
                session.ended_at or now or self._clock(),
                finalized=True,
            )
        return compute_countdown(
            session.started_at, session.duration_minutes, now or self._clock()
        )

    def tick_active_sessions(
        self,
        now: Optional[datetime] = None,
        previous: Optional[Dict[str, int]] = None,
    ) -> Dict[str, SessionCountdown]:
        """
        Recompute every active session and raise due expiry warnings.

        Args:
            now: Reference time (defaults to the service clock)
            previous: Remaining seconds per session id from the last tick

        Returns:
            Countdown per session id
        """
        now = now or self._clock()
        previous = previous or {}
        countdowns = {}

        for session in self._session_repo.find_active():
            key = str(session.id)
            countdown = self.tick(session, now)
            countdowns[key] = countdown

            if session.expiry_warning_sent:
                continue
            if not crossed_warning_threshold(
                countdown, previous.get(key), self._warning_seconds
            ):
                continue

            session.expiry_warning_sent = True
            try:
                self._persist(session, "mark expiry warning")
            except UpstreamError:
                continue
            self._emit(
                SessionExpiryWarningEvent(
                    session_id=session.id,
                    model_id=session.model_id,
                    model_name=session.model_name,
                    room=session.room,
                    remaining_seconds=countdown.remaining_seconds,
                )
            )

        return countdowns

    def reset_expiry_warning(self, session_id: SessionId) -> ServiceSession:
        """Allow the expiry warning of an active session to fire again."""
        session = self._get_active(session_id)
        session.expiry_warning_sent = False
        self._persist(session, "reset expiry warning")
        return session

    # ------------------------------------------------------------------
    # Administrative override
    # ------------------------------------------------------------------

    def edit_finalized_session(
        self,
        session_id: SessionId,
        reason: str,
        location_kind: Optional[Union[LocationKind, str]] = None,
        duration_category: Optional[Union[DurationCategory, str]] = None,
        base_price: Optional[Union[Decimal, int, float, str]] = None,
    ) -> ServiceSession:
        """
        Correct classification or base price of a finalized session.

        Ledgers are left untouched and the session stays finalized. The
        previous and new values are kept as an edit history row.
        """
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("A reason is required to edit a service")
        kind = self._parse_enum(LocationKind, location_kind, "location kind") if location_kind else None
        category = (
            self._parse_enum(DurationCategory, duration_category, "service duration")
            if duration_category
            else None
        )
        price = self._parse_money(base_price, "base price") if base_price is not None else None

        session = self.get_session(session_id)
        if session.is_active:
            raise InvalidStateError(
                "Only finalized services can be edited", code="session_not_finalized"
            )

        edit = ServiceSessionEdit(
            reason=reason,
            previous_location_kind=session.location_kind,
            previous_duration_category=session.duration_category,
            previous_base_price=session.base_price,
            new_location_kind=kind.value if kind else session.location_kind,
            new_duration_category=category.value if category else session.duration_category,
            new_base_price=price if price is not None else session.base_price,
        )

        if kind:
            session.location_kind = kind.value
            if kind == LocationKind.OFF_SITE:
                session.room = None
        if category:
            extension_minutes = sum(e.minutes or 0 for e in session.time_extensions)
            session.duration_category = category.value
            session.duration_minutes = minutes_for_category(category) + extension_minutes
        if price is not None:
            session.base_price = price
        session.edited_by_admin = True
        session.edits.append(edit)
        self._persist(session, "edit session")

        logger.info(f"Session {session.id} edited by administrator: {reason}")
        self._emit(SessionEditedEvent(session_id=session.id, reason=reason))
        return session

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_session(self, session_id: SessionId) -> ServiceSession:
        """Get session by ID or raise NotFoundError."""
        session = self._session_repo.find_by_id(session_id)
        if not session:
            raise NotFoundError(f"Session {session_id} not found")
        return session

    def get_active_session_for_model(self, model_id: str) -> Optional[ServiceSession]:
        """Get the model's running session, if any."""
        return self._session_repo.find_active_by_model(model_id)

    def list_active_sessions(self) -> List[ServiceSession]:
        """List all running sessions."""
        return self._session_repo.find_active()

    def get_edit_history(self, session_id: SessionId) -> List[ServiceSessionEdit]:
        """List administrative corrections of a session, oldest first."""
        self.get_session(session_id)
        return self._edit_repo.find_by_session(session_id)

    def list_finalized_sessions(
        self, limit: int = 20, offset: int = 0, model_id: Optional[str] = None
    ) -> Tuple[List[ServiceSession], int]:
        """List finalized sessions, newest first."""
        return self._session_repo.find_finalized_paginated(
            limit=limit, offset=offset, model_id=model_id
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_active(self, session_id: SessionId) -> ServiceSession:
        session = self.get_session(session_id)
        if not session.is_active:
            raise InvalidStateError()
        return session

    def _find_product(self, product_id: Union[UUID, str]):
        # Archived products are not for sale
        product = self._inventory_repo.find_live(product_id)
        if not product or not product.is_active:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    def _validate_room(self, kind: LocationKind, room: Optional[str]) -> Optional[str]:
        room = (room or "").strip() or None
        if kind == LocationKind.OFF_SITE:
            if room:
                raise ValidationError("Rooms only apply to on-premises services")
            return None
        if room and self._rooms and room not in self._rooms:
            raise ValidationError(f"Unknown room: {room}")
        return room

    def _require_proof(
        self,
        method: PaymentMethod,
        proof_ref: Optional[str],
        proof: Optional[ProofUpload],
    ) -> None:
        if proof is not None:
            self._proof_storage.validate(proof)
        if method.requires_proof and not proof_ref and proof is None:
            raise ProofRequiredError()

    def _store_proof(
        self, proof: Optional[ProofUpload], proof_ref: Optional[str], folder: str
    ) -> Optional[str]:
        if proof is None:
            return proof_ref
        return self._proof_storage.upload(proof, folder)

    def _persist(self, session: ServiceSession, action: str) -> ServiceSession:
        try:
            return self._session_repo.save(session)
        except SQLAlchemyError as e:
            self._fail_persist(e, action)

    def _fail_persist(self, error: SQLAlchemyError, action: str) -> None:
        self._session_repo.session.rollback()
        logger.error(f"Failed to {action}: {error}")
        raise UpstreamError() from error

    def _emit(self, event: DomainEvent) -> None:
        if self._event_dispatcher:
            self._event_dispatcher.emit(event)

    @staticmethod
    def _parse_enum(enum_cls: Type[E], value, label: str) -> E:
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            raise ValidationError(f"Unknown {label}: {value}")

    @staticmethod
    def _parse_money(value, label: str) -> Decimal:
        if isinstance(value, bool):
            raise ValidationError(f"Invalid {label}")
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError(f"Invalid {label}")
        if not amount.is_finite():
            raise ValidationError(f"Invalid {label}")
        if amount < 0:
            raise ValidationError(f"The {label} cannot be negative")
        return amount
