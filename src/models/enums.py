"""Enumeration types for models."""
import enum


class SessionStatus(enum.Enum):
    """Service session status."""

    ACTIVE = "activo"
    FINALIZED = "finalizado"


class LocationKind(enum.Enum):
    """Where the service takes place."""

    ON_PREMISES = "Sede"
    OFF_SITE = "Domicilio"


class DurationCategory(enum.Enum):
    """Base duration category chosen when a service starts."""

    THIRTY_MINUTES = "30 minutos"
    ONE_HOUR = "1 hora"
    SHORT_STAY = "rato"
    SEVERAL_HOURS = "varias horas"
    OVERNIGHT = "amanecida"


class ExtensionLabel(enum.Enum):
    """Purchasable time extensions."""

    THIRTY_MINUTES = "30 minutos"
    ONE_HOUR = "1 hora"
    TWO_HOURS = "2 horas"


class PaymentMethod(enum.Enum):
    """Payment method for a service or a mid-session charge."""

    CASH = "Efectivo"
    QR = "QR"
    NEQUI = "Nequi"
    DAVIPLATA = "Daviplata"
    CARD_TERMINAL = "Datafono"
    AGREEMENT = "Convenio"
    CARD = "Tarjeta"

    @property
    def requires_proof(self) -> bool:
        """Non-cash payments need a payment proof."""
        return self is not PaymentMethod.CASH


class LedgerEntryType(enum.Enum):
    """Ledger an entry belongs to."""

    TIME_EXTENSION = "time_extension"
    ADD_ON = "add_on"
    CONSUMPTION = "consumption"
