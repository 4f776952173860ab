"""Marshmallow schemas for request validation."""
from src.schemas.session_schemas import (
    StartSessionSchema,
    TimeExtensionSchema,
    AddOnSchema,
    BoutiqueConsumptionSchema,
    DetailedConsumptionSchema,
    FinalizeSessionSchema,
    AdminEditSchema,
    PaginationSchema,
    StatsQuerySchema,
    ModelRevenueQuerySchema,
)

__all__ = [
    "StartSessionSchema",
    "TimeExtensionSchema",
    "AddOnSchema",
    "BoutiqueConsumptionSchema",
    "DetailedConsumptionSchema",
    "FinalizeSessionSchema",
    "AdminEditSchema",
    "PaginationSchema",
    "StatsQuerySchema",
    "ModelRevenueQuerySchema",
]
