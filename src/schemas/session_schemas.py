"""Service session request schemas."""
from marshmallow import Schema, fields, validate, validates_schema, ValidationError

from src.models.enums import (
    DurationCategory,
    ExtensionLabel,
    LocationKind,
    PaymentMethod,
)


def _values(enum_cls):
    return [member.value for member in enum_cls]


class _PaymentSchema(Schema):
    """Payment method plus an already stored proof reference."""

    payment_method = fields.Str(
        load_default=PaymentMethod.CASH.value,
        validate=validate.OneOf(_values(PaymentMethod)),
    )
    proof_ref = fields.Str(load_default=None, allow_none=True)


class StartSessionSchema(_PaymentSchema):
    """Schema for starting a service."""

    model_id = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    model_name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    client_id = fields.Str(load_default=None, allow_none=True)
    client_name = fields.Str(load_default=None, allow_none=True)
    client_phone = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=50))
    location_kind = fields.Str(required=True, validate=validate.OneOf(_values(LocationKind)))
    room = fields.Str(load_default=None, allow_none=True)
    duration_category = fields.Str(
        required=True, validate=validate.OneOf(_values(DurationCategory))
    )
    base_price = fields.Decimal(required=True, validate=validate.Range(min=0))
    payment_method = fields.Str(required=True, validate=validate.OneOf(_values(PaymentMethod)))
    service_notes = fields.Str(load_default=None, allow_none=True)


class TimeExtensionSchema(_PaymentSchema):
    """Schema for buying extra time."""

    duration_label = fields.Str(required=True, validate=validate.OneOf(_values(ExtensionLabel)))


class AddOnSchema(_PaymentSchema):
    """Schema for a free-form add-on."""

    description = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    cost = fields.Decimal(required=True, validate=validate.Range(min=0))


class BoutiqueLineSchema(Schema):
    product_id = fields.UUID(required=True)
    quantity = fields.Int(required=True, strict=True, validate=validate.Range(min=1))
    unit_price = fields.Decimal(load_default=None, allow_none=True, validate=validate.Range(min=0))
    product_name = fields.Str(load_default=None, allow_none=True)


class BoutiqueConsumptionSchema(Schema):
    """Schema for a boutique purchase batch."""

    items = fields.List(
        fields.Nested(BoutiqueLineSchema), required=True, validate=validate.Length(min=1)
    )


class DetailedConsumptionSchema(Schema):
    """Schema for a detailed-consumption line."""

    description = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    unit_cost = fields.Decimal(required=True, validate=validate.Range(min=0))
    quantity = fields.Int(load_default=1, strict=True, validate=validate.Range(min=1))


class FinalizeSessionSchema(Schema):
    closing_notes = fields.Str(load_default=None, allow_none=True)


class AdminEditSchema(Schema):
    """Schema for the administrative correction of a finalized service."""

    reason = fields.Str(required=True, validate=validate.Length(min=1))
    location_kind = fields.Str(load_default=None, validate=validate.OneOf(_values(LocationKind)))
    duration_category = fields.Str(
        load_default=None, validate=validate.OneOf(_values(DurationCategory))
    )
    base_price = fields.Decimal(load_default=None, validate=validate.Range(min=0))

    @validates_schema
    def validate_has_change(self, data, **kwargs):
        """At least one field must be corrected."""
        if not any(
            data.get(key) is not None
            for key in ("location_kind", "duration_category", "base_price")
        ):
            raise ValidationError("Nothing to change", "_schema")


class PaginationSchema(Schema):
    limit = fields.Int(load_default=20, validate=validate.Range(min=1, max=100))
    offset = fields.Int(load_default=0, validate=validate.Range(min=0))
    model_id = fields.Str(load_default=None)


class StatsQuerySchema(Schema):
    """Query for daily or monthly stats."""

    period = fields.Str(load_default="day", validate=validate.OneOf(["day", "month"]))
    date = fields.Date(load_default=None)


class ModelRevenueQuerySchema(Schema):
    """Query for a model's revenue; both days are inclusive."""

    start = fields.Date(data_key="from", load_default=None)
    end = fields.Date(data_key="to", load_default=None)

    @validates_schema
    def validate_range(self, data, **kwargs):
        if data.get("start") and data.get("end") and data["start"] > data["end"]:
            raise ValidationError("'from' must not be after 'to'", "from")
