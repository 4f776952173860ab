"""Service session routes."""
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError as SchemaValidationError

from src.extensions import limiter
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
from src.services.payment_proof_storage import ProofUpload
from src.services.session_ledger_service import BoutiqueItem

# Create blueprint
sessions_bp = Blueprint("sessions", __name__, url_prefix="/api/v1/sessions")

# Initialize schemas
start_schema = StartSessionSchema()
extension_schema = TimeExtensionSchema()
add_on_schema = AddOnSchema()
boutique_schema = BoutiqueConsumptionSchema()
consumption_schema = DetailedConsumptionSchema()
finalize_schema = FinalizeSessionSchema()
admin_edit_schema = AdminEditSchema()
pagination_schema = PaginationSchema()
stats_schema = StatsQuerySchema()
revenue_schema = ModelRevenueQuerySchema()


def _ledger_service():
    return current_app.container.session_ledger_service()


def _report_service():
    return current_app.container.session_report_service()


def _read_payload():
    """
    Read the request body as JSON or multipart form.

    Returns:
        Tuple of (fields dict, ProofUpload or None)
    """
    if request.mimetype == "multipart/form-data":
        data = request.form.to_dict()
        upload = request.files.get("proof")
        proof = None
        if upload and upload.filename:
            proof = ProofUpload(
                data=upload.read(),
                content_type=upload.mimetype or "",
                filename=upload.filename,
            )
        return data, proof
    return request.get_json(silent=True) or {}, None


def _schema_error(err: SchemaValidationError):
    return jsonify({
        "success": False,
        "error": str(err.messages),
        "code": "validation_error",
    }), 400


def _session_response(session, status: int = 200):
    service = _ledger_service()
    return jsonify({
        "success": True,
        "session": session.to_dict(),
        "countdown": service.tick(session).to_dict(),
    }), status


@sessions_bp.route("", methods=["POST"])
@limiter.limit("120 per minute")
def start_session():
    """Start a service.

    ---
    Request body (JSON or multipart with a "proof" image):
        {
            "model_id": "m-1",
            "model_name": "Ana",
            "location_kind": "Sede",
            "room": "101",
            "duration_category": "1 hora",
            "base_price": "120000",
            "payment_method": "Efectivo"
        }

    Returns:
        201: Session with countdown
        400: Validation error or missing proof
        409: Model busy or room occupied
        502: Proof upload or save failed
    """
    data, proof = _read_payload()
    try:
        data = start_schema.load(data)
    except SchemaValidationError as err:
        return _schema_error(err)

    session = _ledger_service().start_session(proof=proof, **data)
    return _session_response(session, 201)


@sessions_bp.route("/active", methods=["GET"])
def list_active():
    """List running services with their countdown."""
    service = _ledger_service()
    sessions = service.list_active_sessions()
    return jsonify({
        "sessions": [
            {**s.to_dict(), "countdown": service.tick(s).to_dict()} for s in sessions
        ]
    }), 200


@sessions_bp.route("/finalized", methods=["GET"])
def list_finalized():
    """List finalized services, newest first.

    Query:
        limit, offset, model_id
    """
    try:
        params = pagination_schema.load(request.args.to_dict())
    except SchemaValidationError as err:
        return _schema_error(err)

    sessions, total = _ledger_service().list_finalized_sessions(**params)
    return jsonify({
        "sessions": [s.to_dict() for s in sessions],
        "total": total,
        "limit": params["limit"],
        "offset": params["offset"],
    }), 200


@sessions_bp.route("/rooms", methods=["GET"])
def room_occupancy():
    """Configured rooms and who occupies them."""
    return jsonify({"rooms": _report_service().room_occupancy()}), 200


@sessions_bp.route("/stats", methods=["GET"])
def stats():
    """Daily or monthly service stats.

    Query:
        period: "day" (default) or "month"
        date: ISO date inside the period, defaults to today
    """
    try:
        params = stats_schema.load(request.args.to_dict())
    except SchemaValidationError as err:
        return _schema_error(err)

    reports = _report_service()
    day = params["date"]
    if params["period"] == "month":
        result = reports.monthly_stats(day.year, day.month) if day else reports.monthly_stats()
    else:
        result = reports.daily_stats(day)
    return jsonify({"period": params["period"], "stats": result}), 200


@sessions_bp.route("/by-model/<model_id>", methods=["GET"])
def get_active_for_model(model_id):
    """Get the running service of a model.

    Returns:
        200: Session with countdown
        404: Model has no active session
    """
    session = _ledger_service().get_active_session_for_model(model_id)
    if not session:
        return jsonify({
            "success": False,
            "error": "Model has no active session",
            "code": "not_found",
        }), 404
    return _session_response(session)


@sessions_bp.route("/by-model/<model_id>/revenue", methods=["GET"])
def model_revenue(model_id):
    """Finalized services and revenue of a model.

    Query:
        from, to: ISO dates, both inclusive and optional
    """
    try:
        params = revenue_schema.load(request.args.to_dict())
    except SchemaValidationError as err:
        return _schema_error(err)

    return jsonify({"revenue": _report_service().model_revenue(model_id, **params)}), 200


@sessions_bp.route("/<session_id>", methods=["GET"])
def get_session(session_id):
    """Get a service with its ledgers, total and countdown."""
    session = _ledger_service().get_session(session_id)
    return _session_response(session)


@sessions_bp.route("/<session_id>/countdown", methods=["GET"])
def get_countdown(session_id):
    """Get only the countdown of a service."""
    service = _ledger_service()
    session = service.get_session(session_id)
    return jsonify({
        "session_id": str(session.id),
        "status": session.status,
        "duration_minutes": session.duration_minutes,
        "countdown": service.tick(session).to_dict(),
    }), 200


@sessions_bp.route("/<session_id>/extensions", methods=["POST"])
def add_time_extension(session_id):
    """Buy extra time for a running service."""
    data, proof = _read_payload()
    try:
        data = extension_schema.load(data)
    except SchemaValidationError as err:
        return _schema_error(err)

    session = _ledger_service().add_time_extension(session_id, proof=proof, **data)
    return _session_response(session, 201)


@sessions_bp.route("/<session_id>/add-ons", methods=["POST"])
def add_add_on(session_id):
    """Charge a free-form add-on to a running service."""
    data, proof = _read_payload()
    try:
        data = add_on_schema.load(data)
    except SchemaValidationError as err:
        return _schema_error(err)

    session = _ledger_service().add_add_on(session_id, proof=proof, **data)
    return _session_response(session, 201)


@sessions_bp.route("/<session_id>/boutique", methods=["POST"])
def record_boutique(session_id):
    """Sell boutique products into a running service.

    Lines are applied one by one. Lines that fail after validation are
    reported under "failed" and the rest stay applied.

    Returns:
        201: All lines applied
        207: Some lines failed
        400: Validation or stock error, nothing applied
    """
    try:
        data = boutique_schema.load(request.get_json(silent=True) or {})
    except SchemaValidationError as err:
        return _schema_error(err)

    service = _ledger_service()
    items = [BoutiqueItem(**line) for line in data["items"]]
    result = service.record_boutique_consumption(session_id, items)

    if not result.applied and result.failed:
        error = result.failed[0].error
        body = error.to_dict()
        body["failed"] = [f.to_dict() for f in result.failed]
        return jsonify(body), error.status_code

    session = service.get_session(session_id)
    return jsonify({
        "success": True,
        "applied": [e.to_dict() for e in result.applied],
        "failed": [f.to_dict() for f in result.failed],
        "amount": str(result.amount),
        "session": session.to_dict(),
    }), 207 if result.failed else 201


@sessions_bp.route("/<session_id>/consumptions", methods=["POST"])
def record_consumption(session_id):
    """Append a detailed-consumption line."""
    try:
        data = consumption_schema.load(request.get_json(silent=True) or {})
    except SchemaValidationError as err:
        return _schema_error(err)

    session = _ledger_service().record_detailed_consumption(session_id, **data)
    return _session_response(session, 201)


@sessions_bp.route("/<session_id>/finalize", methods=["POST"])
def finalize_session(session_id):
    """Close a running service."""
    try:
        data = finalize_schema.load(request.get_json(silent=True) or {})
    except SchemaValidationError as err:
        return _schema_error(err)

    session = _ledger_service().finalize_session(session_id, **data)
    return _session_response(session)


@sessions_bp.route("/<session_id>/admin-edit", methods=["POST"])
def admin_edit(session_id):
    """Correct a finalized service. A reason is mandatory."""
    try:
        data = admin_edit_schema.load(request.get_json(silent=True) or {})
    except SchemaValidationError as err:
        return _schema_error(err)

    session = _ledger_service().edit_finalized_session(session_id, **data)
    return jsonify({
        "success": True,
        "session": session.to_dict(),
        "edits": [e.to_dict() for e in session.edits],
    }), 200


@sessions_bp.route("/<session_id>/edits", methods=["GET"])
def edit_history(session_id):
    """Administrative corrections of a service, oldest first."""
    edits = _ledger_service().get_edit_history(session_id)
    return jsonify({"edits": [e.to_dict() for e in edits]}), 200


@sessions_bp.route("/<session_id>/expiry-warning/reset", methods=["POST"])
def reset_expiry_warning(session_id):
    """Allow the five-minute warning to fire again."""
    session = _ledger_service().reset_expiry_warning(session_id)
    return _session_response(session)
