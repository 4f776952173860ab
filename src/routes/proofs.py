"""Payment proof upload route."""
from flask import Blueprint, request, jsonify, current_app

from src.errors import ValidationError
from src.extensions import limiter
from src.services.payment_proof_storage import PROOF_FOLDERS, ProofUpload

proofs_bp = Blueprint("proofs", __name__, url_prefix="/api/v1/proofs")


@proofs_bp.route("", methods=["POST"])
@limiter.limit("60 per minute")
def upload_proof():
    """Upload a payment proof image ahead of a charge.

    ---
    Multipart form:
        proof: image file (max 5MB by default)
        folder: one of the proof folders, defaults to "comprobantes-servicio"

    Returns:
        201: {"success": true, "proof_ref": "..."}
        400: Missing file, not an image, or too large
        502: Storage backend failed
    """
    upload = request.files.get("proof")
    if not upload or not upload.filename:
        raise ValidationError("A proof image is required")

    folder = request.form.get("folder", PROOF_FOLDERS[0])
    if folder not in PROOF_FOLDERS:
        raise ValidationError(f"Unknown proof folder: {folder}")

    proof = ProofUpload(
        data=upload.read(),
        content_type=upload.mimetype or "",
        filename=upload.filename,
    )
    storage = current_app.container.proof_storage()
    proof_ref = storage.upload(proof, folder)
    return jsonify({"success": True, "proof_ref": proof_ref}), 201
