"""Payment proof storage - uploads receipt images and returns a reference."""
import base64
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import uuid4

import requests

from src.errors import FileTooLargeError, InvalidFileTypeError, UploadFailedError

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE_BYTES = 5 * 1024 * 1024

PROOF_FOLDERS = (
    "comprobantes-servicio",
    "comprobantes-tiempo",
    "comprobantes-adicionales",
    "comprobantes-boutique",
)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/heic": "heic",
}


@dataclass
class ProofUpload:
    """An image attached by the caller as payment proof."""

    data: bytes
    content_type: str
    filename: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


class PaymentProofStorage:
    """
    Stores payment proof images.

    With ``base_url`` configured, images go to a Supabase-style storage
    bucket over REST and the public object URL is returned. Without it
    the image is returned inline as a base64 ``data:`` URL.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        bucket: str = "comprobantes",
        max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
        timeout: int = 30,
    ):
        self._base_url = base_url.rstrip("/") if base_url else None
        self._api_key = api_key
        self._bucket = bucket
        self._max_size_bytes = max_size_bytes
        self._timeout = timeout

    @property
    def is_remote(self) -> bool:
        """Check if a storage backend is configured."""
        return bool(self._base_url)

    def validate(self, proof: ProofUpload) -> None:
        """
        Validate type and size of a proof image.

        Raises:
            InvalidFileTypeError: If the content type is not image/*
            FileTooLargeError: If the image exceeds the size limit
        """
        if not proof.content_type or not proof.content_type.startswith("image/"):
            raise InvalidFileTypeError()
        if proof.size > self._max_size_bytes:
            limit_mb = self._max_size_bytes // (1024 * 1024)
            raise FileTooLargeError(f"The image cannot be larger than {limit_mb}MB")

    def upload(self, proof: ProofUpload, folder: str = "comprobantes-servicio") -> str:
        """
        Upload a proof image.

        Args:
            proof: Image bytes and content type
            folder: Logical folder inside the bucket

        Returns:
            Public URL or data URL of the stored image

        Raises:
            InvalidFileTypeError, FileTooLargeError: Before any upload
            UploadFailedError: If the storage backend fails
        """
        self.validate(proof)

        if not self.is_remote:
            return self._to_data_url(proof)

        path = self._object_path(proof, folder)
        url = f"{self._base_url}/object/{self._bucket}/{path}"
        headers = {"Content-Type": proof.content_type, "x-upsert": "false"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            response = requests.post(
                url, data=proof.data, headers=headers, timeout=self._timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Proof upload to {folder} failed: {e}")
            raise UploadFailedError() from e

        logger.info(f"Proof uploaded to {self._bucket}/{path}")
        return f"{self._base_url}/object/public/{self._bucket}/{path}"

    @staticmethod
    def _to_data_url(proof: ProofUpload) -> str:
        encoded = base64.b64encode(proof.data).decode("ascii")
        return f"data:{proof.content_type};base64,{encoded}"

    @staticmethod
    def _object_path(proof: ProofUpload, folder: str) -> str:
        extension = _EXTENSIONS.get(proof.content_type, "img")
        stamp = datetime.utcnow().strftime("%Y%m%d%H%M%S")
        return f"{folder}/{stamp}-{uuid4().hex}.{extension}"
