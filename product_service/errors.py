"""
Error taxonomy surfaced by the product orchestrator.

Each error carries the HTTP status and the ``type`` discriminator the API
layer writes into the response body.
"""

from __future__ import annotations


class ProductServiceError(Exception):
    """Base class for every error returned to API callers."""

    status_code: int = 500
    type: str = "internal-error"
    default_message: str = "Unexpected error"

    def __init__(self, error: str = "", *, message: str | None = None):
        super().__init__(error or message or self.default_message)
        self.message = message or self.default_message
        self.error = error or "Check stdout for more details"

    def as_dict(self) -> dict:
        return {"type": self.type, "message": self.message, "error": self.error}


class ValidationError(ProductServiceError):
    status_code = 400
    type = "request-validation"
    default_message = "Invalid request body"


class NotFoundError(ProductServiceError):
    status_code = 404
    type = "product-not-found"
    default_message = "Product not found in database"


class BlobWriteError(ProductServiceError):
    status_code = 500
    type = "file-upload-cdn"
    default_message = "Error uploading file to CDN"


class BlobReadError(ProductServiceError):
    status_code = 404
    type = "file-not-exist"
    default_message = "Error getting file! Is the file exist, or is the key correct?"


class BlobDeleteError(ProductServiceError):
    status_code = 500
    type = "file-delete-cdn"
    default_message = "Error deleting file from CDN"


class MetadataWriteError(ProductServiceError):
    status_code = 500
    type = "database-error"
    default_message = "Error creating product on database"


class MetadataDeleteError(ProductServiceError):
    status_code = 500
    type = "database-error"
    default_message = "Error deleting product"


class CacheMissError(ProductServiceError):
    status_code = 404
    type = "file-cache"
    default_message = "File not found in cache"
