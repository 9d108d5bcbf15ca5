"""
HTTP routes for the product service API.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Iterator, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import StreamingResponse

from product_service.dependencies import get_orchestrator
from product_service.errors import ValidationError
from product_service.orchestrator import ProductOrchestrator, UploadedFile
from product_service.schemas import (
    CreateProductResponse,
    DeleteProductResponse,
    ListProductsResponse,
    Product,
)

logger = logging.getLogger(__name__)

router = APIRouter()

STREAM_CHUNK_SIZE = 64 * 1024


def _parse_int(value: Optional[str]) -> Optional[int]:
    # Malformed numbers fall back to the orchestrator's defaults.
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


def _content_disposition(key: str) -> str:
    # Header values must be latin-1; non-ASCII names go in filename* (RFC 5987).
    fallback = key.encode("ascii", "replace").decode("ascii")
    if fallback == key:
        return f"attachment; filename={key}"
    return f"attachment; filename={fallback}; filename*=UTF-8''{quote(key)}"


def _iter_body(body: BinaryIO) -> Iterator[bytes]:
    try:
        while True:
            chunk = body.read(STREAM_CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
    finally:
        body.close()


@router.get("/products", response_model=ListProductsResponse)
def list_products(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    orchestrator: ProductOrchestrator = Depends(get_orchestrator),
):
    records = orchestrator.list_products(_parse_int(page), _parse_int(limit))
    return ListProductsResponse(
        products=[Product(**record.as_dict()) for record in records]
    )


@router.post("/products", response_model=CreateProductResponse)
def create_product(
    name: Optional[str] = Form(None),
    product_photo: Optional[UploadFile] = File(None),
    orchestrator: ProductOrchestrator = Depends(get_orchestrator),
):
    upload = None
    if product_photo is not None:
        upload = UploadedFile(
            filename=product_photo.filename or "",
            stream=product_photo.file,
        )
    created = orchestrator.create_product(name, upload)
    return CreateProductResponse(
        message=f"File uploaded successfully {created.blob_key}",
        product=Product(**created.product.as_dict()),
        cache_id=created.cache_id,
        image_temp_url=created.image_temp_url,
        image_real_url=created.image_real_url,
    )


@router.get("/cache/{cache_id}")
def get_cached_image(
    cache_id: str,
    orchestrator: ProductOrchestrator = Depends(get_orchestrator),
):
    stored = orchestrator.read_cached_image(cache_id)
    headers = {
        "Content-Disposition": _content_disposition(stored.key),
        "Content-Length": str(stored.content_length),
    }
    return StreamingResponse(
        _iter_body(stored.body), media_type=stored.content_type, headers=headers
    )


@router.delete("/products/{product_id}", response_model=DeleteProductResponse)
def delete_product(
    product_id: str,
    orchestrator: ProductOrchestrator = Depends(get_orchestrator),
):
    try:
        parsed_id = int(product_id)
    except ValueError as exc:
        raise ValidationError(str(exc), message="Invalid product id") from exc
    orchestrator.delete_product(parsed_id)
    return DeleteProductResponse()
