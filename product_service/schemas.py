"""
Pydantic schemas for the product service API.
"""

from __future__ import annotations

from pydantic import BaseModel


class Product(BaseModel):
    id: int
    name: str
    photo_key: str
    created_at: float
    updated_at: float


class ListProductsResponse(BaseModel):
    type: str = "get-products"
    message: str = "Products fetched successfully"
    products: list[Product]


class CreateProductResponse(BaseModel):
    type: str = "create-product"
    message: str
    product: Product
    cache_id: str
    image_temp_url: str
    image_real_url: str


class DeleteProductResponse(BaseModel):
    type: str = "delete-product"
    message: str = "Product deleted successfully"

