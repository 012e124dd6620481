# storeadmin/products.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from .auth import get_current_user
from .models import Product, User
from .schemas import ProductOut, ProductCreate
from .stores import ProductStore, get_product_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


async def _get_or_404(products: ProductStore, product_id: int) -> Product:
    product = await products.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("", response_model=List[ProductOut])
async def list_products(
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    brand: Optional[str] = None,
    products: ProductStore = Depends(get_product_store),
):
    return await products.list_all(
        category=category, subcategory=subcategory, brand_name=brand, newest_first=True
    )


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(product_id: int, products: ProductStore = Depends(get_product_store)):
    return await _get_or_404(products, product_id)


# запись разрешена любому залогиненному пользователю (is_admin пока не проверяется)
@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    products: ProductStore = Depends(get_product_store),
    current_user: User = Depends(get_current_user),
):
    product = Product(**payload.model_dump())
    product = await products.add(product)
    logger.info("Product %s created by %s", product.id, current_user.email)
    return product


@router.put("/{product_id}", response_model=ProductOut)
async def update_product(
    product_id: int,
    payload: ProductCreate,
    products: ProductStore = Depends(get_product_store),
    current_user: User = Depends(get_current_user),
):
    product = await _get_or_404(products, product_id)
    for field, value in payload.model_dump().items():
        setattr(product, field, value)

    product = await products.save(product)
    logger.info("Product %s updated by %s", product.id, current_user.email)
    return product


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: int,
    products: ProductStore = Depends(get_product_store),
    current_user: User = Depends(get_current_user),
):
    product = await _get_or_404(products, product_id)
    await products.delete(product)
    logger.info("Product %s deleted by %s", product_id, current_user.email)
    return
