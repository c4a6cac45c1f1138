# product_service/routes.py

import logging
from typing import List, Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from pymongo.collection import Collection

from .db import get_collection
from .models import build_filter, to_document
from .schemas import (
    MessageResponse,
    ProductCreate,
    ProductEnvelope,
    ProductResponse,
    ProductUpdate,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Ocorreu um erro"

router = APIRouter(prefix="/produtos", tags=["produtos"])


def to_response(document) -> ProductResponse:
    # Documents written outside the service may not satisfy the schema
    try:
        return ProductResponse.model_validate(document)
    except ValidationError as e:
        logger.error(
            f"Product Service: Stored product {document.get('_id')} is invalid: {e}"
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=GENERIC_ERROR
        )


@router.post(
    "",
    response_model=ProductEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
)
def create_product(
    product: ProductCreate, collection: Collection = Depends(get_collection)
):
    """
    Creates a new product. The identifier is assigned by the database.
    """
    logger.info(f"Product Service: Creating product: {product.name}")
    document = to_document(product)
    try:
        result = collection.insert_one(document)
    except Exception as e:
        logger.error(f"Product Service: Error creating product: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=GENERIC_ERROR
        )

    document["_id"] = result.inserted_id
    logger.info(
        f"Product Service: Product '{product.name}' (ID: {result.inserted_id}) created successfully."
    )
    return {
        "message": "Produto criado com sucesso",
        "product": ProductResponse.model_validate(document),
    }


@router.get(
    "",
    response_model=List[ProductResponse],
    summary="List products, optionally filtered",
)
def list_products(
    collection: Collection = Depends(get_collection),
    nome: Optional[str] = Query(None, max_length=255),
    name: Optional[str] = Query(None, max_length=255, include_in_schema=False),
    categoria: Optional[str] = Query(None, max_length=100),
    price_min: Optional[float] = Query(
        None, alias="precoMin", allow_inf_nan=False
    ),
    price_max: Optional[float] = Query(
        None, alias="precoMax", allow_inf_nan=False
    ),
):
    """
    Lists every product matching the optional filters. An empty result is a 404.
    """
    query = build_filter(
        name=nome or name,
        category=categoria,
        price_min=price_min,
        price_max=price_max,
    )
    logger.info(f"Product Service: Listing products with filter: {query}")
    try:
        products = list(collection.find(query))
    except Exception as e:
        logger.error(f"Product Service: Error listing products: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=GENERIC_ERROR
        )

    if not products:
        logger.warning("Product Service: No products matched the filter.")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Nenhum produto encontrado!"
        )

    logger.info(f"Product Service: Retrieved {len(products)} products.")
    return [to_response(p) for p in products]


@router.get(
    "/{product_id}",
    response_model=ProductEnvelope,
    summary="Retrieve a single product by ID",
)
def get_product(product_id: str, collection: Collection = Depends(get_collection)):
    logger.info(f"Product Service: Fetching product with ID: {product_id}")
    try:
        product = collection.find_one({"_id": ObjectId(product_id)})
    except Exception as e:
        logger.error(
            f"Product Service: Error fetching product {product_id}: {e}", exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=GENERIC_ERROR
        )

    if not product:
        logger.warning(f"Product Service: Product with ID {product_id} not found.")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Produto não encontrado!"
        )

    return {
        "message": "Produto encontrado",
        "product": to_response(product),
    }


@router.put(
    "/{product_id}",
    response_model=MessageResponse,
    summary="Update an existing product by ID",
)
def update_product(
    product_id: str,
    product: ProductUpdate,
    collection: Collection = Depends(get_collection),
):
    """
    Sets the attributes supplied in the body on an existing product; attributes
    left out of the body keep their stored values. The body has already been
    validated by the time this runs, so invalid data never reaches the database.
    """
    logger.info(f"Product Service: Updating product with ID: {product_id}")
    changes = to_document(product, exclude_unset=True)
    try:
        result = collection.update_one(
            {"_id": ObjectId(product_id)}, {"$set": changes}
        )
    except Exception as e:
        logger.error(
            f"Product Service: Error updating product {product_id}: {e}", exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=GENERIC_ERROR
        )

    if result.matched_count == 0:
        logger.warning(
            f"Product Service: Attempted to update non-existent product with ID {product_id}."
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Produto não encontrado!"
        )

    logger.info(f"Product Service: Product {product_id} updated successfully.")
    return {"message": "Produto editado!"}


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    summary="Delete a product by ID",
)
def delete_product(product_id: str, collection: Collection = Depends(get_collection)):
    logger.info(f"Product Service: Attempting to delete product with ID: {product_id}")
    try:
        result = collection.delete_one({"_id": ObjectId(product_id)})
    except Exception as e:
        logger.error(
            f"Product Service: Error deleting product {product_id}: {e}", exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Um erro aconteceu.",
        )

    if result.deleted_count == 0:
        logger.warning(
            f"Product Service: Attempted to delete non-existent product with ID {product_id}."
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Produto não encontrado."
        )

    logger.info(f"Product Service: Product {product_id} deleted successfully.")
    return {"message": "Produto excluído."}
