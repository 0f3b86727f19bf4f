# product_service/main.py

"""
FastAPI Product Service API.
Manages products: creation, retrieval, updates, deletion, search and a
couple of aggregate views. Requests go through ProductService, which
validates them before they reach the product store.
"""
import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .deps import get_product_service, get_product_store
from .errors import InvalidArgumentError, ProductNotFoundError
from .schemas import Product, TotalValue
from .service import ProductService

# -----------------------------
# Configure Logging
# -----------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Suppress noisy logs from third-party libraries for cleaner output
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.INFO)

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Builds the product store before the first request is served, so that
    database setup and sample data loading happen at startup.
    """
    try:
        get_product_store()
    except Exception as e:
        logger.critical(f"Could not initialise the product store: {e}", exc_info=True)
        raise
    logger.info("Product Service started.")
    yield


# -----------------------------
# FastAPI App Initialization
# -----------------------------
app = FastAPI(
    title="Product Service API",
    description="Manages an in-memory product catalogue",
    version="1.0.0",
    lifespan=lifespan,
)

# Enable CORS (for frontend dev/testing)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------------
# Error Handlers
# -----------------------------
@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    logger.warning(f"Invalid argument on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message})


@app.exception_handler(ProductNotFoundError)
async def product_not_found_handler(request: Request, exc: ProductNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Product not found"})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request input is an invalid argument too, so it is a 400."""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# --- Root Endpoint ---
@app.get("/", status_code=status.HTTP_200_OK, summary="Root endpoint")
async def read_root():
    """
    Returns a welcome message for the Product Service.
    """
    return {"message": "Welcome to the Product Service!"}


# --- Health Check Endpoint ---
@app.get("/health", status_code=status.HTTP_200_OK, summary="Health check endpoint")
async def health_check():
    """
    A simple health check endpoint to verify the service is running.
    Returns 200 OK if the service is alive.
    """
    return {"status": "ok", "service": "product-service"}


# -----------------------------
# Product Endpoints
# -----------------------------
# Fixed paths are registered before /products/{product_id} so they are not
# parsed as ids.


@app.get(
    "/products",
    response_model=List[Product],
    summary="List all products",
)
async def list_products(service: ProductService = Depends(get_product_service)):
    """
    Retrieves every product in the store.
    """
    products = await service.get_all_products()
    logger.info(f"Retrieved {len(products)} products.")
    return products


@app.get(
    "/products/search",
    response_model=List[Product],
    summary="Search products by name or description",
)
async def search_products(
    search_term: Optional[str] = Query(
        None,
        alias="searchTerm",
        description="Case-insensitive substring to look for. Blank returns every product.",
    ),
    service: ProductService = Depends(get_product_service),
):
    """
    Returns products whose name or description contains `searchTerm`,
    ignoring case. An empty or missing term returns all products.
    """
    logger.info(f"Searching products for term: '{search_term}'")
    products = await service.search_products(search_term)
    logger.info(f"Search for '{search_term}' matched {len(products)} products.")
    return products


@app.get(
    "/products/total-value",
    response_model=TotalValue,
    summary="Total price of all active products",
)
async def get_total_value(service: ProductService = Depends(get_product_service)):
    total_value = await service.calculate_total_value()
    logger.info(f"Total value of active products: {total_value}")
    return TotalValue(total_value=total_value)


@app.get(
    "/products/active",
    response_model=List[Product],
    summary="List active products",
)
async def list_active_products(service: ProductService = Depends(get_product_service)):
    products = await service.get_active_products()
    logger.info(f"Retrieved {len(products)} active products.")
    return products


@app.get(
    "/products/{product_id}",
    response_model=Product,
    summary="Retrieve a product by ID",
)
async def get_product(product_id: int, service: ProductService = Depends(get_product_service)):
    """
    Retrieves details of a single product by its unique ID.

    - Returns 400 if the ID is not positive.
    - Returns 404 if the product does not exist.
    """
    logger.info(f"Fetching product with ID: {product_id}")
    product = await service.get_product_by_id(product_id)
    if product is None:
        logger.warning(f"Product with ID: {product_id} not found.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    logger.info(f"Product '{product.name}' (ID: {product_id}) retrieved.")
    return product


@app.post(
    "/products",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
)
async def create_product(
    product: Product,
    request: Request,
    response: Response,
    service: ProductService = Depends(get_product_service),
):
    """
    Creates a new product.

    - The name must not be blank and the price must be greater than 0.
    - `id`, `createdAt` and `isActive` in the body are ignored; the product
      is stored as active with the current time as its creation time.
    - The `Location` header points at the new product.
    """
    logger.info(f"Creating product: {product.name}")
    created = await service.create_product(product)
    response.headers["Location"] = str(request.url_for("get_product", product_id=created.id))
    logger.info(f"Product '{created.name}' (ID: {created.id}) created successfully.")
    return created


@app.put(
    "/products/{product_id}",
    response_model=Product,
    summary="Replace an existing product",
)
async def update_product(
    product_id: int,
    product: Product,
    service: ProductService = Depends(get_product_service),
):
    """
    Replaces the product stored under `product_id` with the request body.

    - The ID in the path wins over any ID in the body.
    - The original `createdAt` is kept.
    - Returns 404 if the product does not exist.
    """
    logger.info(f"Updating product with ID: {product_id}")
    updated = await service.update_product(product_id, product)
    logger.info(f"Product '{updated.name}' (ID: {product_id}) updated successfully.")
    return updated


@app.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product by ID",
)
async def delete_product(product_id: int, service: ProductService = Depends(get_product_service)):
    """
    Deletes a product by its unique ID.

    - Returns a 204 No Content status code upon successful deletion.
    - Returns 404 if the product does not exist.
    """
    logger.info(f"Attempting to delete product with ID: {product_id}")
    deleted = await service.delete_product(product_id)
    if not deleted:
        logger.warning(f"Product with ID: {product_id} not found for deletion.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    logger.info(f"Product (ID: {product_id}) deleted successfully.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
