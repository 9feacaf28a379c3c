"""Suggestion endpoints for the CartRec API.

This module provides API endpoints that take a shopper's cart and return
products bought by customers with similar past orders.
"""

import asyncio
import json
import logging
import time
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, ValidationError

from cartrec.api.exceptions import (
    CatalogUnavailableError,
    HistoryUnavailableError,
    SuggestionError,
)
from cartrec.api.metrics import metrics_service
from cartrec.config import Settings, load_settings
from cartrec.recommender.engine import suggest_products
from cartrec.recommender.history import PurchaseRow
from cartrec.recommender.sources import (
    CatalogReader,
    CsvCatalogReader,
    CsvOrderHistoryReader,
    OrderHistoryReader,
)
from cartrec.recommender.vectors import CartLine

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/suggestions",
    tags=["suggestions"],
)

SUCCESS_MESSAGE = "Successfully generated suggestions"
NO_HISTORY_MESSAGE = "Purchase history unavailable; no suggestions generated"


class CartLineModel(BaseModel):
    """A product line in the shopper's cart."""

    product_id: str = Field(..., min_length=1, description="Catalog variant id")
    quantity: int = Field(..., ge=0, description="Number of units")


class SuggestionRequest(BaseModel):
    """Request model for suggestion requests.

    Attributes:
        region_code: Shipping region code, e.g. "JP-13".
        cart_lines: Lines currently in the cart.
    """

    region_code: str = Field(default="", description="Shipping region code")
    cart_lines: List[CartLineModel] = Field(
        default_factory=list, description="Lines currently in the cart"
    )


class SuggestionModel(BaseModel):
    """A suggested product and its accumulated neighbor score."""

    product_id: str = Field(..., description="Suggested variant id")
    score: float = Field(..., description="Accumulated neighbor score")


class SuggestionResponse(BaseModel):
    """Response model for suggestion requests.

    Attributes:
        message: Outcome description.
        suggestions: Suggested products, best first.
    """

    message: str = Field(..., description="Outcome description")
    suggestions: List[SuggestionModel] = Field(
        default_factory=list, description="Suggested products, best first"
    )


def get_settings() -> Settings:
    return load_settings()


def get_catalog_reader(settings: Settings = Depends(get_settings)) -> CatalogReader:
    return CsvCatalogReader(settings.catalog_path)


def get_history_reader(settings: Settings = Depends(get_settings)) -> OrderHistoryReader:
    return CsvOrderHistoryReader(settings.purchases_path, row_limit=settings.history_row_limit)


async def fetch_active_product_ids(reader: CatalogReader, timeout: float) -> List[str]:
    """Read the active catalog off the event loop.

    Raises:
        CatalogUnavailableError: If the reader fails or times out.
    """
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(reader.list_active_product_ids), timeout=timeout
        )
    except Exception as e:
        logger.error(
            "Catalog fetch failed",
            extra={"error": str(e), "error_type": type(e).__name__},
        )
        raise CatalogUnavailableError(e) from e


async def fetch_purchase_rows(reader: OrderHistoryReader, timeout: float) -> List[PurchaseRow]:
    """Read past purchase rows off the event loop.

    Raises:
        HistoryUnavailableError: If the reader fails or times out.
    """
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(reader.list_customer_purchase_rows), timeout=timeout
        )
    except Exception as e:
        logger.warning(
            "Purchase history fetch failed",
            extra={"error": str(e), "error_type": type(e).__name__},
        )
        raise HistoryUnavailableError(e) from e


async def generate_suggestions(
    request: SuggestionRequest,
    settings: Settings,
    catalog_reader: CatalogReader,
    history_reader: OrderHistoryReader,
) -> SuggestionResponse:
    """Fetch the data snapshot and rank suggestions for a cart.

    Both fetches run concurrently. A catalog failure aborts the request; a
    history failure is logged and the cart is scored against no customers.

    Raises:
        CatalogUnavailableError: If the catalog cannot be read.
        SuggestionError: If scoring fails unexpectedly.
    """
    start_time = time.time()
    logger.info(
        f"Generating suggestions for region {request.region_code!r}, "
        f"{len(request.cart_lines)} cart lines"
    )

    catalog_result, history_result = await asyncio.gather(
        fetch_active_product_ids(catalog_reader, settings.fetch_timeout),
        fetch_purchase_rows(history_reader, settings.fetch_timeout),
        return_exceptions=True,
    )

    if isinstance(catalog_result, BaseException):
        metrics_service.record_catalog_failure()
        raise catalog_result

    message = SUCCESS_MESSAGE
    if isinstance(history_result, HistoryUnavailableError):
        logger.warning(f"{history_result.message}; continuing without purchase history")
        metrics_service.record_history_failure()
        history_result = []
        message = NO_HISTORY_MESSAGE
    elif isinstance(history_result, BaseException):
        raise history_result

    cart_lines = [
        CartLine(product_id=line.product_id, quantity=line.quantity)
        for line in request.cart_lines
    ]

    try:
        suggestions = await asyncio.to_thread(
            suggest_products,
            catalog_result,
            history_result,
            request.region_code,
            cart_lines,
            region_weight=settings.region_weight,
            top_k=settings.top_neighbors,
            result_limit=settings.result_limit,
            normalize_products=settings.normalize_products,
        )
    except Exception as e:
        logger.error(
            f"Error generating suggestions for region {request.region_code!r}: {e}",
            exc_info=True,
        )
        raise SuggestionError(request.region_code, e) from e

    latency_ms = (time.time() - start_time) * 1000
    metrics_service.record_request(latency_ms, len(suggestions))
    logger.info(f"Generated {len(suggestions)} suggestions in {latency_ms:.2f} ms")

    return SuggestionResponse(
        message=message,
        suggestions=[
            SuggestionModel(product_id=s.product_id, score=s.score) for s in suggestions
        ],
    )


@router.post("", response_model=SuggestionResponse)
async def post_suggestions(
    request: SuggestionRequest,
    settings: Settings = Depends(get_settings),
    catalog_reader: CatalogReader = Depends(get_catalog_reader),
    history_reader: OrderHistoryReader = Depends(get_history_reader),
) -> SuggestionResponse:
    """Get product suggestions for a cart sent as a JSON body.

    Example:
        POST /suggestions
        {"region_code": "JP-13", "cart_lines": [{"product_id": "P1", "quantity": 1}]}
    """
    return await generate_suggestions(request, settings, catalog_reader, history_reader)


@router.get("", response_model=SuggestionResponse)
async def get_suggestions(
    region_code: str = Query(default="", description="Shipping region code"),
    cart_lines: str = Query(default="[]", description="JSON array of cart lines"),
    settings: Settings = Depends(get_settings),
    catalog_reader: CatalogReader = Depends(get_catalog_reader),
    history_reader: OrderHistoryReader = Depends(get_history_reader),
) -> SuggestionResponse:
    """Get product suggestions for a cart passed in the query string.

    The cart is a JSON-encoded array of ``{product_id, quantity}`` objects.

    Example:
        GET /suggestions?region_code=JP-13&cart_lines=[{"product_id":"P1","quantity":1}]
    """
    try:
        request = SuggestionRequest.model_validate(
            {"region_code": region_code, "cart_lines": json.loads(cart_lines)}
        )
    except json.JSONDecodeError as e:
        raise HTTPException(
            status_code=422,
            detail=f"cart_lines is not valid JSON: {e}",
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False),
        )

    return await generate_suggestions(request, settings, catalog_reader, history_reader)
