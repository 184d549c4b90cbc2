from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from services.storefront.app.db.deps import get_order_service
from services.storefront.app.models.order import (
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    UpdateOrderStatusRequest,
)
from services.storefront.app.services.order_base import (
    CartNotClearedError,
    EmptyCartError,
    MissingPaymentDetailsError,
    OrderNotFoundError,
    PersistenceError,
    UserNotFoundError,
)
from services.storefront.app.services.order_service import OrderService

logger = structlog.get_logger(__name__)

router = APIRouter()


def _raise_order_http_error(e: Exception, action: str) -> None:
    if isinstance(e, UserNotFoundError):
        raise HTTPException(status_code=404, detail="User not found") from e

    if isinstance(e, EmptyCartError):
        raise HTTPException(
            status_code=400, detail="Cart is empty. Add items before placing an order."
        ) from e

    if isinstance(e, MissingPaymentDetailsError):
        raise HTTPException(status_code=400, detail=str(e)) from e

    if isinstance(e, OrderNotFoundError):
        raise HTTPException(status_code=404, detail="Order not found") from e

    if isinstance(e, CartNotClearedError):
        raise HTTPException(status_code=500, detail=str(e)) from e

    if isinstance(e, PersistenceError):
        raise HTTPException(status_code=500, detail=f"{action}: {e}") from e

    logger.error("Unhandled order error", action=action, exc_info=e)
    raise HTTPException(status_code=500, detail="Internal Server Error") from e


@router.post("/placeOrder", status_code=201, response_model=PlaceOrderResponse)
def place_order(
    payload: PlaceOrderRequest, service: OrderService = Depends(get_order_service)
) -> PlaceOrderResponse:
    try:
        placed = service.place_order(
            payload.user_id,
            payload.address,
            payload.payment_method,
            payload.payment_info,
        )
    except Exception as e:
        _raise_order_http_error(e, "Error placing order")

    return PlaceOrderResponse(
        message="Order placed successfully",
        order=placed.order,
        email_sent=placed.notification.sent,
    )


@router.get("/allOrders", response_model=OrderListResponse)
def all_orders(service: OrderService = Depends(get_order_service)) -> OrderListResponse:
    try:
        orders = service.list_all_orders()
    except Exception as e:
        _raise_order_http_error(e, "Error fetching orders")

    return OrderListResponse(message="Orders fetched successfully", orders=orders)


@router.get("/getUserOrders/{user_id}", response_model=OrderListResponse)
def user_orders(
    user_id: str, service: OrderService = Depends(get_order_service)
) -> OrderListResponse:
    try:
        orders = service.list_user_orders(user_id)
    except Exception as e:
        _raise_order_http_error(e, "Error fetching orders")

    return OrderListResponse(message="User orders fetched successfully", orders=orders)


@router.put("/updateOrderStatus/{order_id}", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    payload: UpdateOrderStatusRequest,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    try:
        order = service.update_order_status(order_id, payload.status)
    except Exception as e:
        _raise_order_http_error(e, "Error updating order status")

    return OrderResponse(message="Order status updated successfully", order=order)


@router.delete("/cancelOrder/{order_id}", response_model=OrderResponse)
def cancel_order(order_id: str, service: OrderService = Depends(get_order_service)) -> OrderResponse:
    try:
        order = service.cancel_order(order_id)
    except Exception as e:
        _raise_order_http_error(e, "Error cancelling order")

    return OrderResponse(message="Order cancelled and items restored to cart", order=order)
