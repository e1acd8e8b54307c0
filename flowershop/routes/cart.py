from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from flowershop.database import get_session
from flowershop.dependencies.auth import get_current_user
from flowershop.schemas.cart_schemas import CartAddRequest, CartUpdateRequest
from flowershop.services import cart_service
from flowershop.services.session_service import SessionContext


router = APIRouter()

# View Cart

@router.get("")
def get_cart(
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    return cart_service.get_cart(session, current_user.user_id)


# Add to Cart

@router.post("", status_code=status.HTTP_201_CREATED)
def add_to_cart(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    item = cart_service.add_to_cart(session, current_user.user_id, data.product_id, data.quantity)
    return item


# Update Cart

@router.put("/{item_id}")
def update_cart_item(
    item_id: int,
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    item = cart_service.update_cart_item(session, item_id, data.quantity, current_user.user_id)

    if item is None:
        return {"message": "Item removed from cart"}

    return item


# Remove Cart

@router.delete("/{item_id}")
def remove_item(
    item_id: int,
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    cart_service.remove_from_cart(session, item_id, current_user.user_id)
    return {"message": "Item removed from cart"}


# Clear Cart

@router.delete("")
def clear_cart_endpoint(
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    removed = cart_service.clear_cart(session, current_user.user_id)
    return {"message": "Cart cleared", "removed_items": removed}
