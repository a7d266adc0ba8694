"""
Orders API Endpoints
Shared order detail view for any authenticated role
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from desiconnect.core.auth import TokenUser, get_current_user
from desiconnect.core.database import get_db
from desiconnect.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.get("/{order_id}")
def get_order_details(
    order_id: int,
    user: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Admins see any order, sellers and customers only the ones they are party to"""
    order = OrderService(db).get_for_user(order_id, user)
    return {"status": "success", "data": order.to_dict()}
