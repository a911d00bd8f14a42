from fastapi import APIRouter, Depends
from typing import List

from rentmzansi.api.dependencies import ServiceProvider
from rentmzansi.schemas.engagement import SubscribeRequest, SubscribeResult
from rentmzansi.services.subscription_service import SubscriptionService

router = APIRouter()

get_subscription_service = ServiceProvider(SubscriptionService)


@router.get("/{user_id}", response_model=List[str])
def get_subscriptions(
    user_id: str,
    service: SubscriptionService = Depends(get_subscription_service)
):
    return service.get_subscriptions(user_id)


@router.post("/{user_id}", response_model=SubscribeResult)
def subscribe_to_area(
    user_id: str,
    subscription: SubscribeRequest,
    service: SubscriptionService = Depends(get_subscription_service)
):
    """
    Subscribe to new-listing notifications for an area

    Empty areas and repeat subscriptions come back with success=false.
    """
    return service.subscribe_to_area(user_id, subscription.area)


@router.delete("/{user_id}/{area}", response_model=List[str])
def unsubscribe_from_area(
    user_id: str,
    area: str,
    service: SubscriptionService = Depends(get_subscription_service)
):
    return service.unsubscribe_from_area(user_id, area)
