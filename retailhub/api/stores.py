from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from retailhub.api import envelopes
from retailhub.api.deps import get_order_service, get_store_service
from retailhub.core.errors import ErrorKind
from retailhub.schemas import OrderRead, PlaceOrderRequest, StoreCreate
from retailhub.services.orders import OrderService
from retailhub.services.stores import StoreService

router = APIRouter()

@router.post('')
def add_store(payload: StoreCreate, svc: StoreService = Depends(get_store_service)):
    result = svc.create(payload)
    if not result.ok:
        return envelopes.message(result, '', 'Error creating store')
    return {'message': f'Store created successfully with ID: {result.value.id}'}

@router.get('/validate/{store_id}')
def validate_store(store_id: int, svc: StoreService = Depends(get_store_service)) -> bool:
    return svc.exists(store_id)

@router.post('/placeOrder')
def place_order(payload: PlaceOrderRequest, svc: OrderService = Depends(get_order_service)):
    result = svc.place_order(payload)
    if result.ok:
        return {'message': 'Order placed successfully'}
    text = 'Error placing order' if result.error is ErrorKind.INTERNAL else result.error_detail
    return JSONResponse({'Error': text}, status_code=envelopes.status_for(result))

@router.get('/order/{order_id}')
def get_order(order_id: int, svc: OrderService = Depends(get_order_service)):
    result = svc.get_order(order_id)
    if not result.ok:
        return envelopes.message(result, '', 'Error loading order')
    return {'order': OrderRead.model_validate(result.value).dump()}
