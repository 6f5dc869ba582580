from fastapi import APIRouter, Depends

from retailhub.api import envelopes
from retailhub.api.deps import get_review_service
from retailhub.schemas import ReviewCreate
from retailhub.services.stores import ReviewService

router = APIRouter()

@router.get('/{store_id}/{product_id}')
def get_reviews(store_id: int, product_id: int, svc: ReviewService = Depends(get_review_service)):
    return {'reviews': [r.dump() for r in svc.for_product(store_id, product_id)]}

@router.post('')
def add_review(payload: ReviewCreate, svc: ReviewService = Depends(get_review_service)):
    return envelopes.message(svc.create(payload), 'Review added successfully', 'Error saving review')
