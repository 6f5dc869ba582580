from retailhub.core.errors import ErrorKind, ServiceResult, service_err, service_ok
from retailhub.db.models import Review, Store
from retailhub.schemas import ReviewCreate, ReviewView, StoreCreate
from retailhub.services.base import BaseService, transactional

UNKNOWN_CUSTOMER = 'Unknown'


class StoreService(BaseService):

    @transactional()
    def create(self, payload: StoreCreate) -> ServiceResult[Store]:
        store = self.repo.add(Store(name=payload.name, address=payload.address))
        self.logger.info('Created store %s (%s)', store.id, store.name)
        return service_ok(store)

    def exists(self, store_id: int) -> bool:
        return self.repo.store_exists(store_id)


class ReviewService(BaseService):

    @transactional()
    def create(self, payload: ReviewCreate) -> ServiceResult[Review]:
        if not self.repo.store_exists(payload.store_id):
            return service_err(ErrorKind.NOT_FOUND, 'Store not found')
        review = self.repo.add(Review(
            store_id=payload.store_id,
            product_id=payload.product_id,
            customer_id=payload.customer_id,
            rating=payload.rating,
            comment=payload.comment,
        ))
        return service_ok(review)

    def for_product(self, store_id: int, product_id: int) -> list[ReviewView]:
        reviews = self.repo.find_reviews_by_store_and_product(store_id, product_id)
        customers = self.repo.find_customers_by_ids(r.customer_id for r in reviews)
        out = []
        for r in reviews:
            customer = customers.get(r.customer_id)
            out.append(ReviewView(
                rating=r.rating,
                comment=r.comment or '',
                customer_name=customer.name if customer else UNKNOWN_CUSTOMER,
            ))
        return out
