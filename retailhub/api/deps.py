from fastapi import Depends
from sqlalchemy.orm import Session
from retailhub.db.session import SessionLocal
from retailhub.db.repository import CatalogRepository
from retailhub.services.catalog import CatalogQuery
from retailhub.services.inventory import InventoryService
from retailhub.services.orders import OrderService
from retailhub.services.products import ProductService
from retailhub.services.stores import ReviewService, StoreService
from retailhub.services.validation import ValidationService

def get_db():
    db = SessionLocal()
    try: yield db
    finally: db.close()

def get_repository(db: Session = Depends(get_db)) -> CatalogRepository:
    return CatalogRepository(db)

def get_validation(repo: CatalogRepository = Depends(get_repository)) -> ValidationService:
    return ValidationService(repo)

def get_inventory_service(repo: CatalogRepository = Depends(get_repository),
                          validation: ValidationService = Depends(get_validation)) -> InventoryService:
    return InventoryService(repo, validation)

def get_product_service(repo: CatalogRepository = Depends(get_repository),
                        validation: ValidationService = Depends(get_validation)) -> ProductService:
    return ProductService(repo, validation)

def get_order_service(repo: CatalogRepository = Depends(get_repository)) -> OrderService:
    return OrderService(repo)

def get_catalog_query(repo: CatalogRepository = Depends(get_repository)) -> CatalogQuery:
    return CatalogQuery(repo)

def get_store_service(repo: CatalogRepository = Depends(get_repository)) -> StoreService:
    return StoreService(repo)

def get_review_service(repo: CatalogRepository = Depends(get_repository)) -> ReviewService:
    return ReviewService(repo)
