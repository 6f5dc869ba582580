from typing import Optional

from fastapi import APIRouter, Depends, Query

from retailhub.api import envelopes
from retailhub.api.deps import get_catalog_query, get_inventory_service
from retailhub.core.config import settings
from retailhub.schemas import CombinedRequest, InventoryCreate
from retailhub.services.catalog import CatalogQuery
from retailhub.services.inventory import InventoryService

router = APIRouter()

@router.post('')
def save_inventory(payload: InventoryCreate, svc: InventoryService = Depends(get_inventory_service)):
    return envelopes.message(svc.create(payload), 'Data saved successfully', 'Error saving data')

@router.put('')
def update_inventory(payload: CombinedRequest, svc: InventoryService = Depends(get_inventory_service)):
    return envelopes.message(svc.update_stock(payload), 'Successfully updated product', 'Error updating inventory')

# query-parameter forms; declared before /{store_id} so "filter" is not read as an id
@router.get('/filter')
def filter_products_query(store_id: int = Query(alias='storeId'),
                          category: Optional[str] = None, name: Optional[str] = None,
                          q: CatalogQuery = Depends(get_catalog_query)):
    return {'product': envelopes.products(q.filter(store_id, category=category, name=name))}

@router.get('/search')
def search_products_query(name: str, store_id: int = Query(alias='storeId'),
                          q: CatalogQuery = Depends(get_catalog_query)):
    return {'product': envelopes.products(q.search_by_name(store_id, name))}

@router.get('/filter/{category}/{name}/{store_id}')
def filter_products(category: str, name: str, store_id: int, q: CatalogQuery = Depends(get_catalog_query)):
    return {'product': envelopes.products(q.filter(store_id, category=category, name=name))}

@router.get('/search/{name}/{store_id}')
def search_products(name: str, store_id: int, q: CatalogQuery = Depends(get_catalog_query)):
    return {'product': envelopes.products(q.search_by_name(store_id, name))}

@router.get('/validate/{quantity}/{store_id}/{product_id}')
def validate_quantity(quantity: int, store_id: int, product_id: int,
                      svc: InventoryService = Depends(get_inventory_service)) -> bool:
    return svc.check_availability(product_id, store_id, quantity)

@router.get('/{store_id}')
def products_for_store(store_id: int, q: CatalogQuery = Depends(get_catalog_query)):
    return {'products': envelopes.products(q.products_for_store(store_id))}

@router.delete('/{product_id}')
def remove_product(product_id: int, svc: InventoryService = Depends(get_inventory_service)):
    result = svc.remove_product(product_id, delete_product=settings.DELETE_PRODUCT_ON_INVENTORY_REMOVE)
    return envelopes.message(result, 'Product deleted successfully', 'Error deleting product')
