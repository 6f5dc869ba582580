from fastapi import APIRouter, Depends

from retailhub.api import envelopes
from retailhub.api.deps import get_inventory_service, get_product_service
from retailhub.schemas import ProductCreate, ProductRead, ProductUpdate
from retailhub.services.inventory import InventoryService
from retailhub.services.products import ProductService

router = APIRouter()

@router.post('')
def add_product(payload: ProductCreate, svc: ProductService = Depends(get_product_service)):
    return envelopes.message(svc.create(payload), 'Product added successfully', 'Error adding product')

@router.get('')
def list_products(svc: ProductService = Depends(get_product_service)):
    return {'products': envelopes.products(svc.list_all())}

@router.put('')
def update_product(payload: ProductUpdate, svc: ProductService = Depends(get_product_service)):
    return envelopes.message(svc.update(payload), 'Product updated successfully', 'Error updating product')

@router.get('/searchProduct/{name}')
def search_product(name: str, svc: ProductService = Depends(get_product_service)):
    return {'products': envelopes.products(svc.search(name=name))}

@router.get('/category/{name}/{category}')
def filter_by_category(name: str, category: str, svc: ProductService = Depends(get_product_service)):
    return {'products': envelopes.products(svc.search(name=name, category=category))}

@router.get('/{product_id}')
def get_product(product_id: int, svc: ProductService = Depends(get_product_service)):
    result = svc.get(product_id)
    if not result.ok:
        return envelopes.message(result, '', 'Error loading product')
    return {'products': ProductRead.model_validate(result.value).dump()}

@router.delete('/{product_id}')
def delete_product(product_id: int, svc: InventoryService = Depends(get_inventory_service)):
    result = svc.remove_product(product_id, delete_product=True)
    return envelopes.message(result, 'Product deleted successfully', 'Error deleting product')
