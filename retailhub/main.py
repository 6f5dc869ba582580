import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from retailhub.version import VERSION
from retailhub.api import inventory, products, reviews, stores
from retailhub.api.envelopes import status_for
from retailhub.core.config import settings
from retailhub.core.errors import ErrorKind, service_err
from retailhub.core.logging import configure_logging, new_request_id

logger = logging.getLogger(__name__)

configure_logging()

# Create instrumentator first
instrumentator = Instrumentator()

app = FastAPI(title='Retail Catalog Service', version=VERSION)

# Instrument the app BEFORE adding routes or middleware
instrumentator.instrument(app).expose(
    app,
    include_in_schema=False,
    endpoint="/metrics",
    should_gzip=True,
)

@app.middleware('http')
async def request_context(request: Request, call_next):
    rid = new_request_id(request.headers.get('X-Request-ID'))
    try:
        response = await call_next(request)
    except Exception:
        logger.exception('Unhandled error on %s %s', request.method, request.url.path)
        response = JSONResponse({'message': 'Internal server error'}, status_code=500)
    response.headers['X-Request-ID'] = rid
    logger.info('%s %s -> %s', request.method, request.url.path, response.status_code)
    return response

@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    logger.info('Rejected %s %s: %s', request.method, request.url.path, exc.errors())
    # malformed bodies use the route's own envelope
    key = 'Error' if request.url.path.endswith('/placeOrder') else 'message'
    result = service_err(ErrorKind.INVALID, 'Invalid request')
    return JSONResponse({key: result.error_detail}, status_code=status_for(result))

@app.get('/health')
def health(): return {'status':'ok'}

@app.get('/v1/_info')
def info(): return {'service':'retailhub','version':VERSION}

@app.on_event("startup")
async def startup_event():
    if settings.AUTO_CREATE_SCHEMA:
        from retailhub.db.session import Base, engine
        import retailhub.db.models  # noqa
        Base.metadata.create_all(engine)
        logger.info('Schema created on %s', engine.url.render_as_string(hide_password=True))
    for route in app.routes:
        if hasattr(route, "methods") and hasattr(route, "path"):
            logger.debug('%s %s', sorted(route.methods), route.path)

app.include_router(stores.router,    prefix='/store',     tags=['store'])
app.include_router(inventory.router, prefix='/inventory', tags=['inventory'])
app.include_router(products.router,  prefix='/product',   tags=['product'])
app.include_router(reviews.router,   prefix='/reviews',   tags=['reviews'])
