import logging
import time
from functools import wraps
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from retailhub.core.errors import ErrorKind, IntegrityConflict, ServiceResult, service_err
from retailhub.db.repository import CatalogRepository


class BaseService:
    """Common plumbing for request-scoped services: the gateway and a class-named logger."""

    def __init__(self, repo: CatalogRepository):
        self.repo = repo
        self.logger = logging.getLogger(self.__class__.__module__ + '.' + self.__class__.__name__)


def transactional(conflict: Optional[str] = None) -> Callable:
    """Run a service method as one unit of work.

    A successful ServiceResult commits, a failed one rolls back. Constraint
    violations become CONFLICT (with ``conflict`` as the message) and any
    other database error becomes INTERNAL; both leave nothing behind.
    """

    def decorator(func: Callable[..., ServiceResult]) -> Callable[..., ServiceResult]:
        @wraps(func)
        def wrapper(self: BaseService, *args, **kwargs) -> ServiceResult:
            method_name = f'{self.__class__.__name__}.{func.__name__}'
            start = time.perf_counter()
            try:
                result = func(self, *args, **kwargs)
                if result.ok:
                    self.repo.commit()
                else:
                    self.repo.rollback()
            except IntegrityConflict as e:
                self.repo.rollback()
                self.logger.warning('%s rejected by constraint %s', method_name, e.constraint or '?')
                return service_err(ErrorKind.CONFLICT, conflict or 'Constraint violation')
            except SQLAlchemyError:
                self.repo.rollback()
                self.logger.exception('%s failed', method_name)
                return service_err(ErrorKind.INTERNAL, f'{method_name} failed')

            elapsed = (time.perf_counter() - start) * 1000
            if result.ok:
                self.logger.debug('%s completed in %.2fms', method_name, elapsed)
            else:
                self.logger.info('%s failed with %s in %.2fms: %s', method_name, result.error.value, elapsed, result.error_detail)
            return result

        return wrapper

    return decorator
