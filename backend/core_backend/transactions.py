from contextlib import contextmanager
from functools import wraps
import logging

from django.db import DatabaseError, transaction

from .exceptions import StoreError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(operation):
    """Translate storage failures into StoreError so callers know a retry is safe."""
    try:
        yield
    except DatabaseError as e:
        logger.error(f"{operation} failed in the store: {e}")
        raise StoreError(f"{operation} failed: {e}") from e


def atomic_operation(func):
    """
    Run a service method inside one transaction.

    Either every row the method writes is committed or none is. Nested calls
    become savepoints of the outermost operation.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        with store_errors(func.__qualname__):
            with transaction.atomic():
                return func(*args, **kwargs)

    return wrapper
