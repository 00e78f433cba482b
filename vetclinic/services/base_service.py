import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError

from vetclinic.errors import ConflictError

logger = logging.getLogger(__name__)


class BaseService:
    def __init__(self, session):
        self.session = session

    @contextmanager
    def atomic(self):
        """One unit of work: commit everything written inside the block or nothing."""
        try:
            yield
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(f"Integrity error, transaction rolled back: {e.orig}")
            raise ConflictError('Запись конфликтует с уже существующими данными!') from e
        except Exception:
            self.session.rollback()
            raise
