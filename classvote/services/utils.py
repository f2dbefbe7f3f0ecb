"""Shared utilities for service layer."""
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from classvote.core.errors import OperationFailedError
from classvote.core.logging_config import get_logger

logger = get_logger(__name__)


@contextmanager
def write_transaction(db: Session, operation: str) -> Iterator[Session]:
    """
    Commit everything done inside the block as one transaction.

    Any database error rolls the whole block back, is logged with the
    operation name, and is re-raised as OperationFailedError. There is no
    retry; the caller decides whether to try again.

    Example:
        with write_transaction(db, "delete_vote"):
            db.query(Submission).filter(...).delete()
            db.delete(vote)
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("operation_failed", operation=operation, error=str(e))
        raise OperationFailedError(operation) from e
