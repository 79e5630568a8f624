import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from precosmart.core.errors import NotFoundError, RecomputeError, ValidationError


logger = logging.getLogger(__name__)


def to_http_error(db: Session, error: Exception) -> HTTPException:
    """Map a service error to the response the caller sees."""
    if isinstance(error, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, RecomputeError):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
    if isinstance(error, SQLAlchemyError):
        db.rollback()
        logger.exception("database operation failed")
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database operation failed, please try again",
        )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))


SERVICE_ERRORS = (ValidationError, NotFoundError, RecomputeError, SQLAlchemyError)
