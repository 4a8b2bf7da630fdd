"""
Course listing, purchase recording and entitlement-gated video access.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from . import store
from .access import AuthenticatedIdentity
from .errors import CourseNotFoundError, ForbiddenError, UnauthorizedError
from .models import Course, Payment, Video

logger = logging.getLogger(__name__)


def _require(identity: Optional[AuthenticatedIdentity]) -> AuthenticatedIdentity:
    if identity is None or identity.id is None:
        raise UnauthorizedError()
    return identity


def list_courses(db: Session) -> List[Course]:
    return store.list_courses(db)


def record_payment(db: Session, identity: Optional[AuthenticatedIdentity], course_id: int,
                   payment_method: Optional[str] = None) -> Payment:
    """
    Grant ``identity`` access to ``course_id``. There is no way to revoke it.

    Raises:
        UnauthorizedError: If there is no identity
        CourseNotFoundError: If the course does not exist
        AlreadyPurchasedError: If the user already owns the course
    """
    identity = _require(identity)
    if store.get_course(db, course_id) is None:
        raise CourseNotFoundError()

    payment = store.insert_entitlement(db, identity.id, course_id, payment_method)
    logger.info("Payment recorded for user %s, course %s", identity.id, course_id)
    return payment


def list_my_courses(db: Session, identity: Optional[AuthenticatedIdentity]) -> List[Course]:
    identity = _require(identity)
    return store.list_purchased_courses(db, identity.id)


def list_course_videos(db: Session, identity: Optional[AuthenticatedIdentity], course_id: int) -> List[Video]:
    """
    Raises:
        UnauthorizedError: If there is no identity
        ForbiddenError: If the user has not purchased the course
    """
    identity = _require(identity)
    if not store.has_entitlement(db, identity.id, course_id):
        logger.info("Video access denied for user %s, course %s", identity.id, course_id)
        raise ForbiddenError()
    return store.list_videos(db, course_id)
