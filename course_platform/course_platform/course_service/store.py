"""
Data access for credentials, entitlements and course content.

Uniqueness (one user per email, one payment per user and course) is left to
the database constraints: inserts run as a single statement and the caller
translates ``IntegrityError`` into the matching conflict error.
"""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .errors import AlreadyPurchasedError, DuplicateUserError
from .models import Course, Payment, User, Video

USER_EMAIL_UNIQUE = ("ix_users_email", "users.email")
PAYMENT_UNIQUE = ("uq_payments_user_course", "payments.user_id, payments.course_id")


def is_unique_violation(exc: IntegrityError, constraint: tuple) -> bool:
    """
    Tell a unique-constraint violation apart from other integrity errors
    (foreign keys, NOT NULL) so only real duplicates become conflicts.

    ``constraint`` is ``(name, sqlite_columns)``: Postgres reports the
    constraint name, SQLite only the column list.
    """
    name, sqlite_columns = constraint
    diag = getattr(exc.orig, "diag", None)
    if getattr(diag, "constraint_name", None):
        return diag.constraint_name == name
    message = str(exc.orig)
    return name in message or f"UNIQUE constraint failed: {sqlite_columns}" in message


# ---------------- Credential Store ----------------

def find_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def insert_user(db: Session, name: str, email: str, password_hash: str) -> User:
    """
    Insert a new user row.

    Raises:
        DuplicateUserError: If the email is already registered
    """
    user = User(name=name, email=email, password_hash=password_hash)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not is_unique_violation(e, USER_EMAIL_UNIQUE):
            raise
        raise DuplicateUserError() from e
    db.refresh(user)
    return user


# ---------------- Entitlement Store ----------------

def has_entitlement(db: Session, user_id: int, course_id: int) -> bool:
    row = db.execute(
        select(Payment.id).where(Payment.user_id == user_id, Payment.course_id == course_id)
    ).first()
    return row is not None


def insert_entitlement(db: Session, user_id: int, course_id: int,
                       payment_method: Optional[str] = None) -> Payment:
    """
    Record that ``user_id`` purchased ``course_id``.

    Raises:
        AlreadyPurchasedError: If the pair already has a payment row
    """
    payment = Payment(user_id=user_id, course_id=course_id, payment_method=payment_method)
    db.add(payment)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not is_unique_violation(e, PAYMENT_UNIQUE):
            raise
        raise AlreadyPurchasedError() from e
    db.refresh(payment)
    return payment


def list_purchased_courses(db: Session, user_id: int) -> List[Course]:
    stmt = (
        select(Course)
        .join(Payment, Payment.course_id == Course.id)
        .where(Payment.user_id == user_id)
        .order_by(Payment.created_at, Course.id)
    )
    return list(db.execute(stmt).scalars().all())


# ---------------- Content Store ----------------

def list_courses(db: Session) -> List[Course]:
    return list(db.execute(select(Course).order_by(Course.id)).scalars().all())


def get_course(db: Session, course_id: int) -> Optional[Course]:
    return db.get(Course, course_id)


def list_videos(db: Session, course_id: int) -> List[Video]:
    stmt = select(Video).where(Video.course_id == course_id).order_by(Video.position, Video.id)
    return list(db.execute(stmt).scalars().all())
