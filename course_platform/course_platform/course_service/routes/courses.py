"""
Course catalogue, payment and video endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.orm import Session

from .. import catalog
from ..access import AuthenticatedIdentity, require_identity
from ..db import get_db
from ..schemas import MAX_ID, CourseOut, MyCoursesResponse, PaymentRequest, PaymentResponse, VideoOut
from ..utils.event_logger import log_auth_event

router = APIRouter(tags=["courses"])


@router.get("/courses", response_model=List[CourseOut])
def list_courses(db: Session = Depends(get_db)):
    return catalog.list_courses(db)


@router.post("/payment", response_model=PaymentResponse)
def record_payment(
    payload: PaymentRequest,
    request: Request,
    identity: AuthenticatedIdentity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    payment = catalog.record_payment(db, identity, payload.course_id, payload.payment_method)
    log_auth_event("payment", request, user_id=identity.id, email=identity.email, course_id=payment.course_id)
    return PaymentResponse(message="Payment successful", course_id=payment.course_id)


@router.get("/my-courses", response_model=MyCoursesResponse)
def my_courses(
    identity: AuthenticatedIdentity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    courses = catalog.list_my_courses(db, identity)
    return MyCoursesResponse(purchased_courses=[CourseOut.model_validate(c) for c in courses])


@router.get("/course/{course_id}/videos", response_model=List[VideoOut])
def course_videos(
    course_id: int = Path(ge=1, le=MAX_ID),
    identity: AuthenticatedIdentity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    return catalog.list_course_videos(db, identity, course_id)
