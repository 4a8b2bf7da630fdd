from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# passlib refuses longer secrets
MAX_PASSWORD_LENGTH = 4096
# Largest value a BIGINT primary key can hold
MAX_ID = 2 ** 63 - 1


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_LENGTH)


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_LENGTH)


class UserPublic(BaseModel):
    id: int
    name: str
    email: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RegisterResponse(BaseModel):
    message: str
    user: UserPublic


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserPublic


# Courses
class CourseOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    price: int
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class VideoOut(BaseModel):
    id: int
    course_id: int
    title: str
    video_url: str
    position: int

    model_config = ConfigDict(from_attributes=True)


class MyCoursesResponse(BaseModel):
    purchased_courses: List[CourseOut] = Field(alias="purchasedCourses")

    model_config = ConfigDict(populate_by_name=True)


# Payments
class PaymentRequest(BaseModel):
    course_id: int = Field(alias="courseId", ge=1, le=MAX_ID)
    payment_method: Optional[str] = Field(default=None, alias="paymentMethod")

    model_config = ConfigDict(populate_by_name=True)


class PaymentResponse(BaseModel):
    message: str
    course_id: int = Field(alias="courseId")

    model_config = ConfigDict(populate_by_name=True)
