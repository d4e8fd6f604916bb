"""
Base schema classes
"""
from pydantic import BaseModel as PydanticBaseModel
from datetime import datetime


class BaseSchema(PydanticBaseModel):
    """Base schema with common configuration"""

    class Config:
        from_attributes = True  # Allows ORM mode (formerly orm_mode)
        populate_by_name = True


class TimestampSchema(BaseSchema):
    """Schema with timestamp fields"""
    created_at: datetime
    updated_at: datetime


class IDSchema(BaseSchema):
    """Schema with opaque string ID field"""
    id: str


class BaseResponseSchema(TimestampSchema, IDSchema):
    """Base response schema with common fields"""
    pass


class ErrorDetail(BaseSchema):
    """Structured error body carried in HTTPException.detail"""
    code: str
    message: str


class ErrorResponse(BaseSchema):
    """Error body returned by the API for marketplace errors"""
    detail: ErrorDetail
