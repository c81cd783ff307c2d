"""Base schemas shared by the API responses"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

class BaseSchema(BaseModel):
    """Base schema with common configuration"""

    class Config:
        from_attributes = True

class CamelSchema(BaseSchema):
    """Schema serialised with camelCase keys (totalPages, priceRange)"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
