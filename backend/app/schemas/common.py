"""Shared schema pieces: camelCase wire models, response envelope, input field types."""
import re
from typing import Annotated, Generic, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

T = TypeVar("T")

PHONE_PATTERN = r"^010-?\d{4}-?\d{4}$"


def normalize_phone(phone: str) -> str:
    """010-1234-5678 -> 01012345678"""
    return re.sub(r"-", "", phone.strip())


class CamelModel(BaseModel):
    """Serializes as camelCase; accepts either camelCase or snake_case on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
Phone = Annotated[
    str,
    StringConstraints(strip_whitespace=True, pattern=PHONE_PATTERN),
    AfterValidator(normalize_phone),
]
