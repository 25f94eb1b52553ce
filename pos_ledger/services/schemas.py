"""Pydantic schemas for catalog commands"""

from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from typing import Generic, Iterator, Optional, TypeVar, Union

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from pos_ledger.domain.exceptions import ValidationError


class InventoryItemFields(BaseModel):
    """Editable fields of an inventory item"""

    code: str = Field(..., min_length=1, description="Unique item code / barcode")
    name: str = Field(..., min_length=1)
    description: str = ""
    price: Decimal = Field(..., ge=0, allow_inf_nan=False)
    stock: int = Field(..., ge=0)
    threshold: int = Field(0, ge=0, description="Low-stock warning level")

    @field_validator("code", "name", mode="before")
    @classmethod
    def strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class CustomerFields(BaseModel):
    """Editable fields of a registered customer"""

    name: str = Field(..., min_length=1)
    address: str = ""
    tp: str = ""
    credit_limit: Decimal = Field(Decimal("0"), ge=0, allow_inf_nan=False)


class ChannelFields(BaseModel):
    """Editable fields of a distribution channel"""

    name: str = Field(..., min_length=1)
    reg_no: str = ""
    address: str = ""
    hotline: str = ""
    receipt_logo: Optional[str] = None


class ShopFields(BaseModel):
    name: str = Field(..., min_length=1)
    address: str = ""
    tp: str = ""
    dashboard_logo: Optional[str] = None
    receipt_logo: Optional[str] = None


F = TypeVar("F", bound=BaseModel)


@dataclass(frozen=True)
class Create(Generic[F]):
    """Add a new record"""

    fields: F


@dataclass(frozen=True)
class Update(Generic[F]):
    """Replace the editable fields of an existing record"""

    id: str
    fields: F


Command = Union[Create[F], Update[F]]


def describe_errors(error: PydanticValidationError) -> str:
    return "; ".join(f"{'.'.join(str(part) for part in e['loc'])}: {e['msg']}" for e in error.errors())


@contextmanager
def record_errors(label: str) -> Iterator[None]:
    """Translate pydantic errors raised while building a record into ValidationError"""
    try:
        yield
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid {label}: {describe_errors(e)}") from e


def parse_fields(schema: type, data: Union[BaseModel, dict]) -> BaseModel:
    """Validate raw field input, translating pydantic errors into ValidationError"""
    if isinstance(data, schema):
        return data
    with record_errors(schema.__name__):
        return schema.model_validate(data)
