"""Shared schema building blocks."""

from datetime import date, datetime
from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, create_model, field_validator
from pydantic.alias_generators import to_camel

PHONE_PATTERN = r"^[0-9]{10}$"
PINCODE_PATTERN = r"^[0-9]{6}$"
TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"

Gender = Literal["male", "female", "other"]
Quality = Literal["excellent", "good", "fair", "poor"]
WasteType = Literal["wet", "dry", "hazardous", "mixed"]
ViolationType = Literal["non_segregation", "illegal_dumping", "missed_collection", "other"]
PaymentMethod = Literal["cash", "online", "upi", "card"]
PenaltyStatus = Literal["pending", "paid", "waived"]


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case keys; unknown keys are dropped."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_document(self, *, exclude_unset: bool = False) -> dict[str, Any]:
        """camelCase, JSON-safe dict for the document store (None values dropped).

        With exclude_unset only top-level fields the client sent are kept;
        a nested model that was sent is written whole, defaults included,
        because the store replaces top-level fields on update.
        """
        include = set(self.model_fields_set) if exclude_unset else None
        return self.model_dump(by_alias=True, exclude_none=True, include=include, mode="json")


def partial_model(model: type[CamelModel]) -> type[CamelModel]:
    """All-optional copy of model for partial updates; field constraints are kept."""
    fields: dict[str, Any] = {}
    for name, info in model.model_fields.items():
        annotation: Any = info.annotation
        if info.metadata:
            annotation = Annotated[(annotation, *info.metadata)]
        fields[name] = (Optional[annotation], None)
    return create_model(f"{model.__name__}Update", __base__=CamelModel, **fields)


class Address(CamelModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    pincode: str = Field(..., pattern=PINCODE_PATTERN)
    state: str = Field(..., min_length=1)
    ward: str | None = None


class GeoLocation(CamelModel):
    lat: float
    lng: float
    address: str | None = None


class PenaltyHistoryEntry(CamelModel):
    """One penalty as mirrored on the penalised citizen or generator."""

    penalty_id: str = Field(..., min_length=1)
    violation_type: ViolationType
    amount: float = Field(..., ge=0)
    date: datetime
    status: PenaltyStatus = "pending"
    paid_at: datetime | None = None


class PersonalInfo(CamelModel):
    name: str = Field(..., min_length=2, max_length=50)
    phone: str = Field(..., pattern=PHONE_PATTERN)
    date_of_birth: date
    gender: Gender

    @field_validator("date_of_birth")
    @classmethod
    def _not_in_future(cls, v: date) -> date:
        if v > date.today():
            raise ValueError("date_of_birth cannot be in the future")
        return v
