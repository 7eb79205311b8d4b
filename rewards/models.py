from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict


class Account(BaseModel):
    phone: str
    points: int = 0

    model_config = ConfigDict(from_attributes=True)


class CreditRequest(BaseModel):
    amount: Decimal = Field(..., description="Purchase total, rounded to whole points")

    model_config = ConfigDict(json_schema_extra={
        "example": {"amount": 13.95}
    })


class DebitRequest(BaseModel):
    points: int = Field(..., description="Points to redeem, larger than 0")

    model_config = ConfigDict(json_schema_extra={
        "example": {"points": 5}
    })


class BalanceResponse(BaseModel):
    phone: str
    points: int
    is_new_customer: bool
    message: str


class TransactionResponse(BaseModel):
    account: Account
    points_changed: int
    message: str
