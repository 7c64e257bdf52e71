from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, model_validator


class RateTableEntry(BaseModel):
    """One top-up tier: `topup_unit` Rb awards `credit_value` TIZO."""

    model_config = ConfigDict(frozen=True)

    topup_unit: int = Field(..., gt=0, strict=True)
    credit_value: int = Field(..., ge=0, strict=True)

    @model_validator(mode="after")
    def bonus_only(self) -> "RateTableEntry":
        if self.credit_value < self.topup_unit:
            raise ValueError(
                f"tier {self.topup_unit} Rb awards {self.credit_value} TIZO; "
                "tiers must award at least 1 TIZO per Rb"
            )
        return self

    @classmethod
    def from_row(cls, row) -> "RateTableEntry":  # type: ignore[no-untyped-def]
        return cls(topup_unit=row["topup_rb"], credit_value=row["tizo_value"])

    def as_row(self) -> dict:
        return {"topup_rb": self.topup_unit, "tizo_value": self.credit_value}
