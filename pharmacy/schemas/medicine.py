from pydantic import BaseModel, ConfigDict, Field


class MedicineBase(BaseModel):
    name: str = ""
    manufacturer: str = ""
    price: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    stock: int = 0

    # No coercion: "1.5", true or 3.0 are not values of these fields.
    model_config = ConfigDict(strict=True)


class MedicineIn(MedicineBase):
    # Accepted for compatibility with clients that echo records back; the
    # store always assigns or forces the id.
    id: int | None = None


class Medicine(MedicineBase):
    id: int
