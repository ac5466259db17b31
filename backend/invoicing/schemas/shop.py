from pydantic import BaseModel, Field


class ShopCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    owner_name: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=255)
    zip_code: str | None = Field(default=None, max_length=20)
    mobile: str | None = Field(default=None, max_length=20)
    email: str | None = Field(default=None, max_length=255)
