from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


def _not_blank(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    code: Optional[str] = None
    price: float = Field(..., ge=0)
    status: bool = True
    stock: int = Field(..., ge=0)
    category: str = Field(..., min_length=1)
    thumbnails: List[str] = []

    @field_validator("title", "description", "category")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _not_blank(v)

    @model_validator(mode="after")
    def no_identifier(self):
        if self.model_extra and ({"id", "_id"} & set(self.model_extra)):
            raise ValueError("identifier is assigned by the store")
        return self


class ProductUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    code: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    status: Optional[bool] = None
    stock: Optional[int] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, min_length=1)
    thumbnails: Optional[List[str]] = None

    @field_validator("title", "description", "category")
    @classmethod
    def not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v)

    @model_validator(mode="after")
    def check_patch(self):
        if self.model_extra and ({"id", "_id"} & set(self.model_extra)):
            raise ValueError("identifier cannot be modified")
        if not self.changes():
            raise ValueError("no fields to update")
        return self

    def changes(self) -> dict[str, Any]:
        # unset and null fields are not patched
        data = self.model_dump(exclude_unset=True, exclude_none=True)
        data.update({k: v for k, v in (self.model_extra or {}).items() if v is not None})
        return data


# skip() is encoded as a signed 64-bit int
MAX_SKIP = 2**63 - 1


class PageRequest(BaseModel):
    limit: int = Field(default=10, ge=1)
    page: int = Field(default=1, ge=1)
    sort: Optional[SortOrder] = None

    @model_validator(mode="after")
    def skip_in_range(self):
        if (self.page - 1) * self.limit > MAX_SKIP:
            raise ValueError("page is out of range")
        return self


class ProductPage(BaseModel):
    status: str = "success"
    payload: List[dict[str, Any]]
    totalDocs: int
    limit: int
    totalPages: int
    page: int
    hasPrevPage: bool
    hasNextPage: bool
    prevPage: Optional[int] = None
    nextPage: Optional[int] = None
    prevLink: Optional[str] = None
    nextLink: Optional[str] = None


class SessionUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str = "user"


class MessageResponse(BaseModel):
    message: str
    product: Optional[dict[str, Any]] = None


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None
