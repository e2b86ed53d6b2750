"""Shared response envelopes and the camelCase base model."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Serializes as camelCase; accepts either camelCase or snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ListMeta(CamelModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class ListResponse(CamelModel, Generic[T]):
    """``{data: [...], meta: {...}}`` list envelope."""

    data: list[T]
    meta: ListMeta

    @classmethod
    def build(cls, items: list, total: int, limit: int, offset: int) -> "ListResponse[T]":
        return cls(
            data=items,
            meta=ListMeta(
                total=total,
                limit=limit,
                offset=offset,
                has_more=offset + len(items) < total,
            ),
        )


class DataResponse(CamelModel, Generic[T]):
    """``{data: {...}}`` single-object envelope."""

    data: T
