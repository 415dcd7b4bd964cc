"""Pydantic schemas for platform table management."""

from typing import Any, Literal, Optional

from libs.common.models import WireModel
from pydantic import Field

ColumnType = Literal["string", "number", "boolean", "json", "datetime"]


class TableColumn(WireModel):
    name: str
    type: ColumnType
    required: bool = False
    unique: bool = False
    default: Optional[Any] = None


class TableSchema(WireModel):
    columns: list[TableColumn] = Field(default_factory=list)


class TableInfo(WireModel):
    name: str
    columns: list[TableColumn] = Field(default_factory=list)
    row_count: int = 0
    created_at: Optional[str] = Field(None, alias="createdAt")
