from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class EntryDescriptor(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    is_folder: bool = Field(alias='isFolder')
    size: Optional[int] = Field(default=None, ge=0)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ApiResponse(BaseModel):
    ok: bool
    message: str
    data: Optional[Any] = None
