from __future__ import annotations

import typing as t
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Document:
    name: str
    content: str

    def with_content(self, content: str) -> "Document":
        return Document(name=self.name, content=content)


class OptimizationStats(BaseModel):
    """Before/after byte sizes of one optimizer run."""

    model_config = ConfigDict(frozen=True)

    original_size: int = Field(..., ge=0, description="UTF-8 size of the input RTF")
    optimized_size: int = Field(..., ge=0, description="UTF-8 size of the optimized RTF")
    reduction_percent: float = Field(..., description="Saved share of original_size, 2 decimals")


@dataclass(frozen=True)
class ConversionResult:
    rtf: str
    document_count: int
    duplicates_removed: int = 0
    stats: t.Optional[OptimizationStats] = None
