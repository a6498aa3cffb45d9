"""Request model describing one integration call."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class IntegrationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    expression: str = Field(min_length=1, description="Expression of the free variable t, e.g. 100 + 20*t")
    t1: float = Field(description="Lower integration bound")
    t2: float = Field(description="Upper integration bound, must be greater than t1")
    steps: Optional[int] = Field(default=1000, description="Number of subintervals (max steps in adaptive mode)")
    use_adaptive: bool = Field(default=False, alias="useAdaptive", description="Use adaptive refinement")
