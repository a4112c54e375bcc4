# MIT License
# Copyright (c) 2025 Hashborn

from pydantic import BaseModel, Field

class VestingSchedule(BaseModel):
    """VestingInfo: `locked` releases linearly at `per_block` from `starting_block`."""
    locked: int = Field(..., ge=0)
    per_block: int = Field(..., gt=0)
    starting_block: int = Field(..., ge=0)
