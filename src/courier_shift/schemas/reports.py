"""Shift history API schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AttendanceHistoryModel(BaseModel):
  model_config = ConfigDict(populate_by_name=True)

  day: date = Field(..., alias='date')
  status: str
  check_in: Optional[datetime] = Field(None, alias='checkIn')
  check_out: Optional[datetime] = Field(None, alias='checkOut')
  total_packages: int = Field(0, alias='totalPackages')
  delivered: int = 0
  returned: int = 0
  cod_collected: int = Field(0, alias='codCollected')
  success_rate: float = Field(0.0, alias='successRate')
