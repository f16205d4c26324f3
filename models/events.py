"""
Data models for events published by the forecasting engine.
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .enums import AgentType


class EngineEvent(BaseModel):
    """Notification emitted after a forecast, price recommendation or price change."""

    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    event_type: str
    payload: dict[str, Any]
    source: AgentType
    timestamp: datetime = Field(default_factory=datetime.now)
