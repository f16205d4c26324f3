"""
Base class for engine agents.
"""

import logging
from typing import Any

from models.enums import AgentType, ErrorKind
from models.events import EngineEvent
from models.exceptions import ForecastEngineError
from utils.event_bus import EventBus

logger_base = logging.getLogger(__name__)


class BaseAgent:
    """Identity plus optional event publishing shared by engine agents"""

    def __init__(self, agent_id: str, agent_type: AgentType, event_bus: EventBus | None = None):
        self.agent_id = agent_id
        self.agent_type = agent_type
        self.event_bus = event_bus

    async def publish_event(self, event_type: str, payload: dict[str, Any]) -> None:
        """Publish an event to the event bus, if one is attached"""
        if self.event_bus is None:
            logger_base.debug(f"Agent {self.agent_id} has no event bus; dropping {event_type}")
            return

        event = EngineEvent(event_type=event_type, payload=payload, source=self.agent_type)
        await self.event_bus.publish(event)

    async def handle_exception(self, exception: Exception, context: dict[str, Any]) -> dict[str, Any]:
        """Log a failed operation and publish a failure event. Returns the error details."""
        error_details = {
            "error_type": type(exception).__name__,
            "error_message": str(exception),
            "context": context,
            "agent_id": self.agent_id,
        }
        message = f"Exception in {self.agent_type.value} agent ({self.agent_id}): {exception}"
        if isinstance(exception, ForecastEngineError):
            # Caller errors are expected outcomes, outages are not
            if exception.kind in (ErrorKind.NOT_FOUND, ErrorKind.INVALID_INPUT):
                logger_base.warning(message)
            else:
                logger_base.error(message)
        else:
            logger_base.error(message, exc_info=True)
        operation = context.get("operation", "system")
        await self.publish_event(f"{operation}.failed", {"error_details": error_details})
        return error_details
