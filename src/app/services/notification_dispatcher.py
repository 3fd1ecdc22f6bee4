import asyncio
import logging
from abc import ABC, abstractmethod

from src.domain import errors
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class INotificationDispatcher(ABC):
    """Outbound notification transport interface - application layer"""

    @abstractmethod
    async def send(self, destination: str, subject: str, body: str) -> Result[None]:
        """
        Deliver one message.

        Returns:
            Return.ok(None) when the transport accepted the message,
            Return.err(Error("DISPATCH_FAILED", ...)) otherwise
        """
        pass


async def send_with_timeout(
    dispatcher: INotificationDispatcher,
    destination: str,
    subject: str,
    body: str,
    timeout: float,
) -> Result[None]:
    """
    Send through a dispatcher, turning hangs and crashes into DISPATCH_FAILED.

    Args:
        dispatcher: Transport to use
        destination: Recipient address
        subject: Message subject
        body: Message body (HTML)
        timeout: Seconds before the attempt counts as failed

    Returns:
        Result of the attempt, never raises for transport problems
    """
    try:
        return await asyncio.wait_for(
            dispatcher.send(destination, subject, body), timeout=timeout
        )
    except asyncio.TimeoutError:
        logger.warning(f"Dispatch to {destination} timed out after {timeout}s")
        return Return.err(
            Error(errors.DISPATCH_FAILED, f"Dispatch timed out after {timeout}s")
        )
    except Exception as exc:
        logger.exception(f"Dispatcher crashed while sending to {destination}")
        return Return.err(Error(errors.DISPATCH_FAILED, str(exc) or type(exc).__name__))
