"""Bounded-retry wrapper around every call to the backing store."""

import asyncio
from typing import Awaitable, Callable, TypeVar

import logfire
from sqlalchemy import exc as sa_exc

from pavilion.config import StoreSettings
from pavilion.domain.error import ServiceUnavailableError
from pavilion.persistence.error import TransientStoreError

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]

_TRANSIENT_TYPES: tuple[type[BaseException], ...] = (
    TransientStoreError,
    sa_exc.OperationalError,
    sa_exc.InterfaceError,
    sa_exc.DisconnectionError,
    sa_exc.TimeoutError,  # Pool checkout timeout
    ConnectionError,
    TimeoutError,  # Also asyncio.TimeoutError on 3.11+
)


def is_transient(error: BaseException) -> bool:
    """Classify a store failure as retryable.

    Connection resets, timeouts and temporary unavailability are transient.
    Constraint violations, malformed queries and anything raised by the
    domain are terminal.
    """
    if isinstance(error, _TRANSIENT_TYPES):
        return True
    if isinstance(error, sa_exc.DBAPIError) and error.connection_invalidated:
        return True
    return False


class StoreGateway:
    """Runs store operations with bounded retry and exponential backoff.

    This is the single choke point between services and repositories.
    Exhausting the retry budget raises ServiceUnavailableError, which is
    never a client error.
    """

    def __init__(self, settings: StoreSettings, sleep: Sleep | None = None) -> None:
        """Initialize the gateway.

        Args:
            settings: Retry policy
            sleep: Awaitable used between attempts, replaceable in tests
        """
        if settings.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.settings = settings
        self._sleep = sleep or asyncio.sleep

    def backoff(self, attempt: int) -> float:
        """Delay before the retry that follows ``attempt`` (1-based)."""
        delay = self.settings.base_delay_seconds * 2 ** (attempt - 1)
        return min(delay, self.settings.max_delay_seconds)

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        name: str,
        retry: bool = True,
    ) -> T:
        """Execute a store operation.

        A transient failure on a conditional write may arrive after its
        commit, so such writes pass ``retry=False``: a second attempt could
        consume another use or miss the row the first attempt changed.

        Args:
            operation: Zero-argument factory producing a fresh awaitable per
                attempt
            name: Operation name for telemetry
            retry: Whether transient failures may be retried

        Returns:
            The operation's result

        Raises:
            ServiceUnavailableError: If every attempt failed transiently
            Exception: Any terminal error, unchanged and without retry
        """
        max_attempts = self.settings.max_attempts if retry else 1
        for attempt in range(1, max_attempts + 1):
            try:
                return await asyncio.wait_for(
                    operation(), timeout=self.settings.attempt_timeout_seconds
                )
            except Exception as e:
                if not is_transient(e):
                    raise

                if attempt == max_attempts:
                    logfire.error(
                        "Store operation exhausted retries",
                        operation=name,
                        attempts=attempt,
                        error=repr(e),
                    )
                    raise ServiceUnavailableError(name, attempt) from e

                delay = self.backoff(attempt)
                logfire.warn(
                    "Transient store failure, retrying",
                    operation=name,
                    attempt=attempt,
                    delay=delay,
                    error=repr(e),
                )
                await self._sleep(delay)

        # Unreachable: the loop either returns or raises
        raise ServiceUnavailableError(name, max_attempts)
