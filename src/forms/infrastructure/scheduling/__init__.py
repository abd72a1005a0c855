from .asyncio_timer import AsyncioIntervalTimer, AsyncioTimerFactory

__all__ = ["AsyncioIntervalTimer", "AsyncioTimerFactory"]
