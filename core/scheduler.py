import asyncio
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Awaitable, Callable, Optional
from zoneinfo import ZoneInfo

from tzlocal import get_localzone

from settings.config import settings
from utils.logger import get_logger

logger = get_logger("Scheduler")


def local_zone() -> tzinfo:
    """Configured TIMEZONE, else the host zone. Both follow DST changes."""
    if settings.TIMEZONE:
        return ZoneInfo(settings.TIMEZONE)
    return get_localzone()


def local_now() -> datetime:
    return datetime.now(local_zone())


def next_run_at(now: datetime, hour: int, minute: int = 0) -> datetime:
    """
    Next occurrence of hour:minute strictly after ``now``, on now's wall clock.
    The UTC offset is the one in force at that time when ``now`` carries a zone.
    """
    candidate = now.replace(hour=hour, minute=minute, second=0, microsecond=0, fold=0)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


class DailyJobScheduler:
    """
    Runs an async job once a day at a fixed local time.

    A failing run is logged and the loop waits for the next occurrence;
    nothing is retried within the same tick.
    """

    def __init__(
        self,
        job: Callable[[], Awaitable],
        hour: int = 1,
        minute: int = 0,
        clock: Callable[[], datetime] = local_now,
        name: str = "daily-job",
    ):
        self.job = job
        self.hour = hour
        self.minute = minute
        self.clock = clock
        self.name = name
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def seconds_until_next_run(self) -> float:
        now = self.clock()
        # aware datetimes sharing a tzinfo subtract as wall clock; compare in UTC
        due = next_run_at(now, self.hour, self.minute).astimezone(timezone.utc)
        return max((due - now.astimezone(timezone.utc)).total_seconds(), 0.0)

    async def run_once(self):
        logger.info(f"Starting scheduled job {self.name}")
        try:
            return await self.job()
        except Exception:
            logger.exception(f"Scheduled job {self.name} failed")
            return None

    async def _loop(self):
        while True:
            delay = self.seconds_until_next_run()
            logger.debug(f"{self.name}: next run in {delay:.0f}s")
            await asyncio.sleep(delay)
            await self.run_once()

    def start(self):
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name=self.name)
        logger.info(f"Job {self.name} scheduled daily at {self.hour:02d}:{self.minute:02d}")

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info(f"Job {self.name} stopped")
