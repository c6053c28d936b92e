import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)


class Poller:
    """
    Calls ``callback`` every ``interval`` seconds on a background scheduler
    until stopped. Each call is an independent idempotent fetch, so at most
    one runs at a time and late runs are coalesced. Stopping does not
    interrupt a call already in flight.
    """

    def __init__(self, callback, interval, name="poller"):
        self.callback = callback
        self.interval = interval
        self.name = name
        self.scheduler = None

    @property
    def running(self):
        return self.scheduler is not None and self.scheduler.running

    def start(self):
        if self.running:
            return
        self.scheduler = BackgroundScheduler(daemon=True)
        self.scheduler.add_job(
            self._tick,
            trigger=IntervalTrigger(seconds=self.interval),
            id=self.name,
            name=self.name,
            coalesce=True,
            max_instances=1,
            replace_existing=True,
        )
        self.scheduler.start()
        logger.debug("%s started, every %ss", self.name, self.interval)

    def stop(self):
        if self.running:
            self.scheduler.shutdown(wait=False)
            logger.debug("%s stopped", self.name)

    def _tick(self):
        try:
            self.callback()
        except Exception:
            logger.exception("%s tick failed", self.name)
