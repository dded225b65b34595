"""Hourly featured content refresh."""
from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timezone

logger = logging.getLogger("videoclub.scheduler")

HOUR_SECONDS = 3600


def seconds_until_next_hour(now):
    remaining = HOUR_SECONDS - (now % HOUR_SECONDS)
    return remaining if remaining > 0 else HOUR_SECONDS


def _iso(ts):
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, timezone.utc).isoformat()


class ManualTrigger:
    """No periodic runs; refreshes happen only through run_now()."""

    mode = "manual"

    def start(self, callback):
        logger.info("Featured content scheduler in manual mode; no periodic refresh")

    def stop(self):
        pass

    @property
    def next_run(self):
        return None


class ThreadTimerTrigger:
    """Calls back at every top of the hour from a daemon thread."""

    mode = "timer"

    def __init__(self, clock=time.time):
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread = None
        self._next_run = None

    def start(self, callback):
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop, args=(callback,), daemon=True, name="featured-refresh"
        )
        self._thread.start()
        logger.info("Featured content refresh scheduled hourly")

    def stop(self):
        self._stop_event.set()

    @property
    def next_run(self):
        return self._next_run

    def _loop(self, callback):
        while True:
            now = self._clock()
            delay = seconds_until_next_hour(now)
            self._next_run = now + delay
            if self._stop_event.wait(timeout=delay):
                break
            try:
                callback()
            except Exception as e:
                logger.error("Scheduled featured content refresh failed: %s", e)
        self._next_run = None


def select_trigger(mode="auto", clock=time.time):
    mode = (mode or "auto").strip().lower()
    if mode == "manual":
        return ManualTrigger()
    if mode not in ("auto", "timer"):
        logger.warning("Unknown scheduler mode %r; falling back to manual refresh", mode)
        return ManualTrigger()
    return ThreadTimerTrigger(clock=clock)


class CacheScheduler:
    def __init__(self, refresh, trigger=None, *, clock=time.time):
        self._refresh = refresh
        self.trigger = trigger if trigger is not None else ManualTrigger()
        self._clock = clock
        self._lock = threading.Lock()
        self._initialized = False
        self.last_run_at = None
        self.last_summary = None

    @property
    def initialized(self):
        return self._initialized

    def initialize(self):
        """Start periodic refreshes once. Returns False when already started."""
        with self._lock:
            if self._initialized:
                logger.debug("Featured content scheduler already initialized")
                return False
            try:
                self.trigger.start(self._run_scheduled)
            except Exception as e:
                logger.warning("Could not start %s trigger (%s); manual refresh only", self.trigger.mode, e)
                self.trigger = ManualTrigger()
            self._initialized = True
            return True

    def _run_scheduled(self):
        logger.info("Running scheduled featured content refresh")
        self.run_now()

    def run_now(self):
        summary = self._refresh()
        self.last_run_at = self._clock()
        self.last_summary = summary
        return summary

    def status(self):
        return {
            "initialized": self._initialized,
            "mode": self.trigger.mode,
            "next_run": _iso(self.trigger.next_run),
            "last_run_at": _iso(self.last_run_at),
            "last_summary": self.last_summary,
        }

    def shutdown(self):
        self.trigger.stop()
