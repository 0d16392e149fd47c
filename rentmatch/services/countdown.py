# rentmatch/services/countdown.py
import logging
import threading

from .timestamps import normalize, resolve_now

logger = logging.getLogger(__name__)


def format_time_remaining(next_available_at, now=None):
    """
    Short label for the landlord's cooldown: "5h 12m", "12m 30s" or "30s".
    Empty string once the slot is open (or when there is no cooldown).
    """
    if next_available_at is None:
        return ''
    diff = int((normalize(next_available_at) - resolve_now(now)).total_seconds())
    if diff <= 0:
        return ''
    hours, rest = divmod(diff, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


class CountdownTicker:
    """
    Calls ``callback`` every ``interval`` seconds on a daemon thread.

    The callback is expected to recompute from absolute timestamps on every
    tick, e.g. ``lambda: render(countdown_until(deactivation_at))``. Use it as a
    context manager so the timer is always stopped when the view goes away::

        with CountdownTicker(refresh):
            ...
    """

    def __init__(self, callback, interval=1.0):
        self.callback = callback
        self.interval = interval
        self._stopped = threading.Event()
        self._thread = None

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            if not self._stopped.is_set():
                return self
            # a stop() timed out mid-tick; the old thread must exit before a new one runs
            self._thread.join()
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name='countdown-ticker', daemon=True)
        self._thread.start()
        return self

    def stop(self, timeout=None):
        """Stops ticking. The thread is only forgotten once it has exited."""
        self._stopped.set()
        thread = self._thread
        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join(timeout)
        if not thread.is_alive():
            self._thread = None

    def _run(self):
        # first tick immediately, then once per interval
        while not self._stopped.is_set():
            try:
                self.callback()
            except Exception:
                logger.exception('Countdown tick failed; stopping ticker')
                self._stopped.set()
                break
            self._stopped.wait(self.interval)

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False
