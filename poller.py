"""
Background polling of a sensor read into a single-slot cache
"""
import logging
import threading

log = logging.getLogger(__name__)

class Poller:
    """
    Call ``read`` every ``interval`` seconds on a worker thread and keep
    the newest result.

    :param read: zero-argument callable, e.g. ``HDC100x(i2).temperature``
    :param interval: seconds between reads

    The worker owns the bus while it runs: nothing else may use the same bus
    until :py:meth:`close` returns. A bus error is logged and polling goes
    on; any other exception stops the worker and ends :py:meth:`latest` waits.

    >>> with Poller(sensor.humidity) as p:
    ...     print(p.latest())
    """
    def __init__(self, read, interval = 0.25):
        self.read = read
        self.interval = interval
        self.last_error = None
        self._sample = None
        self._cond = threading.Condition()
        self._quit = threading.Event()
        self._thread = None

    def start(self):
        assert self._thread is None, "already started"
        self._quit.clear()
        self._thread = threading.Thread(target = self._run, name = "poller", daemon = True)
        self._thread.start()
        log.debug("Polling %r every %.3fs", self.read, self.interval)
        return self

    def _run(self):
        try:
            while not self._quit.is_set():
                try:
                    s = self.read()
                except IOError as e:
                    log.warning("Poll of %r failed: %s", self.read, e)
                    with self._cond:
                        self.last_error = e
                except Exception as e:
                    log.exception("Poll of %r raised, stopping", self.read)
                    with self._cond:
                        self.last_error = e
                    break
                else:
                    with self._cond:
                        self._sample = s
                        self._cond.notify_all()
                self._quit.wait(self.interval)
        finally:
            # waiters in latest() must see the stop
            with self._cond:
                self._quit.set()
                self._cond.notify_all()

    def latest(self, timeout = None):
        """
        Return the most recent sample, waiting for the first one if needed.
        Returns None if ``timeout`` seconds pass or the poller stops first.
        """
        with self._cond:
            self._cond.wait_for(lambda: self._sample is not None or self._quit.is_set(), timeout)
            return self._sample

    def close(self):
        self._quit.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        log.debug("Stopped polling %r", self.read)

    def __enter__(self):
        return self.start()

    def __exit__(self, *exc):
        self.close()
