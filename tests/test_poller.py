import threading
import time
import unittest

from i2cbus import I2CError
from poller import Poller

class Source:
    """ Hands out 1, 2, 3, ...; raises whatever is queued in errors first """
    def __init__(self):
        self.n = 0
        self.errors = []
        self.called = threading.Event()

    def __call__(self):
        self.called.set()
        if self.errors:
            raise self.errors.pop(0)
        self.n += 1
        return float(self.n)

class TestPoller(unittest.TestCase):
    def test_latest_blocks_for_first_sample(self):
        src = Source()
        with Poller(src, interval = 0.01) as p:
            s = p.latest(timeout = 5)
        self.assertIsNotNone(s)
        self.assertGreaterEqual(s, 1.0)

    def test_latest_is_newest(self):
        src = Source()
        p = Poller(src, interval = 0.001).start()
        first = p.latest(timeout = 5)
        while src.n < first + 3:
            src.called.wait(5)
            src.called.clear()
        p.close()
        self.assertEqual(p.latest(), float(src.n))

    def test_timeout_without_sample(self):
        p = Poller(lambda: None)
        self.assertIsNone(p.latest(timeout = 0.01))

    def test_error_keeps_polling(self):
        src = Source()
        err = I2CError("NACK")
        src.errors.append(err)
        with Poller(src, interval = 0.001) as p:
            self.assertGreaterEqual(p.latest(timeout = 5), 1.0)
        self.assertIs(p.last_error, err)

    def test_unexpected_error_stops_worker(self):
        err = ValueError("unpack requires a buffer of 2 bytes")
        def bad():
            raise err
        p = Poller(bad, interval = 0.01).start()
        t0 = time.time()
        self.assertIsNone(p.latest(timeout = 5))
        self.assertLess(time.time() - t0, 1)
        self.assertIs(p.last_error, err)
        # no timeout: must still return once the worker is gone
        self.assertIsNone(p.latest())
        p.close()

    def test_close_releases_waiters(self):
        src = Source()
        src.errors = [I2CError("down")] * 1000
        p = Poller(src, interval = 0.001).start()
        src.called.wait(5)
        t = threading.Timer(0.05, p.close)
        t.start()
        self.assertIsNone(p.latest(timeout = 5))
        t.join()

if __name__ == '__main__':
    unittest.main()
