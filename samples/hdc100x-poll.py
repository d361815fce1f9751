"""
Poll the HDC100x temperature in the background while the main
thread prints the latest reading once a second.
"""

import sys
import time
import logging

from i2cbus import open_bus
from hdc100x import HDC100x
from poller import Poller

if __name__ == '__main__':
    logging.basicConfig(level = logging.INFO)
    i2 = open_bus(sys.argv[1])

    d = HDC100x(i2)
    with Poller(d.temperature) as p:
        while True:
            print("%.1f F" % p.latest())
            time.sleep(1)
