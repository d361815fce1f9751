import sys
import time
import logging

from i2cbus import open_bus
from hdc100x import HDC100x

if __name__ == '__main__':
    logging.basicConfig(level = logging.INFO)
    i2 = open_bus(sys.argv[1])

    d = HDC100x(i2)
    print("manufacturer %04x  device %04x" % (d.manufacturer_id(), d.device_id()))
    for i in range(20):
        sys.stdout.write("%.1f F  %.1f %%RH\n" % (d.temperature(), d.humidity()))
        time.sleep(.1)
