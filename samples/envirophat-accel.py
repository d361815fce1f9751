import sys
import logging

from i2cbus import open_bus
from envirophat import Envirophat

if __name__ == '__main__':
    logging.basicConfig(level = logging.INFO)
    i2 = open_bus(sys.argv[1])

    d = Envirophat(i2)
    while True:
        print("x=%+.3f  y=%+.3f  z=%+.3f" % d.read())
