"""
Driver for the TI HDC1000 series temperature and humidity sensor,
as on the Adafruit HDC1008 breakout
"""
import logging
import struct
import time
from collections import namedtuple

from i2cbus import I2CError, InitializationFailure

log = logging.getLogger(__name__)

HDC100xConfig = namedtuple("HDC100xConfig", "address settle")
HDC100xConfig.__new__.__defaults__ = (0x40, 0.065)

TEMPERATURE = 0x00
HUMIDITY = 0x01
CONFIGURATION = 0x02
SERIAL1 = 0xfb
SERIAL2 = 0xfc
SERIAL3 = 0xfd
MANUFACTURER_ID = 0xfe
DEVICE_ID = 0xff

CONFIG_RST = 1 << 15
CONFIG_HEAT = 1 << 13
CONFIG_MODE = 1 << 12
CONFIG_BATT = 1 << 11
CONFIG_TRES_14 = 0
CONFIG_TRES_11 = 1 << 10
CONFIG_HRES_14 = 0
CONFIG_HRES_11 = 1 << 8
CONFIG_HRES_8 = 1 << 9

def celsius(w):
    return (w / 65536.0) * 165.0 - 40.0

def fahrenheit(w):
    return celsius(w) * 1.8 + 32

def humidity(h):
    """ Relative humidity in percent """
    return (h / 65536.0) * 100.0

class HDC100x:
    """ HDC100x temperature and humidity sensor

    :param i2: bus handle, see :py:class:`i2cbus.I2CBus`
    :param config: an :py:class:`HDC100xConfig`

    Each measurement writes the register pointer, which starts a conversion,
    waits ``config.settle`` seconds and then reads the two result bytes.
    The part has no ready flag, so the wait is unconditional.
    """
    def __init__(self, i2, config = HDC100xConfig()):
        self.i2 = i2
        self.config = config
        self.a = config.address
        try:
            i2.write_byte(self.a, CONFIGURATION)
        except IOError as e:
            raise InitializationFailure("HDC100x at 0x%02x did not accept its configuration pointer" % self.a, [e]) from e

    def reg(self, r, settle = 0):
        self.i2.write_byte(self.a, r)
        if settle:
            time.sleep(settle)
        bb = self.i2.read_bytes(self.a, 2)
        if len(bb) != 2:
            raise I2CError("HDC100x at 0x%02x returned %d bytes, expected 2" % (self.a, len(bb)))
        return struct.unpack(">H", bytes(bb))[0]

    def celsius(self):
        """ Return the current temperature in Celsius """
        return celsius(self.reg(TEMPERATURE, self.config.settle))

    def temperature(self):
        """ Return the current temperature in Fahrenheit """
        w = self.reg(TEMPERATURE, self.config.settle)
        log.debug("HDC100x 0x%02x temperature raw 0x%04x", self.a, w)
        return fahrenheit(w)

    def humidity(self):
        """ Return the current relative humidity in percent """
        h = self.reg(HUMIDITY, self.config.settle)
        log.debug("HDC100x 0x%02x humidity raw 0x%04x", self.a, h)
        return humidity(h)

    def manufacturer_id(self):
        """ 0x5449 ("TI") on genuine parts """
        return self.reg(MANUFACTURER_ID)

    def device_id(self):
        return self.reg(DEVICE_ID)

    def serial_id(self):
        """ Return the 41-bit serial number held in SERIAL1..SERIAL3 """
        s1 = self.reg(SERIAL1)
        s2 = self.reg(SERIAL2)
        s3 = self.reg(SERIAL3)
        # SERIAL3 holds the low 9 bits in bits 15:7
        return (s1 << 25) | (s2 << 9) | (s3 >> 7)
