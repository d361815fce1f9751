"""
I2C bus capability and adapters for the sensor drivers
"""
import logging
import struct
import time

import serial
from smbus2 import SMBus, i2c_msg

__version__ = '1.0.0'

log = logging.getLogger(__name__)

class I2CError(IOError):
    """ A bus transaction failed """
    pass

class I2CTimeout(I2CError):
    pass

class I2CNack(I2CError):
    pass

class InitializationFailure(I2CError):
    """
    A driver could not write its configuration.

    :ivar errors: every exception raised during the write sequence, in order
    """
    def __init__(self, msg, errors = ()):
        I2CError.__init__(self, msg)
        self.errors = list(errors)

class I2CBus:
    """
    The bus capability consumed by the drivers.

    Drivers only call these four operations, so any object providing them
    can stand in for a real bus. Every operation raises :py:class:`I2CError`
    on failure.
    """

    def write_byte(self, dev, value):
        """ Write one byte to the device's current register pointer """
        raise NotImplementedError

    def write_byte_to_register(self, dev, reg, value):
        """ Write one byte to register reg """
        raise NotImplementedError

    def read_byte_from_register(self, dev, reg):
        """ Read one byte from register reg """
        raise NotImplementedError

    def read_bytes(self, dev, n):
        """ Read n bytes following the last addressed register """
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

class I2CDriverBus(I2CBus):
    """
    A connected I2CDriver USB adapter.

    :param port: The USB port to connect to
    :type port: str
    :param reset: Issue an I2C bus reset on connection
    :type reset: bool
    """
    def __init__(self, port = "/dev/ttyUSB0", reset = True):
        self.ser = serial.Serial(port, 1000000, timeout = 1)

        # May be in capture or monitor mode, send char and wait for 50 ms
        self.ser.write(b'@')
        time.sleep(.050)

        # May be waiting up to 64 bytes of input (command code 0xff)
        self.ser.write(b'@' * 64)
        self.ser.flush()

        while self.ser.inWaiting():
            self.ser.read(self.ser.inWaiting())

        for c in [0x55, 0x00, 0xff, 0xaa]:
            r = self.__echo(c)
            if r != c:
                raise I2CError('Echo test failed on %s - not attached? expected %r but received %r' % (port, c, r))
        if reset and self.reset() != 3:
            raise I2CTimeout("Bus failed to reset - check connected devices")
        self.setspeed(100)
        log.info("I2CDriver connected on %s", port)

    def __ser_w(self, s):
        if isinstance(s, list) or isinstance(s, tuple):
            s = bytes(s)
        self.ser.write(s)

    def __ser_r(self, n):
        r = self.ser.read(n)
        if len(r) != n:
            raise I2CTimeout("Expected %d bytes from adapter, received %d" % (n, len(r)))
        return r

    def __echo(self, c):
        self.__ser_w([ord('e'), c])
        r = self.ser.read(1)
        if not r:
            return None
        return r[0]

    def setspeed(self, s):
        """
        Set the I2C bus speed.

        :param s: speed in KHz, either 100 or 400
        :type s: int
        """
        assert s in (100, 400)
        self.__ser_w({100:b'1', 400:b'4'}[s])
        self.speed = s

    def reset(self):
        """ Send an I2C bus reset, return the SDA/SCL state bits """
        self.__ser_w(b'x')
        return struct.unpack("B", self.__ser_r(1))[0] & 3

    def start(self, dev, rw):
        """
        Start an I2C transaction

        :param dev: 7-bit I2C device address
        :param rw: read (1) or write (0)
        """
        self.__ser_w([ord('s'), (dev << 1) | rw])
        if not self.ack():
            self.stop()
            raise I2CNack("No device acknowledged address 0x%02x" % dev)

    def ack(self):
        a = self.__ser_r(1)[0]
        if a & 2:
            raise I2CTimeout("Adapter reported a bus timeout")
        return (a & 1) != 0

    def read(self, l):
        """ Read l bytes from the I2C device, and NAK the last byte """
        assert 0 < l <= 64
        self.__ser_w([0x80 + l - 1])
        return self.__ser_r(l)

    def write(self, bb):
        """
        Write up to 64 bytes to the selected I2C device

        :param bb: sequence to write
        """
        assert 0 < len(bb) <= 64
        self.__ser_w([0xc0 + len(bb) - 1])
        self.__ser_w(bb)
        if not self.ack():
            self.stop()
            raise I2CNack("Device NACKed a data byte")

    def stop(self):
        """ stop the i2c transaction """
        self.ser.write(b'p')

    def write_byte(self, dev, value):
        self.start(dev, 0)
        self.write(struct.pack("B", value))
        self.stop()

    def write_byte_to_register(self, dev, reg, value):
        """
        To set device 0x34 byte register 7 to 0xA1:

        >>> i2c.write_byte_to_register(0x34, 7, 0xa1)
        """
        self.start(dev, 0)
        self.write(struct.pack("BB", reg, value))
        self.stop()

    def read_byte_from_register(self, dev, reg):
        # not the one-shot 'r' command: it reports no ACK status
        self.start(dev, 0)
        self.write(struct.pack("B", reg))
        self.start(dev, 1)
        r = self.read(1)
        self.stop()
        return r[0]

    def read_bytes(self, dev, n):
        self.start(dev, 1)
        r = self.read(n)
        self.stop()
        return r

    def close(self):
        self.ser.close()

    def __repr__(self):
        return "<I2CDriverBus port=%s speed=%d>" % (self.ser.port, self.speed)

class SMBusBus(I2CBus):
    """
    A Linux i2c-dev bus, e.g. the Raspberry Pi header on bus 1.

    :param bus: bus number, as in /dev/i2c-N
    """
    def __init__(self, bus = 1):
        self.bus = bus
        self.smbus = SMBus(bus)
        log.info("Opened /dev/i2c-%d", bus)

    def _call(self, fn, *args):
        try:
            return fn(*args)
        except OSError as e:
            raise I2CError("i2c-%d: %s" % (self.bus, e)) from e

    def write_byte(self, dev, value):
        self._call(self.smbus.write_byte, dev, value)

    def write_byte_to_register(self, dev, reg, value):
        self._call(self.smbus.write_byte_data, dev, reg, value)

    def read_byte_from_register(self, dev, reg):
        return self._call(self.smbus.read_byte_data, dev, reg)

    def read_bytes(self, dev, n):
        msg = i2c_msg.read(dev, n)
        self._call(self.smbus.i2c_rdwr, msg)
        return bytes(list(msg))

    def close(self):
        self.smbus.close()

    def __repr__(self):
        return "<SMBusBus /dev/i2c-%d>" % self.bus

def open_bus(name):
    """
    Open a bus from a command-line argument: a bus number such as ``1``
    opens i2c-dev, anything else is taken as an I2CDriver serial port.
    """
    if name.isdigit():
        return SMBusBus(int(name))
    return I2CDriverBus(name)
