"""
Driver for the accelerometer on the Pimoroni Enviro pHAT

The part is an ST LSM303D; register details are on pages 22-29 of
http://www.st.com/resource/en/datasheet/lsm303d.pdf
"""
import logging
import struct
from collections import namedtuple

from i2cbus import InitializationFailure

log = logging.getLogger(__name__)

AccelConfig = namedtuple("AccelConfig", "address scale resolution")
AccelConfig.__new__.__defaults__ = (0x1d, 2, 16)

CTRL_REG1 = 0x20
CTRL_REG2 = 0x21
CTRL_REG3 = 0x22
CTRL_REG4 = 0x23
CTRL_REG5 = 0x24
CTRL_REG6 = 0x25
CTRL_REG7 = 0x26

OUT_X_L_A = 0x28
OUT_X_H_A = 0x29
OUT_Y_L_A = 0x2a
OUT_Y_H_A = 0x2b
OUT_Z_L_A = 0x2c
OUT_Z_H_A = 0x2d

MAG_SCALE_2 = 0x00      # +/- 2 gauss
MAG_SCALE_4 = 0x20
MAG_SCALE_8 = 0x40
MAG_SCALE_12 = 0x60

INIT_SEQUENCE = (
    (CTRL_REG1, 0x57),                  # 50 Hz, X,Y,Z enabled
    (CTRL_REG2, (3 << 6) | (0 << 3)),   # full scale +/- 2g
    (CTRL_REG3, 0x00),                  # no interrupt
    (CTRL_REG4, 0x00),                  # no interrupt
    (CTRL_REG5, 4 << 2),                # mag 50 Hz
    (CTRL_REG6, MAG_SCALE_2),
    (CTRL_REG7, 0x00),                  # continuous conversion
)

AXES = (
    (OUT_X_H_A, OUT_X_L_A),
    (OUT_Y_H_A, OUT_Y_L_A),
    (OUT_Z_H_A, OUT_Z_L_A),
)

def axis(raw, scale = 2, resolution = 16):
    """ Convert a signed axis reading to g """
    return raw / float(2 ** (resolution - 1)) * scale

class Envirophat:
    """ Enviro pHAT LSM303D accelerometer

    :param i2: bus handle, see :py:class:`i2cbus.I2CBus`
    :param config: an :py:class:`AccelConfig`

    Construction writes the seven control registers in INIT_SEQUENCE.
    Every write is attempted; if any fail, :py:class:`InitializationFailure`
    is raised listing all the errors.
    """
    def __init__(self, i2, config = AccelConfig()):
        self.i2 = i2
        self.config = config
        self.a = config.address

        errors = []
        for (reg, v) in INIT_SEQUENCE:
            try:
                i2.write_byte_to_register(self.a, reg, v)
            except IOError as e:
                log.debug("LSM303D 0x%02x: write 0x%02x to 0x%02x failed: %s", self.a, v, reg, e)
                errors.append(e)
        if errors:
            raise InitializationFailure(
                "LSM303D at 0x%02x: %d of %d configuration writes failed" % (self.a, len(errors), len(INIT_SEQUENCE)),
                errors) from errors[0]
        log.debug("LSM303D 0x%02x configured", self.a)

    def raw(self):
        """ Return the signed 16-bit (x,y,z) readings """
        r = []
        # high byte first, one register at a time
        for (h, l) in AXES:
            hi = self.i2.read_byte_from_register(self.a, h)
            lo = self.i2.read_byte_from_register(self.a, l)
            r.append(struct.unpack(">h", struct.pack("BB", hi, lo))[0])
        return tuple(r)

    def read(self):
        """ Return the current (x,y,z) acceleration in g """
        c = self.config
        return tuple([axis(v, c.scale, c.resolution) for v in self.raw()])

    accelerometer = read
