import unittest

import envirophat
from envirophat import AccelConfig, Envirophat
from i2cbus import I2CError, InitializationFailure

from .fakebus import FakeBus

A = 0x1d

def put(bus, h, l, v):
    bus.regs[(A, h)] = (v >> 8) & 0xff
    bus.regs[(A, l)] = v & 0xff

class TestAxis(unittest.TestCase):
    def test_boundaries(self):
        self.assertAlmostEqual(envirophat.axis(32767), 1.99994, places = 5)
        self.assertEqual(envirophat.axis(-32768), -2.0)
        self.assertEqual(envirophat.axis(0), 0.0)

    def test_matches_formula(self):
        for s in (-32768, -16384, -1, 1, 12345, 32767):
            self.assertEqual(envirophat.axis(s), s / 32768.0 * 2)

    def test_scale_and_resolution(self):
        self.assertEqual(envirophat.axis(16384, scale = 4), 2.0)
        self.assertEqual(envirophat.axis(2048, resolution = 12), 2.0)

class TestInit(unittest.TestCase):
    def test_configuration_sequence(self):
        bus = FakeBus()
        Envirophat(bus)
        self.assertEqual(bus.log, [
            ("write_byte_to_register", A, 0x20, 0x57),
            ("write_byte_to_register", A, 0x21, 0xc0),
            ("write_byte_to_register", A, 0x22, 0x00),
            ("write_byte_to_register", A, 0x23, 0x00),
            ("write_byte_to_register", A, 0x24, 0x10),
            ("write_byte_to_register", A, 0x25, 0x00),
            ("write_byte_to_register", A, 0x26, 0x00),
        ])

    def test_other_address(self):
        bus = FakeBus()
        Envirophat(bus, AccelConfig(address = 0x1e))
        self.assertEqual({t[1] for t in bus.log}, {0x1e})
        self.assertEqual(len(bus.log), 7)

    def test_failures_are_aggregated(self):
        bus = FakeBus()
        e1 = I2CError("reg3")
        e2 = I2CError("reg6")
        bus.fail[("write_byte_to_register", A, 0x22, 0x00)] = e1
        bus.fail[("write_byte_to_register", A, 0x25, 0x00)] = e2
        with self.assertRaises(InitializationFailure) as cm:
            Envirophat(bus)
        self.assertEqual(cm.exception.errors, [e1, e2])
        self.assertIs(cm.exception.__cause__, e1)
        # every write is still attempted
        self.assertEqual(len(bus.log), 7)

class TestRead(unittest.TestCase):
    def setUp(self):
        self.bus = FakeBus()
        self.d = Envirophat(self.bus)
        self.bus.log = []

    def test_read(self):
        put(self.bus, 0x29, 0x28, 0x4000)
        put(self.bus, 0x2b, 0x2a, 0xc000)
        put(self.bus, 0x2d, 0x2c, 0x7fff)
        (x, y, z) = self.d.read()
        self.assertEqual(x, 1.0)
        self.assertEqual(y, -1.0)
        self.assertAlmostEqual(z, 1.99994, places = 5)
        self.assertEqual(self.d.raw(), (0x4000, -0x4000, 0x7fff))

    def test_register_order(self):
        for (h, l) in envirophat.AXES:
            put(self.bus, h, l, 0)
        self.assertEqual(self.d.accelerometer(), (0.0, 0.0, 0.0))
        self.assertEqual([t[2] for t in self.bus.log],
                         [0x29, 0x28, 0x2b, 0x2a, 0x2d, 0x2c])

    def test_fail_fast(self):
        for (h, l) in envirophat.AXES:
            put(self.bus, h, l, 0x1234)
        err = I2CError("bus gone")
        self.bus.fail[("read_byte_from_register", A, 0x28)] = err
        with self.assertRaises(I2CError) as cm:
            self.d.read()
        self.assertIs(cm.exception, err)
        self.assertEqual(self.bus.log, [
            ("read_byte_from_register", A, 0x29),
            ("read_byte_from_register", A, 0x28),
        ])

    def test_no_state_between_reads(self):
        for (h, l) in envirophat.AXES:
            put(self.bus, h, l, 0x8000)
        self.assertEqual(self.d.read(), (-2.0, -2.0, -2.0))
        for (h, l) in envirophat.AXES:
            put(self.bus, h, l, 0)
        self.assertEqual(self.d.read(), (0.0, 0.0, 0.0))

if __name__ == '__main__':
    unittest.main()
