# coding=utf-8
from setuptools import setup

LONG = """\
Drivers for the Enviro pHAT LSM303D accelerometer and the HDC100x temperature and humidity sensor. They run over an I2CDriver USB adapter or a Linux i2c-dev bus."""

for l in open("i2cbus.py", "rt"):
    if l.startswith("__version__"):
        exec(l)

setup(name='i2csensors',
      version=__version__,
      description='I2C drivers for the Enviro pHAT accelerometer and HDC100x sensor',
      long_description=LONG,
      license='GPL',
      install_requires=['pyserial', 'smbus2'],
      py_modules = [
        'i2cbus',
        'envirophat',
        'hdc100x',
        'poller',
      ],
      scripts=[
        'samples/envirophat-accel.py',
        'samples/hdc100x-read.py',
        'samples/hdc100x-poll.py',
      ],
      )
