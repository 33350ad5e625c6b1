"""
Exception hierarchy shared by the motorshop layers.
"""


class MotorshopError(Exception):
    """Base class for every error raised by motorshop."""
