"""Domain and workflow core for a motor repair shop.

Tracks customer companies, the motors they own and the repair jobs done on
those motors. New records are assembled in intake sessions and committed to
a persistence gateway in a single create.
"""

from .domain import (
    Company,
    Job,
    JobPriority,
    JobStatus,
    Motor,
    MotorCondition,
    MotorType,
    ValidationError,
)
from .gateway import GatewayError
from .shop import Shop, open_shop

__all__ = [
    "Company",
    "GatewayError",
    "Job",
    "JobPriority",
    "JobStatus",
    "Motor",
    "MotorCondition",
    "MotorType",
    "Shop",
    "ValidationError",
    "open_shop",
]
