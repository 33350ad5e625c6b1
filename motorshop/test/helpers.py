import asyncio
from contextlib import contextmanager
from datetime import date
import os

from motorshop.domain import Company, Motor, MotorType
from motorshop.gateway import GatewayError, MemoryGateway
from motorshop.gateway.memory import MemoryEntityGateway

HOME = '/home/me'

ACME = Company(id="c-acme", name="Acme Pumps", email="ops@acme.example")
GLOBEX = Company(id="c-globex", name="Globex Mills")
ACME_MOTOR = Motor(id="m-acme-1", company_id=ACME.id, motor_id="ACM-001",
                   type=MotorType.AC)
GLOBEX_MOTOR = Motor(id="m-globex-1", company_id=GLOBEX.id, motor_id="GLX-001",
                     type=MotorType.DC)

DUE = date(2026, 11, 30)


def resetEnv():
    os.environ['HOME'] = HOME
    os.environ['MOTORSHOP_STATE_DIR'] = '/tmp/BADDIR'
    for name in ('MOTORSHOP_RC_FILE',):
        if name in os.environ:
            del os.environ[name]


def seededGateway(**kwargs):
    """A memory gateway holding two companies with one motor each."""
    kwargs.setdefault('companies', [ACME, GLOBEX])
    kwargs.setdefault('motors', [ACME_MOTOR, GLOBEX_MOTOR])
    return MemoryGateway(**kwargs)


class CountingEntityGateway(MemoryEntityGateway):
    """
    Memory entity gateway that counts create calls and can hold them open
    or make them fail.
    """

    def __init__(self, kind, records=None):
        super().__init__(kind, records)
        self.createCalls = 0
        self.failWith = None
        self.release = None

    def hold(self):
        self.release = asyncio.Event()
        return self.release

    async def create(self, record):
        self.createCalls += 1
        if self.release is not None:
            await self.release.wait()
        if self.failWith is not None:
            raise GatewayError("create refused", self.failWith)
        return await super().create(record)


def countingGateway(companies=(ACME, GLOBEX), motors=(ACME_MOTOR, GLOBEX_MOTOR)):
    gateway = MemoryGateway()
    gateway.companies = CountingEntityGateway(gateway.companies.kind, companies)
    gateway.motors = CountingEntityGateway(gateway.motors.kind, motors)
    gateway.jobs = CountingEntityGateway(gateway.jobs.kind)
    return gateway


@contextmanager
def environ(**values):
    old = {name: os.environ.get(name) for name in values}
    os.environ.update(values)
    try:
        yield
    finally:
        for name, value in old.items():
            if value is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = value
