"""
Entry point that wires configuration, logging and a gateway together.

A :class:`Shop` hands out intake sessions bound to one gateway and one
job number generator. The presentation layer owns the sessions it opens.
"""

from __future__ import annotations

import logging
from typing import Optional

from motorshop import logging as shoplogging
from motorshop.config import GATEWAY_BACKEND, Config, ConfigError
from motorshop.domain import Company, Draft, Job, JobNumberGenerator, Motor
from motorshop.gateway import Gateway, LiveList, MemoryGateway, SqliteGateway
from motorshop.service_layer import CompanyIntake, JobIntake, MotorIntake

LOG = logging.getLogger(__name__)


class Shop:
    """Facade that exposes the intake workflows to clients."""

    def __init__(self, gateway: Gateway,
                 job_numbers: Optional[JobNumberGenerator] = None):
        self.gateway = gateway
        self.job_numbers = job_numbers or JobNumberGenerator()

    def company_intake(self, draft: Optional[Draft] = None) -> CompanyIntake:
        return CompanyIntake(self.gateway, draft)

    def motor_intake(self, draft: Optional[Draft] = None) -> MotorIntake:
        return MotorIntake(self.gateway, draft)

    def job_intake(self, draft: Optional[Draft] = None) -> JobIntake:
        return JobIntake(self.gateway, draft, job_numbers=self.job_numbers)

    @property
    def companies(self) -> LiveList[Company]:
        return self.gateway.companies.listing()

    @property
    def motors(self) -> LiveList[Motor]:
        return self.gateway.motors.listing()

    @property
    def jobs(self) -> LiveList[Job]:
        return self.gateway.jobs.listing()

    async def refresh(self) -> None:
        await self.gateway.refresh()

    def close(self) -> None:
        self.gateway.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _ = (exc_type, exc_val, exc_tb)
        self.close()
        return False


def build_gateway(config: Config) -> Gateway:
    """
    Create the gateway selected by ``gateway.backend``.

    Raises:
        ConfigError: If the backend is not known
    """
    backend = config.backend
    if backend == GATEWAY_BACKEND.MEMORY:
        return MemoryGateway()
    if backend == GATEWAY_BACKEND.SQLITE:
        return SqliteGateway(config.databasePath)
    if backend == GATEWAY_BACKEND.REST:
        # pylint: disable-next=import-outside-toplevel
        from motorshop.gateway.rest import RestGateway
        return RestGateway(config.restUrl, config.restApiKey,
                           timeout=config.restTimeout)
    raise ConfigError(f"Unknown gateway backend {backend!r}")


def open_shop(config: Config, setup_logging: bool = True) -> Shop:
    """
    Build a Shop from configuration.

    Args:
        config: Parsed configuration
        setup_logging: Configure the root logger the standard way first

    Returns:
        A Shop over the configured gateway
    """
    if setup_logging:
        shoplogging.setup(config.logDir, debug=config.debug)
    gateway = build_gateway(config)
    LOG.info("Opened shop on %s gateway", config.backend)
    return Shop(gateway, JobNumberGenerator(prefix=config.jobNumberPrefix))
