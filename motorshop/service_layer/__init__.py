"""
Service layer for intake workflows.

This package contains the intake sessions which orchestrate between the
domain layer and the persistence gateway.
"""

from .intake import CompanyIntake, IntakeSession, JobIntake, MotorIntake

__all__ = ["CompanyIntake", "IntakeSession", "JobIntake", "MotorIntake"]
