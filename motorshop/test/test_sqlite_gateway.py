"""
Tests for the SQLite gateway.
"""

from datetime import date
import os
import shutil
import sqlite3
import tempfile
import unittest

import mock

from motorshop.domain import (
    Company,
    JobPriority,
    JobStatus,
    Motor,
    MotorCondition,
    MotorPhase,
    MotorType,
)
from motorshop.gateway import GatewayError, SqliteGateway
from motorshop.gateway.sqlite_gateway import SCHEMA_VERSION

from .test_domain import makeJob


class TestSqliteGateway(unittest.IsolatedAsyncioTestCase):
    """Test SQLite gateway implementation."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.db_path = os.path.join(self.temp_dir, "db", "shop.sqlite3")
        self.gateway = SqliteGateway(self.db_path)

    def tearDown(self):
        self.gateway.close()
        shutil.rmtree(self.temp_dir)

    def reopen(self):
        self.gateway.close()
        self.gateway = SqliteGateway(self.db_path)
        return self.gateway

    async def seed(self):
        company = await self.gateway.companies.create(
            Company(name="Acme Pumps", phone="555-0100"))
        motor = await self.gateway.motors.create(Motor(
            company_id=company.id, motor_id="ACM-001", type=MotorType.AC,
            phase=MotorPhase.THREE, voltage="460", rpm="1750"))
        return company, motor

    def test_creates_directory_and_schema(self):
        self.assertTrue(os.path.exists(self.db_path))
        self.assertEqual(self.gateway.schema_version(), SCHEMA_VERSION)
        self.assertEqual(len(self.gateway.companies.listing()), 0)

    async def test_create_and_reload(self):
        company, motor = await self.seed()
        self.assertTrue(company.id)
        self.assertEqual(len(self.gateway.companies.listing()), 1)

        gateway = self.reopen()

        self.assertEqual(list(gateway.companies.listing()), [company])
        loaded = gateway.motors.listing()[0]
        self.assertEqual(loaded, motor)
        self.assertEqual(loaded.phase, MotorPhase.THREE)
        self.assertEqual(loaded.condition, MotorCondition.GOOD)
        self.assertEqual(loaded.voltage, "460")

    async def test_job_round_trip(self):
        company, motor = await self.seed()
        job = await self.gateway.jobs.create(makeJob(
            company_id=company.id, motor_id=motor.id,
            priority=JobPriority.URGENT, estimated_cost=120.5,
            start_date=date(2026, 11, 1)))

        loaded = self.reopen().jobs.listing()[0]

        self.assertEqual(loaded, job)
        self.assertEqual(loaded.status, JobStatus.PENDING)
        self.assertEqual(loaded.due_date, date(2026, 11, 30))
        self.assertIsNone(loaded.parts_cost)
        self.assertIsNotNone(loaded.created_at.tzinfo)

    async def test_listing_keeps_insertion_order(self):
        names = ["Zeta", "Alpha", "Mu"]
        for name in names:
            await self.gateway.companies.create(Company(name=name))

        gateway = self.reopen()

        self.assertEqual([c.name for c in gateway.companies.listing()], names)

    async def test_foreign_key_violation(self):
        listing = self.gateway.motors.listing()
        with self.assertRaises(GatewayError) as ctx:
            await self.gateway.motors.create(
                Motor(company_id="c-missing", motor_id="X-1", type=MotorType.DC))
        self.assertIsNotNone(ctx.exception.cause)
        self.assertEqual(len(listing), 0)
        self.assertEqual(len(self.reopen().motors.listing()), 0)

    async def test_duplicate_job_number(self):
        company, motor = await self.seed()
        await self.gateway.jobs.create(
            makeJob(company_id=company.id, motor_id=motor.id))
        with self.assertRaises(GatewayError):
            await self.gateway.jobs.create(
                makeJob(company_id=company.id, motor_id=motor.id))
        self.assertEqual(len(self.gateway.jobs.listing()), 1)

    async def test_refresh_sees_other_writers(self):
        other = SqliteGateway(self.db_path)
        self.addCleanup(other.close)
        listener = mock.Mock()
        self.gateway.companies.listing().subscribe(listener)

        created = await other.companies.create(Company(name="Globex Mills"))
        self.assertEqual(len(self.gateway.companies.listing()), 0)

        await self.gateway.refresh()

        self.assertEqual(list(self.gateway.companies.listing()), [created])
        listener.assert_called()

    def test_memory_database(self):
        gateway = SqliteGateway(":memory:")
        self.addCleanup(gateway.close)
        self.assertEqual(len(gateway.jobs.listing()), 0)

    async def test_create_after_close(self):
        gateway = SqliteGateway(":memory:")
        gateway.close()
        with self.assertRaises(GatewayError) as ctx:
            await gateway.companies.create(Company(name="Acme Pumps"))
        self.assertIsInstance(ctx.exception.cause, sqlite3.ProgrammingError)
        self.assertEqual(len(gateway.companies.listing()), 0)

    async def test_refresh_after_close(self):
        self.gateway.close()
        with self.assertRaises(GatewayError):
            await self.gateway.refresh()

    def test_schema_version_mismatch(self):
        self.gateway.close()
        conn = sqlite3.connect(self.db_path)
        conn.execute("UPDATE metadata SET value = ? WHERE key = ?", ("0", "schema_version"))
        conn.commit()
        conn.close()
        with self.assertRaisesRegex(GatewayError, "schema version 0"):
            SqliteGateway(self.db_path)

    def test_close_twice(self):
        self.gateway.close()
        self.gateway.close()


if __name__ == "__main__":
    unittest.main()
