"""
Tests for the job state machine.
"""

from datetime import date
import unittest

from motorshop.domain import InvalidTransitionError, JobStatus, can_transition, transition
from motorshop.domain.lifecycle import ALLOWED_TRANSITIONS, TERMINAL_STATES

from .test_domain import makeJob


class TestTransitionTable(unittest.TestCase):
    def test_terminal_states(self):
        self.assertEqual(TERMINAL_STATES,
                         {JobStatus.COMPLETED, JobStatus.CANCELLED})

    def test_every_status_has_an_entry(self):
        self.assertEqual(set(ALLOWED_TRANSITIONS), set(JobStatus))

    def test_can_transition(self):
        self.assertTrue(can_transition(JobStatus.PENDING, JobStatus.IN_PROGRESS))
        self.assertTrue(can_transition("pending", "cancelled"))
        self.assertTrue(can_transition(JobStatus.IN_PROGRESS, JobStatus.COMPLETED))
        self.assertTrue(can_transition(JobStatus.IN_PROGRESS, JobStatus.CANCELLED))
        self.assertFalse(can_transition(JobStatus.PENDING, JobStatus.COMPLETED))
        self.assertFalse(can_transition(JobStatus.PENDING, JobStatus.PENDING))


class TestTransition(unittest.TestCase):
    def test_pending_to_in_progress(self):
        job = makeJob()
        self.assertIs(transition(job, JobStatus.IN_PROGRESS), job)
        self.assertEqual(job.status, JobStatus.IN_PROGRESS)

    def test_full_happy_path(self):
        job = makeJob()
        job.start()
        job.complete()
        self.assertEqual(job.status, JobStatus.COMPLETED)
        self.assertTrue(job.is_terminal())

    def test_cancel_from_pending_and_in_progress(self):
        pending = makeJob()
        pending.cancel()
        self.assertEqual(pending.status, JobStatus.CANCELLED)

        running = makeJob()
        running.start()
        running.cancel()
        self.assertEqual(running.status, JobStatus.CANCELLED)

    def test_completed_to_pending_fails(self):
        job = makeJob()
        job.start()
        job.complete()
        with self.assertRaises(InvalidTransitionError) as ctx:
            transition(job, JobStatus.PENDING)
        self.assertEqual(ctx.exception.current, JobStatus.COMPLETED)
        self.assertEqual(ctx.exception.requested, JobStatus.PENDING)
        self.assertIn("completed", str(ctx.exception))
        self.assertIn("pending", str(ctx.exception))
        self.assertEqual(job.status, JobStatus.COMPLETED)

    def test_cancelled_to_in_progress_fails(self):
        job = makeJob()
        job.cancel()
        with self.assertRaises(InvalidTransitionError) as ctx:
            job.start()
        self.assertEqual(ctx.exception.current, JobStatus.CANCELLED)
        self.assertEqual(ctx.exception.requested, JobStatus.IN_PROGRESS)

    def test_pending_cannot_skip_to_completed(self):
        job = makeJob()
        with self.assertRaises(InvalidTransitionError):
            job.complete()
        self.assertEqual(job.status, JobStatus.PENDING)
        self.assertFalse(job.is_terminal())

    def test_unknown_status(self):
        with self.assertRaises(ValueError):
            transition(makeJob(), "on_hold")

    def test_overdue_job_stays_pending(self):
        job = makeJob(due_date=date(2020, 1, 1))
        self.assertLess(job.due_date, date.today())
        self.assertEqual(job.status, JobStatus.PENDING)
        self.assertTrue(can_transition(job.status, JobStatus.IN_PROGRESS))


if __name__ == "__main__":
    unittest.main()
