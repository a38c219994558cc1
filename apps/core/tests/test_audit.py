"""Tests for the audit pipeline."""

from __future__ import annotations

from unittest import mock

from django.test import RequestFactory, TestCase

from apps.core.audit import AuditEvent, AuditRecorder, RequestMeta
from apps.core.exceptions import Conflict, INTERNAL_ERROR, error_code_for
from apps.core.models import AuditLog
from apps.core.tasks import write_audit_log
from shared.application.uow import DjangoUnitOfWork


class AuditPipelineTests(TestCase):
    def test_success_is_written_after_commit(self) -> None:
        audit = AuditRecorder("thing.update", "thing", target_id="t-1")
        audit.note(size=3)

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with DjangoUnitOfWork() as uow:
                audit.succeeded(uow, reason="because")
            self.assertFalse(AuditLog.objects.exists())

        self.assertEqual(len(callbacks), 1)
        entry = AuditLog.objects.get()
        self.assertTrue(entry.success)
        self.assertEqual(entry.action, "thing.update")
        self.assertEqual(entry.target_id, "t-1")
        self.assertEqual(entry.reason, "because")
        self.assertEqual(entry.diff, {"size": 3})

    def test_rolled_back_success_is_discarded(self) -> None:
        audit = AuditRecorder("thing.update", "thing")
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with self.assertRaises(RuntimeError):
                with DjangoUnitOfWork() as uow:
                    audit.succeeded(uow)
                    raise RuntimeError("boom")
        self.assertEqual(callbacks, [])
        self.assertFalse(AuditLog.objects.exists())

    def test_failure_is_written_immediately(self) -> None:
        meta = RequestMeta(ip_address="10.0.0.1", user_agent="pytest")
        audit = AuditRecorder("thing.update", "thing", target_id="t-2", meta=meta)

        audit.failed(Conflict("Already done."))

        entry = AuditLog.objects.get()
        self.assertFalse(entry.success)
        self.assertEqual(entry.error_code, "CONFLICT")
        self.assertEqual(entry.reason, "Already done.")
        self.assertEqual(entry.ip_address, "10.0.0.1")
        self.assertEqual(entry.user_agent, "pytest")

    def test_unexpected_errors_are_internal(self) -> None:
        self.assertEqual(error_code_for(ValueError("x")), INTERNAL_ERROR)
        AuditRecorder("thing.update", "thing").failed(ValueError("x"))
        self.assertEqual(AuditLog.objects.get().error_code, INTERNAL_ERROR)

    def test_broken_dispatch_never_raises(self) -> None:
        with mock.patch.object(write_audit_log, "delay", side_effect=ConnectionError("no broker")):
            AuditRecorder("thing.update", "thing").failed(Conflict())
        self.assertFalse(AuditLog.objects.exists())

    def test_task_accepts_serialized_event(self) -> None:
        event = AuditEvent(action="thing.create", target_type="thing", target_id="t-3", diff={"a": 1})
        entry_id = write_audit_log(event.to_dict())
        entry = AuditLog.objects.get(pk=entry_id)
        self.assertEqual(entry.timestamp, event.occurred_at)
        self.assertEqual(entry.diff, {"a": 1})


class RequestMetaTests(TestCase):
    def test_prefers_forwarded_address(self) -> None:
        request = RequestFactory().get("/", HTTP_X_FORWARDED_FOR="1.2.3.4, 10.0.0.1", HTTP_USER_AGENT="ua")
        meta = RequestMeta.from_request(request)
        self.assertEqual(meta.ip_address, "1.2.3.4")
        self.assertEqual(meta.user_agent, "ua")

    def test_falls_back_to_remote_addr(self) -> None:
        request = RequestFactory().get("/")
        self.assertEqual(RequestMeta.from_request(request).ip_address, "127.0.0.1")

    def test_malformed_forwarded_address_uses_remote_addr(self) -> None:
        request = RequestFactory().get("/", HTTP_X_FORWARDED_FOR="not-an-ip, 10.0.0.1")
        self.assertEqual(RequestMeta.from_request(request).ip_address, "127.0.0.1")

    def test_no_valid_address_is_none(self) -> None:
        request = RequestFactory().get("/", HTTP_X_FORWARDED_FOR="999.1.1.1", REMOTE_ADDR="unknown")
        self.assertIsNone(RequestMeta.from_request(request).ip_address)
