"""
Integration tests for the document request API.

Scope in this file:
- /api/requests/ CRUD with owner / registrar access rules
- POST /api/requests/{id}/status/ (registrar-only workflow)
- /api/requests/{id}/claim-slip/ and /status-logs/
- /api/requests/{request_pk}/payments/
- /api/status-logs/ listing and remarks correction
"""

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User, UserRole
from catalog.models import Document
from core.models import Notification
from doc_requests.models import ClaimSlip, DocumentRequest, RequestStatus, RequestStatusLog
from payments.models import Payment


class TestRequestLifecycleFlow(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.password = "Fl0w!Pass"
        cls.student = User.objects.create_user(
            username="mara",
            password=cls.password,
            first_name="Mara",
            last_name="Villanueva",
            role=UserRole.STUDENT,
            student_id="2025-00101",
        )
        cls.other_student = User.objects.create_user(
            username="jonas",
            password=cls.password,
            role=UserRole.STUDENT,
            student_id="2025-00102",
        )
        cls.registrar = User.objects.create_user(
            username="grace",
            password=cls.password,
            first_name="Grace",
            last_name="Uy",
            role=UserRole.REGISTRAR,
            admin_id="ADM-101",
        )
        cls.second_registrar = User.objects.create_user(
            username="paolo",
            password=cls.password,
            role=UserRole.REGISTRAR,
            admin_id="ADM-102",
        )
        cls.transcript = Document.objects.create(name="Transcript of Records")
        cls.clearance = Document.objects.create(name="Student Clearance")

    def setUp(self):
        self.client = APIClient()

    # ── helpers ──────────────────────────────────────────────────────

    def _as(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")

    def _create_request(self, **overrides):
        self._as(self.student)
        payload = {
            "document": self.transcript.pk,
            "copies": 2,
            "purpose": "Graduate school application",
            "date_needed": "2099-02-01",
        }
        payload.update(overrides)
        return self.client.post(reverse("request-list"), payload, format="json")

    def _new_request_id(self):
        response = self._create_request()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data["id"]

    def _change_status(self, request_id, new_status, **extra):
        self._as(self.registrar)
        return self.client.post(
            reverse("request-status", kwargs={"pk": request_id}),
            {"new_status": new_status, **extra},
            format="json",
        )

    # ── creation ─────────────────────────────────────────────────────

    def test_unauthenticated_is_rejected(self):
        response = self.client.get(reverse("request-list"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_returns_enriched_pending_request(self):
        response = self._create_request(status="APPROVED", user=self.other_student.pk)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], RequestStatus.PENDING)
        self.assertEqual(response.data["user"], self.student.pk)
        self.assertEqual(response.data["user_name"], "Mara Villanueva")
        self.assertEqual(response.data["student_id"], "2025-00101")
        self.assertEqual(response.data["document_name"], "Transcript of Records")
        self.assertEqual(response.data["reference_code"], f"REQ-{response.data['id']}")
        self.assertIsNone(response.data["date_ready"])
        self.assertIsNone(response.data["proof_of_payment"])

        notified = set(
            Notification.objects.filter(request_id=response.data["id"]).values_list("recipient_id", flat=True)
        )
        self.assertEqual(notified, {self.registrar.pk, self.second_registrar.pk})

    def test_create_with_unknown_document_creates_nothing(self):
        response = self._create_request(document=999_999)

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(DocumentRequest.objects.exists())
        self.assertFalse(Notification.objects.exists())

    def test_create_with_zero_copies_is_rejected(self):
        response = self._create_request(copies=0)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(DocumentRequest.objects.exists())

    # ── listing and retrieval ────────────────────────────────────────

    def test_visibility_by_role(self):
        own_id = self._new_request_id()
        self._as(self.other_student)
        other_id = self.client.post(
            reverse("request-list"), {"document": self.clearance.pk}, format="json",
        ).data["id"]

        self._as(self.student)
        response = self.client.get(reverse("request-list"))
        self.assertEqual([r["id"] for r in response.data], [own_id])

        self._as(self.registrar)
        response = self.client.get(reverse("request-list"))
        self.assertEqual([r["id"] for r in response.data], [other_id, own_id])

        response = self.client.get(reverse("request-list"), {"user": self.other_student.pk})
        self.assertEqual([r["id"] for r in response.data], [other_id])

        response = self.client.get(reverse("request-detail", kwargs={"pk": own_id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["user_name"], "Mara Villanueva")

        self._as(self.other_student)
        response = self.client.get(reverse("request-detail", kwargs={"pk": own_id}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_student_cannot_widen_list_with_user_filter(self):
        self._new_request_id()

        self._as(self.other_student)
        response = self.client.get(reverse("request-list"), {"user": self.student.pk})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_non_numeric_user_filter_is_rejected(self):
        self._as(self.registrar)
        response = self.client.get(reverse("request-list"), {"user": "abc"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("user", response.data)

    def test_bad_status_filter_echoes_value(self):
        self._as(self.registrar)
        response = self.client.get(reverse("request-list"), {"status": "LOST"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["value"], "LOST")

    def test_status_filter_is_case_insensitive(self):
        request_id = self._new_request_id()

        self._as(self.registrar)
        response = self.client.get(reverse("request-list"), {"status": "pending"})

        self.assertEqual([r["id"] for r in response.data], [request_id])

    def test_unknown_request_is_404(self):
        self._as(self.registrar)
        response = self.client.get(reverse("request-detail", kwargs={"pk": 999_999}))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["detail"], "Request not found with id: 999999")

    # ── status workflow ──────────────────────────────────────────────

    def test_student_cannot_change_status(self):
        request_id = self._new_request_id()

        self._as(self.student)
        response = self.client.post(
            reverse("request-status", kwargs={"pk": request_id}),
            {"new_status": "APPROVED"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(DocumentRequest.objects.get(pk=request_id).status, RequestStatus.PENDING)

    def test_approval_issues_claim_slip_and_notifies_owner(self):
        request_id = self._new_request_id()

        response = self._change_status(
            request_id, "approved", remarks="ok", date_ready="2099-01-15T09:30:00Z",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], RequestStatus.APPROVED)
        self.assertEqual(response.data["date_ready"], "2099-01-15T12:00:00Z")

        notification = Notification.objects.get(recipient=self.student, request_id=request_id)
        self.assertEqual(notification.title, "Request Status Updated")
        self.assertIn("is now APPROVED", notification.message)
        self.assertTrue(notification.message.endswith("Remarks: ok"))

        self._as(self.student)
        slip = self.client.get(reverse("request-claim-slip", kwargs={"pk": request_id}))
        self.assertEqual(slip.status_code, status.HTTP_200_OK)
        self.assertEqual(slip.data["date_ready"], "2099-01-15")
        self.assertEqual(slip.data["issued_by"], self.registrar.pk)
        self.assertRegex(slip.data["claim_number"], rf"^REQ-\d{{4}}-{request_id:03d}$")

        logs = self.client.get(reverse("request-status-logs", kwargs={"pk": request_id}))
        self.assertEqual(logs.status_code, status.HTTP_200_OK)
        self.assertEqual(len(logs.data), 1)
        self.assertEqual(logs.data[0]["old_status"], "PENDING")
        self.assertEqual(logs.data[0]["new_status"], "APPROVED")
        self.assertEqual(logs.data[0]["changed_by_name"], "Grace Uy")
        self.assertEqual(logs.data[0]["remarks"], "ok")

    def test_reapproval_does_not_reissue_claim_slip(self):
        request_id = self._new_request_id()
        self._change_status(request_id, "APPROVED", date_ready="2099-01-15")
        first_slip = ClaimSlip.objects.get(request_id=request_id)

        self._change_status(request_id, "PROCESSING")
        response = self._change_status(request_id, "APPROVED", date_ready="2099-03-01")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["date_ready"], "2099-01-15T12:00:00Z")
        self.assertEqual(list(ClaimSlip.objects.filter(request_id=request_id)), [first_slip])
        self.assertEqual(RequestStatusLog.objects.filter(request_id=request_id).count(), 3)

    def test_claim_slip_missing_before_approval(self):
        request_id = self._new_request_id()

        response = self.client.get(reverse("request-claim-slip", kwargs={"pk": request_id}))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_claim_slip_of_other_student_is_forbidden(self):
        request_id = self._new_request_id()
        self._change_status(request_id, "APPROVED")

        self._as(self.other_student)
        response = self.client.get(reverse("request-claim-slip", kwargs={"pk": request_id}))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_rejected_transitions(self):
        request_id = self._new_request_id()

        response = self._change_status(request_id, "SHIPPED")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["value"], "SHIPPED")

        response = self._change_status(request_id, "PENDING")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self._change_status(999_999, "APPROVED")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self._change_status(request_id, "")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self.assertFalse(RequestStatusLog.objects.exists())
        self.assertFalse(Notification.objects.filter(recipient=self.student).exists())

    # ── edit and delete ──────────────────────────────────────────────

    def test_owner_can_patch_allowed_fields(self):
        request_id = self._new_request_id()

        response = self.client.patch(
            reverse("request-detail", kwargs={"pk": request_id}),
            {"copies": 4, "purpose": "Employment", "document": self.clearance.pk},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["copies"], 4)
        self.assertEqual(response.data["purpose"], "Employment")
        self.assertEqual(response.data["document_name"], "Student Clearance")
        self.assertFalse(RequestStatusLog.objects.exists())

    def test_registrar_can_patch_any_request(self):
        request_id = self._new_request_id()

        self._as(self.registrar)
        response = self.client.patch(
            reverse("request-detail", kwargs={"pk": request_id}), {"copies": 3}, format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(DocumentRequest.objects.get(pk=request_id).copies, 3)

    def test_patch_rejects_protected_fields(self):
        request_id = self._new_request_id()
        url = reverse("request-detail", kwargs={"pk": request_id})

        for body in ({"status": "APPROVED"}, {"user": self.other_student.pk, "copies": 9}):
            with self.subTest(body=body):
                response = self.client.patch(url, body, format="json")
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        stored = DocumentRequest.objects.get(pk=request_id)
        self.assertEqual(stored.status, RequestStatus.PENDING)
        self.assertEqual(stored.user_id, self.student.pk)
        self.assertEqual(stored.copies, 2)

    def test_other_student_cannot_patch(self):
        request_id = self._new_request_id()

        self._as(self.other_student)
        response = self.client.patch(
            reverse("request-detail", kwargs={"pk": request_id}), {"copies": 5}, format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_delete_keeps_notifications(self):
        request_id = self._new_request_id()
        self._change_status(request_id, "APPROVED")
        url = reverse("request-detail", kwargs={"pk": request_id})

        self._as(self.other_student)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_403_FORBIDDEN)

        self._as(self.student)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)

        self.assertFalse(DocumentRequest.objects.filter(pk=request_id).exists())
        self.assertFalse(ClaimSlip.objects.exists())
        self.assertFalse(RequestStatusLog.objects.exists())
        self.assertEqual(Notification.objects.count(), 3)
        self.assertFalse(Notification.objects.filter(request__isnull=False).exists())

    # ── payments ─────────────────────────────────────────────────────

    def test_only_owner_records_payment(self):
        request_id = self._new_request_id()
        url = reverse("request-payment-list", kwargs={"request_pk": request_id})
        body = {"proof_of_payment": "receipts/or-5521.png"}

        self._as(self.registrar)
        self.assertEqual(self.client.post(url, body, format="json").status_code, status.HTTP_403_FORBIDDEN)

        self._as(self.student)
        response = self.client.post(url, body, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

        detail = self.client.get(reverse("request-detail", kwargs={"pk": request_id}))
        self.assertEqual(detail.data["proof_of_payment"], "receipts/or-5521.png")

        self._as(self.registrar)
        listing = self.client.get(url)
        self.assertEqual(listing.status_code, status.HTTP_200_OK)
        self.assertEqual([p["proof_of_payment"] for p in listing.data], ["receipts/or-5521.png"])

        self._as(self.other_student)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Payment.objects.count(), 1)

    def test_payment_on_unknown_request_is_404(self):
        self._as(self.student)
        response = self.client.post(
            reverse("request-payment-list", kwargs={"request_pk": 999_999}),
            {"proof_of_payment": "x.png"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    # ── status-log endpoints ─────────────────────────────────────────

    def test_status_log_list_is_scoped(self):
        own_id = self._new_request_id()
        self._as(self.other_student)
        other_id = self.client.post(
            reverse("request-list"), {"document": self.clearance.pk}, format="json",
        ).data["id"]
        self._change_status(own_id, "PROCESSING")
        self._change_status(other_id, "REJECTED")

        self._as(self.student)
        response = self.client.get(reverse("status-log-list"))
        self.assertEqual([log["request"] for log in response.data], [own_id])

        self._as(self.registrar)
        response = self.client.get(reverse("status-log-list"))
        self.assertEqual({log["request"] for log in response.data}, {own_id, other_id})

    def test_only_registrar_corrects_remarks(self):
        request_id = self._new_request_id()
        self._change_status(request_id, "REJECTED", remarks="mising ID")
        log = RequestStatusLog.objects.get(request_id=request_id)
        url = reverse("status-log-detail", kwargs={"pk": log.pk})

        self._as(self.student)
        response = self.client.patch(url, {"remarks": "hacked"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self._as(self.registrar)
        response = self.client.patch(url, {"remarks": "missing ID"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["remarks"], "missing ID")
        self.assertEqual(response.data["new_status"], "REJECTED")

        log.refresh_from_db()
        self.assertEqual(log.remarks, "missing ID")
