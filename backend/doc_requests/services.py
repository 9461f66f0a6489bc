"""
Document-requests app Service Layer.

This module is the **single source of truth** for all business logic
in the ``doc_requests`` app.  Views must remain thin: validate input via
serializers, call a service method, and return the result wrapped in
a DRF ``Response``.

Architecture
------------
- ``RequestEnrichmentService`` — Read-side join (owner name / student id,
  document name, latest proof of payment).
- ``RequestQueryService``      — Single-item and list reads, always enriched.
- ``RequestCreationService``   — New PENDING request + registrar fan-out.
- ``RequestWorkflowService``   — The status-transition gateway.
- ``RequestEditService``       — Plain field updates and deletion.
- ``StatusLogService``         — Append-only status audit trail.
- ``ClaimSlipService``         — One-time claim-slip issuance.

Collaborators (document catalog, user directory, payment ledger,
notification sink, audit log, claim-slip issuer, clock) are passed to the
service constructors; every argument defaults to the Django-backed
implementation so production code simply writes ``RequestWorkflowService()``.

Status Machine
--------------
::

    PENDING ⇄ PROCESSING ⇄ APPROVED ⇄ REJECTED ⇄ COMPLETED
    (every status may move to every other one; self-moves are rejected)

Side effects of ``change_status`` (one ``transaction.atomic`` block,
request row locked with ``select_for_update``):

1. persist the new status;
2. first move into APPROVED with no ``date_ready`` → stamp it (hint or
   today, at noon);
3. append a ``RequestStatusLog`` row (``changed_by`` = acting registrar);
4. APPROVED → issue the claim slip unless one exists;
5. one notification to the request's owner.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any, Callable, Iterable

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from accounts.services import UserDirectory
from catalog.services import DocumentCatalog
from core.domain.exceptions import InvalidArgument, NotFound
from core.domain.notifications import NotificationService
from core.domain.transactions import create_or_get_existing, lock_for_update
from payments.services import PaymentLedger

from .models import ClaimSlip, DocumentRequest, RequestStatus, RequestStatusLog

logger = logging.getLogger(__name__)

#: Wall-clock hour ``date_ready`` is pinned to, away from midnight so that
#: timezone conversions never shift the calendar date.
DATE_READY_HOUR: int = 12

#: Fields ``RequestEditService.update_fields`` accepts.
EDITABLE_FIELDS: frozenset[str] = frozenset({"copies", "date_needed", "purpose", "document"})


# ═══════════════════════════════════════════════════════════════════
#  Pure helpers
# ═══════════════════════════════════════════════════════════════════


def build_claim_number(request_id: int, year: int) -> str:
    """
    ``REQ-<year>-<request id zero-padded to 3 digits>``.

    The number is unique only through the request id it embeds: ids keep
    growing across years, so the year part is informational.
    """
    return f"REQ-{year}-{request_id:03d}"


def parse_date_ready_hint(raw: Any) -> datetime.date | None:
    """
    Extract a calendar date from a caller-supplied hint.

    Accepts ``date`` / ``datetime`` objects and ISO strings — a bare date
    (``2025-06-10``) or a date-time with or without offset
    (``2025-06-10T09:30:00Z``).  The date is taken as written; offsets
    are not converted.  Returns ``None`` for blank or unparseable input.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime.datetime):
        return raw.date()
    if isinstance(raw, datetime.date):
        return raw

    text = str(raw).strip()
    if not text:
        return None
    try:
        parsed = parse_datetime(text)
        if parsed is not None:
            return parsed.date()
        parsed_date = parse_date(text)
        if parsed_date is not None:
            return parsed_date
    except ValueError:
        pass
    logger.warning("Ignoring unparseable date_ready hint %r", raw)
    return None


def pin_to_noon(day: datetime.date) -> datetime.datetime:
    """``day`` at ``DATE_READY_HOUR``:00 in the current timezone."""
    return timezone.make_aware(
        datetime.datetime.combine(day, datetime.time(hour=DATE_READY_HOUR)),
    )


# ═══════════════════════════════════════════════════════════════════
#  Enrichment Service
# ═══════════════════════════════════════════════════════════════════


class RequestEnrichmentService:
    """
    Attaches display data to ``DocumentRequest`` instances.

    After enrichment every instance carries ``user_name``, ``student_id``,
    ``document_name`` and ``proof_of_payment`` attributes.  A missing
    owner or payment leaves the corresponding attributes ``None``; the
    read never fails because of them.  Nothing is written.
    """

    def __init__(
        self,
        *,
        users: UserDirectory | None = None,
        payments: PaymentLedger | None = None,
    ) -> None:
        self.users = users or UserDirectory()
        self.payments = payments or PaymentLedger()

    def enrich(self, doc_request: DocumentRequest) -> DocumentRequest:
        return self.enrich_many([doc_request])[0]

    def enrich_many(self, requests: Iterable[DocumentRequest]) -> list[DocumentRequest]:
        requests = list(requests)
        if not requests:
            return requests

        owners = self.users.find_by_ids(r.user_id for r in requests)
        latest_payments = self.payments.latest_by_request_ids(r.pk for r in requests)

        for doc_request in requests:
            owner = owners.get(doc_request.user_id)
            if owner is None:
                logger.debug("Request pk=%s: owner pk=%s not found", doc_request.pk, doc_request.user_id)
            doc_request.user_name = owner.display_name if owner else None
            doc_request.student_id = owner.student_id if owner else None

            document = doc_request.document
            doc_request.document_name = document.name if document else None

            payment = latest_payments.get(doc_request.pk)
            doc_request.proof_of_payment = payment.proof_of_payment if payment else None

        return requests


# ═══════════════════════════════════════════════════════════════════
#  Query Service
# ═══════════════════════════════════════════════════════════════════


class RequestQueryService:
    """Enriched reads of document requests, newest first."""

    def __init__(self, *, enrichment: RequestEnrichmentService | None = None) -> None:
        self.enrichment = enrichment or RequestEnrichmentService()

    @staticmethod
    def _base_queryset() -> QuerySet:
        return DocumentRequest.objects.select_related("user", "document")

    def get_raw(self, request_id: Any) -> DocumentRequest:
        """Un-enriched fetch, for authorization checks."""
        try:
            return self._base_queryset().get(pk=request_id)
        except (DocumentRequest.DoesNotExist, ValueError, TypeError):
            raise NotFound.for_resource("Request", "id", request_id)

    def get_by_id(self, request_id: Any) -> DocumentRequest:
        return self.enrichment.enrich(self.get_raw(request_id))

    def list_all(self, *, status: str | None = None) -> list[DocumentRequest]:
        qs = self._filter_status(self._base_queryset(), status)
        return self.enrichment.enrich_many(qs.order_by("-created_at", "-id"))

    def list_by_user(self, user_id: Any, *, status: str | None = None) -> list[DocumentRequest]:
        """
        Raises:
            InvalidArgument: ``user_id`` is not an integer.
        """
        try:
            user_id = int(user_id)
        except (TypeError, ValueError):
            raise InvalidArgument(f"Invalid user id: {user_id}", value=user_id)
        qs = self._filter_status(self._base_queryset().filter(user_id=user_id), status)
        return self.enrichment.enrich_many(qs.order_by("-created_at", "-id"))

    @staticmethod
    def _filter_status(qs: QuerySet, status: str | None) -> QuerySet:
        if not status:
            return qs
        parsed = RequestStatus.parse(status)
        if parsed is None:
            raise InvalidArgument(f"Invalid status value: {status}", value=status)
        return qs.filter(status=parsed)


# ═══════════════════════════════════════════════════════════════════
#  Status Log Service
# ═══════════════════════════════════════════════════════════════════


class StatusLogService:
    """
    Append-only audit trail of status transitions.

    Entries are written only by ``RequestWorkflowService``.  The single
    mutation allowed afterwards is an administrative correction of the
    ``remarks`` text; statuses, actor and ``changed_at`` stay as written.
    """

    @staticmethod
    def append(
        *,
        doc_request: DocumentRequest,
        old_status: str | None,
        new_status: str,
        changed_by: Any,
        remarks: str = "",
        changed_at: datetime.datetime,
    ) -> RequestStatusLog:
        return RequestStatusLog.objects.create(
            request=doc_request,
            old_status=str(old_status) if old_status else None,
            new_status=str(new_status),
            changed_by=changed_by,
            remarks=remarks or "",
            changed_at=changed_at,
        )

    @staticmethod
    def history(request_id: Any) -> QuerySet:
        """Transitions of one request in the order they happened."""
        return (
            RequestStatusLog.objects
            .filter(request_id=request_id)
            .select_related("changed_by")
            .order_by("changed_at", "id")
        )

    def list_all(self) -> list[RequestStatusLog]:
        qs = RequestStatusLog.objects.select_related("changed_by").order_by("-changed_at", "-id")
        return self._with_changer_names(qs)

    def list_for_owner(self, user_id: Any) -> list[RequestStatusLog]:
        """Logs of every request owned by ``user_id``, newest first."""
        qs = (
            RequestStatusLog.objects
            .filter(request__user_id=user_id)
            .select_related("changed_by")
            .order_by("-changed_at", "-id")
        )
        return self._with_changer_names(qs)

    def list_for_request(self, request_id: Any) -> list[RequestStatusLog]:
        return self._with_changer_names(self.history(request_id))

    def get(self, log_id: Any) -> RequestStatusLog:
        try:
            log = RequestStatusLog.objects.select_related("changed_by", "request").get(pk=log_id)
        except (RequestStatusLog.DoesNotExist, ValueError, TypeError):
            raise NotFound.for_resource("RequestStatusLog", "id", log_id)
        return self._with_changer_names([log])[0]

    def correct_remarks(self, log_id: Any, remarks: str) -> RequestStatusLog:
        log = self.get(log_id)
        log.remarks = remarks or ""
        log.save(update_fields=["remarks"])
        logger.info("Status log pk=%s remarks corrected", log.pk)
        return log

    @staticmethod
    def _with_changer_names(logs: Iterable[RequestStatusLog]) -> list[RequestStatusLog]:
        """``changed_by_name`` is shown only for registrar actors."""
        logs = list(logs)
        for log in logs:
            changer = log.changed_by
            log.changed_by_name = (
                changer.display_name
                if changer is not None and getattr(changer, "is_registrar", False)
                else None
            )
        return logs


# ═══════════════════════════════════════════════════════════════════
#  Claim Slip Service
# ═══════════════════════════════════════════════════════════════════


class ClaimSlipService:
    """
    Issues at most one claim slip per request.

    ``issue`` looks the slip up before creating it; if a concurrent
    approval wins the race the unique constraint fires inside a
    savepoint and the existing slip is returned instead.
    """

    @staticmethod
    def find_by_request_id(request_id: Any) -> ClaimSlip | None:
        return ClaimSlip.objects.filter(request_id=request_id).select_related("issued_by").first()

    def get_for_request(self, request_id: Any) -> ClaimSlip:
        slip = self.find_by_request_id(request_id)
        if slip is None:
            raise NotFound.for_resource("ClaimSlip", "requestId", request_id)
        return slip

    def issue(
        self,
        *,
        doc_request: DocumentRequest,
        issued_by: Any,
        today: datetime.date,
    ) -> tuple[ClaimSlip, bool]:
        """
        Return ``(slip, created)``.  An existing slip is returned untouched.
        """
        existing = self.find_by_request_id(doc_request.pk)
        if existing is not None:
            return existing, False

        date_ready = (
            timezone.localdate(doc_request.date_ready)
            if doc_request.date_ready is not None
            else today
        )
        slip, created = create_or_get_existing(
            lambda: ClaimSlip.objects.create(
                request=doc_request,
                claim_number=build_claim_number(doc_request.pk, today.year),
                date_ready=date_ready,
                issued_by=issued_by,
            ),
            lambda: ClaimSlip.objects.get(request=doc_request),
        )
        if created:
            logger.info("Issued claim slip %s for request pk=%d", slip.claim_number, doc_request.pk)
        else:
            logger.info("Claim slip for request pk=%d already issued concurrently", doc_request.pk)
        return slip, created


# ═══════════════════════════════════════════════════════════════════
#  Creation Service
# ═══════════════════════════════════════════════════════════════════


class RequestCreationService:
    """
    Creates new requests on behalf of students.

    The request is stored as PENDING regardless of input, then every
    registrar receives a notification.  A notification that fails to
    save is logged and skipped; it never undoes the request.
    """

    def __init__(
        self,
        *,
        catalog: DocumentCatalog | None = None,
        users: UserDirectory | None = None,
        notifications: type[NotificationService] = NotificationService,
    ) -> None:
        self.catalog = catalog or DocumentCatalog()
        self.users = users or UserDirectory()
        self.notifications = notifications

    def create_request(
        self,
        *,
        user: Any,
        document_id: Any,
        copies: Any = 1,
        date_needed: datetime.date | None = None,
        purpose: str = "",
    ) -> DocumentRequest:
        """
        Raises:
            InvalidArgument: ``copies`` is not a positive integer.
            NotFound:        ``document_id`` does not resolve.
        """
        copies = _positive_copies(copies)

        with transaction.atomic():
            document = self.catalog.find_by_id(document_id)
            doc_request = DocumentRequest.objects.create(
                user=user,
                document=document,
                status=RequestStatus.PENDING,
                copies=copies,
                date_needed=date_needed,
                purpose=purpose or "",
            )
            self._notify_registrars(doc_request)

        logger.info(
            "Request %s created by user pk=%s for document '%s'",
            doc_request.reference_code, user.pk, document.name,
        )
        return doc_request

    def _notify_registrars(self, doc_request: DocumentRequest) -> int:
        student = doc_request.user
        label = student.display_name
        if student.student_id:
            label = f"{label} ({student.student_id})"
        payload = {
            "reference": doc_request.reference_code,
            "student": label,
            "document": doc_request.document.name,
        }

        sent = 0
        for registrar in self.users.find_registrars():
            try:
                with transaction.atomic():
                    self.notifications.create(
                        recipients=registrar,
                        event_type="request_submitted",
                        payload=payload,
                        related_request=doc_request,
                        actor=student,
                    )
            except Exception:
                logger.exception(
                    "Could not notify registrar pk=%s about %s",
                    registrar.pk, doc_request.reference_code,
                )
                continue
            sent += 1
        return sent


# ═══════════════════════════════════════════════════════════════════
#  Workflow Service
# ═══════════════════════════════════════════════════════════════════


class RequestWorkflowService:
    """
    **The status-transition gateway.**

    ``change_status`` is the only way a request's ``status`` changes.  The
    service does not restrict which status may follow which; restricting
    *who* may call it (registrars) is the view's job.
    """

    def __init__(
        self,
        *,
        enrichment: RequestEnrichmentService | None = None,
        audit_log: StatusLogService | None = None,
        claim_slips: ClaimSlipService | None = None,
        notifications: type[NotificationService] = NotificationService,
        clock: Callable[[], datetime.datetime] = timezone.now,
    ) -> None:
        self.enrichment = enrichment or RequestEnrichmentService()
        self.audit_log = audit_log or StatusLogService()
        self.claim_slips = claim_slips or ClaimSlipService()
        self.notifications = notifications
        self.clock = clock

    def change_status(
        self,
        request_id: Any,
        new_status: str,
        *,
        acting_user: Any,
        remarks: str = "",
        date_ready_hint: Any = None,
    ) -> DocumentRequest:
        """
        Move a request to ``new_status`` and apply every side effect.

        Parameters
        ----------
        request_id : int
            PK of the request.
        new_status : str
            Status name, matched case-insensitively.
        acting_user : User
            The registrar performing the change (recorded as
            ``changed_by`` and ``issued_by``).
        remarks : str
            Optional note stored on the audit entry and appended to the
            owner's notification.
        date_ready_hint : str | date | None
            Preferred ready date, used only on the first approval.
            Unparseable hints are ignored.

        Returns
        -------
        DocumentRequest
            The updated, enriched request.

        Raises
        ------
        NotFound
            No request with ``request_id``.
        InvalidArgument
            ``new_status`` is not a known status, or equals the current one.
        """
        target = RequestStatus.parse(new_status)

        with transaction.atomic():
            doc_request = lock_for_update(
                DocumentRequest, request_id, related=("user", "document"),
            )
            if target is None:
                raise InvalidArgument(f"Invalid status value: {new_status}", value=new_status)

            old_status = doc_request.status
            if old_status == target:
                raise InvalidArgument(
                    f"Request {doc_request.reference_code} is already in status {target.value}.",
                    value=new_status,
                )

            now = self.clock()
            today = timezone.localdate(now)

            # ── 1–2. Status + first-approval date_ready ──────────────
            doc_request.status = target
            update_fields = ["status", "updated_at"]
            if (
                target == RequestStatus.APPROVED
                and old_status != RequestStatus.APPROVED
                and doc_request.date_ready is None
            ):
                day = parse_date_ready_hint(date_ready_hint) or today
                doc_request.date_ready = pin_to_noon(day)
                update_fields.append("date_ready")
            doc_request.save(update_fields=update_fields)

            # ── 3. Audit ─────────────────────────────────────────────
            self.audit_log.append(
                doc_request=doc_request,
                old_status=old_status,
                new_status=target,
                changed_by=acting_user,
                remarks=remarks,
                changed_at=now,
            )

            # ── 4. Claim slip ────────────────────────────────────────
            if target == RequestStatus.APPROVED:
                self.claim_slips.issue(
                    doc_request=doc_request,
                    issued_by=acting_user,
                    today=today,
                )

            # ── 5. Owner notification ────────────────────────────────
            self._notify_owner(doc_request, target, remarks, acting_user)

        logger.info(
            "Request %s transitioned %s → %s by user pk=%s",
            doc_request.reference_code, old_status, target.value,
            getattr(acting_user, "pk", None),
        )
        return self.enrichment.enrich(doc_request)

    def _notify_owner(
        self,
        doc_request: DocumentRequest,
        target: RequestStatus,
        remarks: str,
        acting_user: Any,
    ) -> None:
        payload = {
            "reference": doc_request.reference_code,
            "document": doc_request.document.name,
            "status": target.value,
        }
        if remarks and remarks.strip():
            payload["suffix"] = f"Remarks: {remarks.strip()}"
        self.notifications.create(
            recipients=doc_request.user,
            event_type="request_status_changed",
            payload=payload,
            related_request=doc_request,
            actor=acting_user,
        )


# ═══════════════════════════════════════════════════════════════════
#  Edit Service
# ═══════════════════════════════════════════════════════════════════


class RequestEditService:
    """
    Plain field edits and deletion — no audit entry, claim slip or
    notification.  Owner, status and ``date_ready`` are not editable
    here; status moves go through ``RequestWorkflowService``.
    """

    def __init__(
        self,
        *,
        catalog: DocumentCatalog | None = None,
        enrichment: RequestEnrichmentService | None = None,
    ) -> None:
        self.catalog = catalog or DocumentCatalog()
        self.enrichment = enrichment or RequestEnrichmentService()

    def update_fields(self, request_id: Any, payload: dict[str, Any]) -> DocumentRequest:
        """
        Raises:
            InvalidArgument: ``payload`` names a non-editable field, or
                             ``copies`` is not a positive integer.
            NotFound:        Unknown request, or unknown ``document``.
        """
        rejected = sorted(set(payload) - EDITABLE_FIELDS)
        if rejected:
            raise InvalidArgument(
                f"Fields cannot be updated: {', '.join(rejected)}.",
                value=rejected,
            )

        with transaction.atomic():
            doc_request = lock_for_update(
                DocumentRequest, request_id, related=("user", "document"),
            )
            update_fields = ["updated_at"]
            if "document" in payload:
                doc_request.document = self.catalog.find_by_id(payload["document"])
                update_fields.append("document")
            if "copies" in payload:
                doc_request.copies = _positive_copies(payload["copies"])
                update_fields.append("copies")
            if "date_needed" in payload:
                doc_request.date_needed = payload["date_needed"]
                update_fields.append("date_needed")
            if "purpose" in payload:
                doc_request.purpose = payload["purpose"] or ""
                update_fields.append("purpose")
            doc_request.save(update_fields=update_fields)

        logger.info(
            "Request %s fields updated: %s",
            doc_request.reference_code, ", ".join(sorted(payload)) or "(none)",
        )
        return self.enrichment.enrich(doc_request)

    @staticmethod
    def delete(request_id: Any) -> None:
        doc_request = RequestQueryService().get_raw(request_id)
        reference = doc_request.reference_code
        doc_request.delete()
        logger.info("Request %s deleted", reference)


def _positive_copies(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidArgument("copies must be a positive integer.", value=value)
    try:
        copies = int(value)
    except (TypeError, ValueError):
        raise InvalidArgument("copies must be a positive integer.", value=value)
    if copies < 1:
        raise InvalidArgument("copies must be a positive integer.", value=value)
    return copies
