"""
Unit tests for InvoiceLifecycleService domain service.
"""

import itertools
import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal

from crudhub.domain.models.base import ValidationError, TransitionError, ReferentialGuardError
from crudhub.domain.models.client import Client, ClientPatch
from crudhub.domain.models.invoice import (
    Invoice,
    InvoicePatch,
    InvoiceStatus,
    InvoiceStatusChangedEvent,
    ALLOWED_TRANSITIONS
)
from crudhub.domain.services.lifecycle_service import InvoiceLifecycleService
from crudhub.domain.services.numbering_service import NumberingService


TODAY = date(2024, 3, 15)


def make_invoice(**overrides) -> Invoice:
    fields = dict(
        id=1,
        number="INV-20240115-1",
        client_id=1,
        amount=Decimal("100.00"),
        status=InvoiceStatus.DRAFT,
        issue_date=date(2024, 1, 15),
        due_date=date(2024, 2, 15),
        description="Consulting"
    )
    fields.update(overrides)
    return Invoice(**fields)


class TestValidateForCreate:
    """Test cases for invoice creation rules."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = InvoiceLifecycleService()

    @pytest.mark.parametrize("amount", ["0", "-0.01", "-100"])
    def test_non_positive_amount_rejected(self, amount):
        """Test that every amount of zero or less is rejected."""
        with pytest.raises(ValidationError, match="Amount must be greater than 0"):
            self.service.validate_for_create(make_invoice(amount=Decimal(amount)))

    @pytest.mark.parametrize("amount", ["0.01", "1", "99999999.99"])
    def test_positive_amount_accepted(self, amount):
        """Test that positive amounts with valid fields pass."""
        self.service.validate_for_create(make_invoice(amount=Decimal(amount)))

    def test_zero_amount_scenario(self):
        """Test an invoice for 0 issued 2024-01-15 and due 2024-02-15."""
        invoice = make_invoice(amount=Decimal("0"), issue_date=date(2024, 1, 15), due_date=date(2024, 2, 15))

        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_for_create(invoice)

        assert exc_info.value.field == "amount"

    def test_due_before_issue_rejected(self):
        """Test an invoice due before it is issued."""
        invoice = make_invoice(issue_date=date(2024, 2, 15), due_date=date(2024, 1, 15))

        with pytest.raises(ValidationError, match="Due date cannot be before issue date"):
            self.service.validate_for_create(invoice)

    def test_due_on_issue_date_accepted(self):
        """Test that an invoice can be due the day it is issued."""
        self.service.validate_for_create(make_invoice(issue_date=TODAY, due_date=TODAY))

    def test_missing_due_date_accepted(self):
        """Test that the due date is optional."""
        self.service.validate_for_create(make_invoice(due_date=None))

    def test_client_required(self):
        """Test that a client reference is required."""
        with pytest.raises(ValidationError, match="Client ID is required"):
            self.service.validate_for_create(make_invoice(client_id=0))

    def test_description_limit(self):
        """Test the 500 character description limit."""
        self.service.validate_for_create(make_invoice(description="x" * 500))

        with pytest.raises(ValidationError, match="Description too long"):
            self.service.validate_for_create(make_invoice(description="x" * 501))

    def test_rules_checked_in_order(self):
        """Test that the first failing rule wins."""
        invoice = make_invoice(
            client_id=0,
            amount=Decimal("0"),
            description="x" * 501,
            issue_date=date(2024, 2, 15),
            due_date=date(2024, 1, 15)
        )
        with pytest.raises(ValidationError, match="Client ID is required"):
            self.service.validate_for_create(invoice)

        invoice.client_id = 1
        with pytest.raises(ValidationError, match="Amount must be greater than 0"):
            self.service.validate_for_create(invoice)

        invoice.amount = Decimal("10")
        with pytest.raises(ValidationError, match="Description too long"):
            self.service.validate_for_create(invoice)

        invoice.description = "ok"
        with pytest.raises(ValidationError, match="Due date cannot be before issue date"):
            self.service.validate_for_create(invoice)


class TestValidateForUpdate:
    """Test cases for partial invoice updates."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = InvoiceLifecycleService()

    def test_absent_fields_not_validated(self):
        """Test that a description-only patch ignores an invalid stored amount."""
        existing = make_invoice(amount=Decimal("0"))
        self.service.validate_for_update(existing, InvoicePatch(description="New text"))

    def test_due_date_checked_against_stored_issue_date(self):
        """Test that a new due date is checked against the current issue date."""
        existing = make_invoice(issue_date=date(2024, 1, 15), due_date=None)

        with pytest.raises(ValidationError, match="Due date cannot be before issue date"):
            self.service.validate_for_update(existing, InvoicePatch(due_date=date(2024, 1, 1)))

    def test_issue_date_checked_against_stored_due_date(self):
        """Test that a new issue date is checked against the current due date."""
        existing = make_invoice(issue_date=date(2024, 1, 15), due_date=date(2024, 2, 15))

        with pytest.raises(ValidationError, match="Due date cannot be before issue date"):
            self.service.validate_for_update(existing, InvoicePatch(issue_date=date(2024, 3, 1)))

    def test_long_description_rejected(self):
        """Test the description limit on updates."""
        with pytest.raises(ValidationError, match="Description too long"):
            self.service.validate_for_update(make_invoice(), InvoicePatch(description="x" * 501))


class TestApplyUpdate:
    """Test cases for applying invoice patches."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = InvoiceLifecycleService()

    def test_supplied_fields_applied(self):
        """Test that supplied fields change and the rest stay."""
        existing = make_invoice()

        updated = self.service.apply_update(
            existing,
            InvoicePatch(amount=Decimal("250.00"), due_date=date(2024, 3, 1))
        )

        assert updated.amount == Decimal("250.00")
        assert updated.due_date == date(2024, 3, 1)
        assert updated.description == "Consulting"
        assert updated.number == existing.number
        assert existing.amount == Decimal("100.00")

    def test_zero_amount_and_empty_description_keep_values(self):
        """Test the "no change" markers."""
        updated = self.service.apply_update(make_invoice(), InvoicePatch(amount=Decimal("0"), description=""))

        assert updated.amount == Decimal("100.00")
        assert updated.description == "Consulting"

    def test_status_goes_through_guard(self):
        """Test that a patched status must be a legal transition."""
        with pytest.raises(TransitionError):
            self.service.apply_update(make_invoice(status=InvoiceStatus.PAID), InvoicePatch(status=InvoiceStatus.SENT))

    def test_status_change_event_kept(self):
        """Test that the status change event survives the field update."""
        updated = self.service.apply_update(
            make_invoice(),
            InvoicePatch(status=InvoiceStatus.SENT, description="Sent to client")
        )

        assert updated.status == InvoiceStatus.SENT
        assert updated.description == "Sent to client"
        events = updated.pull_events()
        assert len(events) == 1
        assert isinstance(events[0], InvoiceStatusChangedEvent)

    def test_existing_invoice_events_untouched(self):
        """Test that events pending on the input stay there."""
        existing = make_invoice()
        existing.add_event(InvoiceStatusChangedEvent(1, InvoiceStatus.DRAFT, InvoiceStatus.SENT))

        updated = self.service.apply_update(existing, InvoicePatch(description="Other"))

        assert updated.pull_events() == []
        assert len(existing.pull_events()) == 1


class TestStatusTransitions:
    """Test cases for the status transition guard."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = InvoiceLifecycleService()

    def test_graph_edges_allowed(self):
        """Test every listed edge."""
        for from_status, targets in ALLOWED_TRANSITIONS.items():
            for to_status in targets:
                assert self.service.can_transition(from_status, to_status)

    def test_unlisted_pairs_rejected(self):
        """Test every pair outside the graph, self-loops included."""
        for from_status, to_status in itertools.product(InvoiceStatus, repeat=2):
            if to_status not in ALLOWED_TRANSITIONS[from_status]:
                assert not self.service.can_transition(from_status, to_status)

    @pytest.mark.parametrize("status", list(InvoiceStatus))
    def test_self_loop_rejected(self, status):
        """Test that no status can transition to itself."""
        assert not self.service.can_transition(status, status)

        with pytest.raises(TransitionError):
            self.service.apply_status_change(make_invoice(status=status), status)

    def test_paid_to_sent_rejected(self):
        """Test moving a paid invoice back to sent."""
        with pytest.raises(TransitionError) as exc_info:
            self.service.apply_status_change(make_invoice(status=InvoiceStatus.PAID), InvoiceStatus.SENT)

        assert exc_info.value.details == {"from_status": "paid", "to_status": "sent"}

    def test_sent_to_overdue(self):
        """Test moving a sent invoice to overdue."""
        invoice = make_invoice(status=InvoiceStatus.SENT)

        changed = self.service.apply_status_change(invoice, InvoiceStatus.OVERDUE)

        assert changed.status == InvoiceStatus.OVERDUE
        assert changed.amount == invoice.amount
        assert changed.due_date == invoice.due_date
        assert changed.number == invoice.number
        assert invoice.status == InvoiceStatus.SENT


class TestOverdue:
    """Test cases for the overdue predicate."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = InvoiceLifecycleService()

    @pytest.mark.parametrize("status", [InvoiceStatus.DRAFT, InvoiceStatus.PAID, InvoiceStatus.CANCELLED])
    def test_never_overdue_statuses(self, status):
        """Test that draft, paid and cancelled invoices are never late."""
        invoice = make_invoice(status=status, due_date=date(2000, 1, 1))
        assert not self.service.is_overdue(invoice, TODAY)

    def test_sent_due_yesterday(self):
        """Test a sent invoice due yesterday, then the same invoice paid."""
        invoice = make_invoice(status=InvoiceStatus.SENT, due_date=TODAY - timedelta(days=1))

        assert self.service.is_overdue(invoice, TODAY)

        invoice.status = InvoiceStatus.PAID
        assert not self.service.is_overdue(invoice, TODAY)

    def test_due_today_not_late(self):
        """Test that an invoice is not late on its due date."""
        invoice = make_invoice(status=InvoiceStatus.SENT, due_date=TODAY)

        assert not self.service.is_overdue(invoice, TODAY)
        assert not self.service.is_overdue(invoice, datetime(2024, 3, 15, 23, 59))

    def test_datetime_reference(self):
        """Test a datetime reference the day after the due date."""
        invoice = make_invoice(status=InvoiceStatus.OVERDUE, due_date=TODAY)
        assert self.service.is_overdue(invoice, datetime(2024, 3, 16, 0, 1))

    def test_no_due_date(self):
        """Test that an invoice without due date is never late."""
        assert not self.service.is_overdue(make_invoice(status=InvoiceStatus.SENT, due_date=None), TODAY)

    def test_flag_overdue(self):
        """Test that only late sent invoices are flagged."""
        late_sent = make_invoice(id=1, status=InvoiceStatus.SENT, due_date=date(2024, 3, 1))
        current_sent = make_invoice(id=2, status=InvoiceStatus.SENT, due_date=date(2024, 4, 1))
        already_overdue = make_invoice(id=3, status=InvoiceStatus.OVERDUE, due_date=date(2024, 3, 1))
        late_draft = make_invoice(id=4, status=InvoiceStatus.DRAFT, due_date=date(2024, 3, 1))

        flagged = self.service.flag_overdue([late_sent, current_sent, already_overdue, late_draft], TODAY)

        assert [invoice.id for invoice in flagged] == [1]
        assert flagged[0].status == InvoiceStatus.OVERDUE
        assert late_sent.status == InvoiceStatus.SENT


class TestDeletionGuards:
    """Test cases for client and invoice deletion guards."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = InvoiceLifecycleService()

    def test_client_without_invoices_deletable(self):
        """Test a client with no live invoices."""
        assert self.service.can_delete_client(1, 0)
        self.service.ensure_client_deletable(1, 0)

    @pytest.mark.parametrize("count", [1, 2, 50])
    def test_client_with_invoices_blocked(self, count):
        """Test a client with live invoices."""
        assert not self.service.can_delete_client(1, count)

    def test_client_guard_carries_count(self):
        """Test a client owning two live invoices."""
        with pytest.raises(ReferentialGuardError, match="Cannot delete client with existing invoices") as exc_info:
            self.service.ensure_client_deletable(1, 2)

        assert exc_info.value.blocking_count == 2
        assert exc_info.value.details == {"invoice_count": 2}

    def test_only_paid_invoices_blocked(self):
        """Test the invoice deletion guard for every status."""
        for status in InvoiceStatus:
            assert self.service.can_delete_invoice(status) == (status != InvoiceStatus.PAID)

    def test_paid_invoice_guard(self):
        """Test deleting a paid invoice, then an overdue one."""
        with pytest.raises(ReferentialGuardError, match="Cannot delete paid invoice"):
            self.service.ensure_invoice_deletable(make_invoice(status=InvoiceStatus.PAID))

        self.service.ensure_invoice_deletable(make_invoice(status=InvoiceStatus.OVERDUE))


class TestClientPatchSemantics:
    """Test cases for client patches through the service."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = InvoiceLifecycleService()
        self.client = Client(id=1, name="Acme Corp", email="billing@acme.com", phone="555-0100")

    def test_empty_patch_is_identity(self):
        """Test that an empty patch returns an equal client."""
        assert self.service.apply_client_patch(self.client, ClientPatch()) == self.client

    def test_empty_strings_do_not_clear(self):
        """Test that empty strings keep the existing values."""
        patched = self.service.apply_client_patch(self.client, ClientPatch(phone="", address=""))
        assert patched == self.client


class TestNumberRoundTrip:
    """Generated numbers parse back to their inputs."""

    @pytest.mark.parametrize("issue_date,count", [
        (date(2024, 1, 15), 0),
        (date(2024, 12, 31), 9),
        (date(2025, 2, 28), 123),
    ])
    def test_round_trip(self, issue_date, count):
        """Test that the parsed number yields the date and count + 1."""
        service = NumberingService()

        parsed = service.parse_invoice_number(service.generate_invoice_number(issue_date, count))

        assert parsed.issue_date == issue_date
        assert parsed.sequence == count + 1
