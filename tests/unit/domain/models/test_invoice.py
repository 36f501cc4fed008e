"""
Unit tests for Invoice domain model.
"""

import pytest
from datetime import date
from decimal import Decimal

from crudhub.domain.models.base import ValidationError
from crudhub.domain.models.invoice import (
    Invoice,
    InvoiceNumber,
    InvoiceStatus,
    InvoiceCreatedEvent,
    InvoicePatch,
    ALLOWED_TRANSITIONS
)


class TestInvoiceStatus:
    """Test cases for InvoiceStatus."""

    def test_parse_valid_status(self):
        """Test parsing each status value."""
        for status in InvoiceStatus:
            assert InvoiceStatus.parse(status.value) is status

    def test_parse_invalid_status(self):
        """Test that unknown statuses are rejected."""
        with pytest.raises(ValidationError, match="Invalid invoice status 'archived'"):
            InvoiceStatus.parse("archived")

    def test_terminal_statuses(self):
        """Test that only paid and cancelled are terminal."""
        terminal = {status for status in InvoiceStatus if status.is_terminal}
        assert terminal == {InvoiceStatus.PAID, InvoiceStatus.CANCELLED}

    def test_transition_graph_has_no_self_loops(self):
        """Test that no status can transition to itself."""
        for status, targets in ALLOWED_TRANSITIONS.items():
            assert status not in targets


class TestInvoiceNumber:
    """Test cases for InvoiceNumber value object."""

    def test_string_form(self):
        """Test the INV-YYYYMMDD-N format."""
        number = InvoiceNumber(issue_date=date(2024, 3, 5), sequence=12)
        assert str(number) == "INV-20240305-12"

    def test_from_string(self):
        """Test parsing a number back into its parts."""
        number = InvoiceNumber.from_string("INV-20240305-12")

        assert number.issue_date == date(2024, 3, 5)
        assert number.sequence == 12
        assert number.prefix == "INV"

    def test_from_string_invalid(self):
        """Test parsing malformed numbers."""
        with pytest.raises(ValidationError, match="Invalid invoice number format"):
            InvoiceNumber.from_string("INV-20240305")

        with pytest.raises(ValidationError, match="Invalid invoice number date"):
            InvoiceNumber.from_string("INV-20241305-1")

    def test_sequence_must_be_positive(self):
        """Test that the sequence starts at 1."""
        with pytest.raises(ValidationError, match="Invoice sequence must be positive"):
            InvoiceNumber(issue_date=date(2024, 3, 5), sequence=0)

    def test_day_prefix(self):
        """Test the part shared by every number of a day."""
        assert InvoiceNumber.day_prefix(date(2024, 3, 5)) == "INV-20240305-"
        assert InvoiceNumber.day_prefix(date(2024, 3, 5), "CRN") == "CRN-20240305-"

    def test_last_sequence(self):
        """Test the highest sequence taken under a day prefix."""
        numbers = ["INV-20240305-2", "INV-20240305-10", "INV-20240306-40", None, "INV-20240305-x"]

        assert InvoiceNumber.last_sequence(numbers, "INV-20240305-") == 10
        assert InvoiceNumber.last_sequence(numbers, "INV-20240307-") == 0


class TestInvoice:
    """Test cases for Invoice domain model."""

    def test_defaults(self):
        """Test invoice defaults."""
        invoice = Invoice(client_id=1, amount="100.50")

        assert invoice.status == InvoiceStatus.DRAFT
        assert invoice.amount == Decimal("100.50")
        assert invoice.number is None
        assert invoice.is_draft

    def test_status_string_is_parsed(self):
        """Test that a status given as a string becomes the enum."""
        invoice = Invoice(client_id=1, amount=Decimal("10"), status="sent")
        assert invoice.status is InvoiceStatus.SENT

    def test_assign_number(self):
        """Test assigning the generated number."""
        invoice = Invoice(client_id=1, amount=Decimal("10"), issue_date=date(2024, 3, 15))

        numbered = invoice.assign_number("INV-20240315-1")

        assert numbered.number == "INV-20240315-1"
        assert invoice.number is None
        events = numbered.pull_events()
        assert len(events) == 1
        assert isinstance(events[0], InvoiceCreatedEvent)

    def test_number_cannot_be_reassigned(self):
        """Test that the number is immutable once assigned."""
        invoice = Invoice(client_id=1, amount=Decimal("10"), number="INV-20240315-1")

        with pytest.raises(ValidationError, match="cannot be changed"):
            invoice.assign_number("INV-20240315-2")

    def test_days_until_due(self):
        """Test days until the due date."""
        invoice = Invoice(client_id=1, amount=Decimal("10"), due_date=date(2024, 3, 20))

        assert invoice.days_until_due(date(2024, 3, 15)) == 5
        assert invoice.days_until_due(date(2024, 3, 22)) == -2
        assert Invoice(client_id=1, amount=Decimal("10")).days_until_due(date(2024, 3, 15)) is None

    def test_to_dict(self):
        """Test dictionary representation."""
        invoice = Invoice(
            id=3,
            client_id=1,
            amount=Decimal("99.90"),
            status=InvoiceStatus.SENT,
            issue_date=date(2024, 3, 15)
        )

        data = invoice.to_dict()

        assert data["status"] == "sent"
        assert data["amount"] == "99.90"
        assert data["issue_date"] == "2024-03-15"
        assert data["due_date"] is None


class TestInvoicePatch:
    """Test cases for InvoicePatch."""

    def test_non_positive_amount_means_no_change(self):
        """Test that zero and negative amounts are not supplied values."""
        assert not InvoicePatch().has_amount
        assert not InvoicePatch(amount=Decimal("0")).has_amount
        assert not InvoicePatch(amount=Decimal("-5")).has_amount
        assert InvoicePatch(amount=Decimal("0.01")).has_amount

    def test_empty_description_means_no_change(self):
        """Test that an empty description is not a supplied value."""
        assert not InvoicePatch(description="").has_description
        assert InvoicePatch(description="Consulting").has_description

    def test_has_dates(self):
        """Test date presence."""
        assert not InvoicePatch().has_dates
        assert InvoicePatch(due_date=date(2024, 4, 1)).has_dates
