"""Invoice lifecycle service.
Validation, status transitions, lateness and deletion guards for invoices and
the clients that own them.
"""

from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, List, Union

from crudhub.domain.models.base import (
    ValidationError,
    TransitionError,
    ReferentialGuardError
)
from crudhub.domain.models.client import Client, ClientPatch
from crudhub.domain.models.invoice import (
    Invoice,
    InvoicePatch,
    InvoiceStatus,
    InvoiceStatusChangedEvent,
    ALLOWED_TRANSITIONS,
    OVERDUE_ELIGIBLE_STATUSES,
    DESCRIPTION_MAX_LENGTH
)


class InvoiceLifecycleService:
    """
    Domain service enforcing the invoice lifecycle rules.

    Every method is a pure function of its arguments: nothing here reads
    storage, reads the clock, logs or mutates its inputs. Lookups such as
    client existence and invoice counts are done by the caller and passed in.
    """

    # Validation

    def validate_for_create(self, invoice: Invoice) -> None:
        """
        Validate a new invoice, stopping at the first failing rule.
        Client existence is checked by the caller beforehand.
        """
        if not invoice.client_id:
            raise ValidationError("Client ID is required", "client_id")

        if invoice.amount is None or invoice.amount <= 0:
            raise ValidationError("Amount must be greater than 0", "amount")

        self._validate_description(invoice.description)
        self._validate_dates(invoice.issue_date, invoice.due_date)

    def validate_for_update(self, existing: Invoice, patch: InvoicePatch) -> None:
        """
        Validate only the fields the patch supplies.
        An amount of zero or less means "no change" and is not validated.
        """
        if patch.has_description:
            self._validate_description(patch.description)

        if patch.has_dates:
            self._validate_dates(
                patch.issue_date or existing.issue_date,
                patch.due_date or existing.due_date
            )

    def apply_update(self, existing: Invoice, patch: InvoicePatch) -> Invoice:
        """
        Validate and apply a patch, returning the updated invoice.
        A supplied status goes through the transition guard.
        """
        self.validate_for_update(existing, patch)

        updated = existing
        if patch.status is not None:
            updated = self.apply_status_change(updated, patch.status)

        changes = {}
        if patch.has_amount:
            changes["amount"] = patch.amount
        if patch.issue_date is not None:
            changes["issue_date"] = patch.issue_date
        if patch.due_date is not None:
            changes["due_date"] = patch.due_date
        if patch.has_description:
            changes["description"] = patch.description

        patched = replace(updated, **changes)
        if updated is not existing:
            for event in updated.pull_events():
                patched.add_event(event)
        return patched

    # Status transitions

    def can_transition(self, from_status: InvoiceStatus, to_status: InvoiceStatus) -> bool:
        """Check whether from_status -> to_status is an edge of the status graph."""
        return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())

    def apply_status_change(self, invoice: Invoice, new_status: InvoiceStatus) -> Invoice:
        """
        Return a copy of the invoice with the new status.
        Raises TransitionError for any edge not in the graph, self-loops included.
        """
        if not self.can_transition(invoice.status, new_status):
            raise TransitionError(invoice.status, new_status)

        changed = replace(invoice, status=new_status)
        changed.add_event(InvoiceStatusChangedEvent(invoice.id, invoice.status, new_status))
        return changed

    # Lateness

    def is_overdue(self, invoice: Invoice, as_of: Union[date, datetime]) -> bool:
        """
        Check whether an invoice is late as of the given day.
        Only sent and overdue invoices can be late, whatever their due date.
        """
        if invoice.status not in OVERDUE_ELIGIBLE_STATUSES:
            return False

        if invoice.due_date is None:
            return False

        as_of_date = as_of.date() if isinstance(as_of, datetime) else as_of
        return as_of_date > invoice.due_date

    def flag_overdue(self, invoices: Iterable[Invoice], as_of: Union[date, datetime]) -> List[Invoice]:
        """
        Move every late sent invoice to the overdue status.
        Returns only the invoices that changed.
        """
        return [
            self.apply_status_change(invoice, InvoiceStatus.OVERDUE)
            for invoice in invoices
            if invoice.status == InvoiceStatus.SENT and self.is_overdue(invoice, as_of)
        ]

    # Deletion guards

    def can_delete_client(self, client_id: int, live_invoice_count: int) -> bool:
        """A client can be deleted only when no live invoice references it."""
        return live_invoice_count == 0

    def ensure_client_deletable(self, client_id: int, live_invoice_count: int) -> None:
        """Raise ReferentialGuardError when the client still has live invoices."""
        if not self.can_delete_client(client_id, live_invoice_count):
            raise ReferentialGuardError(
                "Cannot delete client with existing invoices",
                entity_type="Client",
                entity_id=client_id,
                blocking_count=live_invoice_count,
                count_label="invoice_count"
            )

    def can_delete_invoice(self, status: InvoiceStatus) -> bool:
        """Every invoice except a paid one can be deleted."""
        return status != InvoiceStatus.PAID

    def ensure_invoice_deletable(self, invoice: Invoice) -> None:
        """Raise ReferentialGuardError when the invoice is paid."""
        if not self.can_delete_invoice(invoice.status):
            raise ReferentialGuardError(
                "Cannot delete paid invoice",
                entity_type="Invoice",
                entity_id=invoice.id
            )

    # Clients

    def apply_client_patch(self, existing: Client, patch: ClientPatch) -> Client:
        """
        Return the client with every non-empty patch field applied.
        Fields cannot be cleared through a patch.
        """
        return existing.with_patch(patch)

    # Helpers

    def _validate_description(self, description) -> None:
        if description and len(description) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"Description too long (max {DESCRIPTION_MAX_LENGTH} characters)",
                "description"
            )

    def _validate_dates(self, issue_date, due_date) -> None:
        if issue_date is not None and due_date is not None and due_date < issue_date:
            raise ValidationError("Due date cannot be before issue date", "due_date")
