"""Numbering service for generating invoice numbers.
Numbers have the form INV-YYYYMMDD-N where N is the same-day sequence.
"""

from datetime import date

from crudhub.domain.models.base import ValidationError
from crudhub.domain.models.invoice import InvoiceNumber, INVOICE_NUMBER_PREFIX


class NumberingService:
    """
    Domain service for invoice numbers.
    Pure: the caller supplies the highest sequence already taken for the day.
    Uniqueness is only as good as that value, so persistence keeps a
    unique constraint on the number as the final word.
    """

    def __init__(self, prefix: str = INVOICE_NUMBER_PREFIX):
        self.prefix = prefix

    def generate_invoice_number(self, issue_date: date, same_day_count: int) -> str:
        """
        Generate the number for the next invoice issued on issue_date.
        """
        if issue_date is None:
            raise ValidationError("Issue date is required to number an invoice", "issue_date")

        if same_day_count < 0:
            raise ValidationError("Same-day invoice count cannot be negative", "same_day_count")

        return str(InvoiceNumber(
            issue_date=issue_date,
            sequence=same_day_count + 1,
            prefix=self.prefix
        ))

    def parse_invoice_number(self, number: str) -> InvoiceNumber:
        """
        Parse a generated number back into its issue date and sequence.
        """
        parsed = InvoiceNumber.from_string(number)
        if parsed.prefix != self.prefix:
            raise ValidationError(
                f"Invoice number '{number}' does not use prefix '{self.prefix}'",
                "number"
            )
        return parsed
