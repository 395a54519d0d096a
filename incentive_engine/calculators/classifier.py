"""
Record Classifier

Labels appointment records as approved, cancelled or pending from their
free-text status.
"""

from ..models import AppointmentRecord, RecordStatus, StatusCounts


class RecordClassifier:
    """Classifies records by status text."""

    APPROVED_STATUS = "approved"
    # Checked in order; one record carries one status so ties are not expected
    CANCELLED_KEYWORDS = ("cancel", "reject", "credited", "declined")

    def classify(self, record: AppointmentRecord) -> RecordStatus:
        """
        Classify one record.

        - Approved: status is exactly "approved" (case-insensitive, trimmed)
        - Cancelled: status contains any of CANCELLED_KEYWORDS
        - Pending: anything else, including an empty status
        """
        status = (record.status or "").strip().lower()

        if status == self.APPROVED_STATUS:
            return RecordStatus.APPROVED

        for keyword in self.CANCELLED_KEYWORDS:
            if keyword in status:
                return RecordStatus.CANCELLED

        return RecordStatus.PENDING

    def classify_all(self, records: list[AppointmentRecord]) -> list[RecordStatus]:
        return [self.classify(record) for record in records]

    def count(self, records: list[AppointmentRecord]) -> StatusCounts:
        """Partition records into approved / cancelled / pending totals."""
        return self.tally(self.classify_all(records))

    @staticmethod
    def tally(classifications: list[RecordStatus]) -> StatusCounts:
        counts = StatusCounts()
        for label in classifications:
            if label is RecordStatus.APPROVED:
                counts.approved += 1
            elif label is RecordStatus.CANCELLED:
                counts.cancelled += 1
            else:
                counts.pending += 1
        return counts
