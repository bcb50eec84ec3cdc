from django.db import models


class Payment(models.Model):
    UNPAID = "UNPAID"
    PAID = "PAID"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    STATUSES = [
        (UNPAID, "Unpaid"),
        (PAID, "Paid"),
        (FAILED, "Failed"),
        (CANCELLED, "Cancelled"),
    ]
    TERMINAL_STATUSES = frozenset({PAID, FAILED, CANCELLED})

    booking = models.OneToOneField(
        "bookings.Booking",
        on_delete=models.CASCADE,
        related_name="+",
    )
    transaction_id = models.CharField(max_length=64, unique=True, editable=False)
    amount = models.DecimalField(max_digits=12, decimal_places=2, editable=False)
    status = models.CharField(max_length=12, choices=STATUSES, default=UNPAID)
    gateway_data = models.JSONField(default=dict, blank=True)
    invoice_url = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.transaction_id} [{self.status}]"

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES
