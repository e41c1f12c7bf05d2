from django.core.validators import MinValueValidator
from django.db import models

from core.constants import PaymentStatus
from applications.models import Application


class Payment(models.Model):
    """Monthly dormitory fee for an accepted application"""
    STATUS_CHOICES = PaymentStatus.CHOICES

    application = models.ForeignKey(Application, on_delete=models.CASCADE, related_name='payments')
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    period = models.CharField(max_length=7, help_text="Billing month, YYYY-MM")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PaymentStatus.PENDING)
    due_date = models.DateField()
    paid_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-period', '-created_at']
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        constraints = [
            models.UniqueConstraint(fields=['application', 'period'], name='unique_payment_per_period'),
        ]
        indexes = [
            models.Index(fields=['status', 'due_date'], name='payment_status_due_idx'),
            models.Index(fields=['application', 'status'], name='payment_app_status_idx'),
        ]

    def __str__(self):
        return f"{self.application.student_index_number} - {self.period} - {self.get_status_display()}"

    @property
    def is_paid(self):
        return self.status == PaymentStatus.PAID
