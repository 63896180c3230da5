from django.db import models
from certificates.models import Certificate


class EmailReport(models.Model):
    """One delivery attempt of a certificate email."""
    STATUS_SUCCESS = 'success'
    STATUS_FAILED = 'failed'
    STATUS_CHOICES = (
        (STATUS_SUCCESS, 'Success'),
        (STATUS_FAILED, 'Failed'),
    )

    certificate = models.ForeignKey(Certificate, on_delete=models.CASCADE, related_name='email_reports')
    sent_at = models.DateTimeField(auto_now_add=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES)
    error_message = models.TextField(blank=True, null=True)
    retry_count = models.IntegerField(default=0)
    last_retry = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ['-sent_at']

    def __str__(self):
        return f"{self.certificate.certificate_id} - {self.status}"
