from django.db import models

from templates_app.models import CertificateTemplate

from .identifiers import build_verification_url


class Certificate(models.Model):
    STATUS_ACTIVE = 'ACTIVE'
    STATUS_REVOKED = 'REVOKED'
    STATUS_CHOICES = (
        (STATUS_ACTIVE, 'Active'),
        (STATUS_REVOKED, 'Revoked'),
    )

    certificate_id = models.CharField(max_length=20, unique=True, editable=False)
    recipient_name = models.CharField(max_length=255)
    recipient_email = models.EmailField(blank=True, null=True)
    course_name = models.CharField(max_length=255, blank=True, null=True)
    achievement_title = models.CharField(max_length=255, blank=True, null=True)
    completion_date = models.DateTimeField(blank=True, null=True)
    issuer_name = models.CharField(max_length=255, blank=True, null=True)
    instructor_name = models.CharField(max_length=255, blank=True, null=True)
    issued_date = models.DateTimeField(auto_now_add=True)
    file_path = models.CharField(max_length=500, blank=True, null=True)
    qr_code_path = models.CharField(max_length=500, blank=True, null=True)
    email_sent = models.BooleanField(default=False)
    email_sent_date = models.DateTimeField(blank=True, null=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    template = models.ForeignKey(CertificateTemplate, on_delete=models.SET_NULL, null=True, blank=True)

    class Meta:
        ordering = ['-issued_date']

    def __str__(self):
        return f"{self.recipient_name} ({self.certificate_id})"

    @property
    def is_active(self):
        return self.status == self.STATUS_ACTIVE

    @property
    def verification_url(self):
        return build_verification_url(self.certificate_id)
