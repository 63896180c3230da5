import logging
import threading

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.db import connection
from django.template.loader import render_to_string
from django.utils import timezone
from django.utils.html import strip_tags

from reports.models import EmailReport

from .exceptions import DispatchFailure
from .models import Certificate
from .storage import certificate_storage

logger = logging.getLogger(__name__)


class EmailThread(threading.Thread):
    """
    Threaded email sender to avoid blocking requests.
    """
    def __init__(self, email):
        super().__init__(daemon=True)
        self.email = email

    def run(self):
        try:
            self.email.send(fail_silently=False)
            logger.info("Email successfully sent to %s", ", ".join(self.email.to))
        except Exception:
            logger.exception("Failed to send email to %s", ", ".join(self.email.to))


class CertificateEmailThread(threading.Thread):
    """
    Delivers a certificate email in the background and records the outcome
    on the certificate and in EmailReport.
    """
    def __init__(self, certificate_pk):
        super().__init__(daemon=True)
        self.certificate_pk = certificate_pk

    def run(self):
        try:
            deliver_certificate_email(self.certificate_pk)
        except Exception:
            logger.exception("Certificate email job failed for certificate %s", self.certificate_pk)
        finally:
            connection.close()


def _html_email(subject, template_name, context, to):
    html_body = render_to_string(template_name, context)
    email = EmailMultiAlternatives(
        subject=subject,
        body=strip_tags(html_body),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=to,
    )
    email.attach_alternative(html_body, "text/html")
    return email


def build_certificate_email(certificate):
    """Certificate email with the PDF attached."""
    email = _html_email(
        subject=f"Your Certificate - {certificate.course_name}",
        template_name="certificates/emails/certificate_issued.html",
        context={
            "certificate": certificate,
            "issuer": certificate.issuer_name or "Certificate Authority",
        },
        to=[certificate.recipient_email],
    )
    with certificate_storage().open(certificate.file_path, "rb") as f:
        email.attach(f"{certificate.certificate_id}.pdf", f.read(), "application/pdf")
    return email


def send_certificate_email(certificate):
    """
    Send the certificate email now.

    Raises DispatchFailure when the PDF is missing or the mail backend fails.
    """
    if not certificate.recipient_email:
        raise DispatchFailure(f"No recipient email for {certificate.certificate_id}")
    if not certificate.file_path or not certificate_storage().exists(certificate.file_path):
        raise DispatchFailure(f"Certificate file missing for {certificate.certificate_id}")

    logger.info("Sending certificate email to %s", certificate.recipient_email)
    try:
        build_certificate_email(certificate).send(fail_silently=False)
    except Exception as e:
        raise DispatchFailure(f"Failed to send certificate email: {e}") from e
    logger.info("Certificate email sent successfully to %s", certificate.recipient_email)


def deliver_certificate_email(certificate_pk):
    """
    Send the email for a saved certificate and record the result.

    Returns True on success. Failures are logged and reported, never raised.
    """
    certificate = Certificate.objects.get(pk=certificate_pk)
    try:
        send_certificate_email(certificate)
    except DispatchFailure as e:
        logger.error("Failed to send email for certificate %s: %s", certificate.certificate_id, e)
        EmailReport.objects.create(
            certificate=certificate,
            status=EmailReport.STATUS_FAILED,
            error_message=str(e),
        )
        return False

    certificate.email_sent = True
    certificate.email_sent_date = timezone.now()
    certificate.save(update_fields=["email_sent", "email_sent_date"])
    EmailReport.objects.create(certificate=certificate, status=EmailReport.STATUS_SUCCESS)
    return True


def dispatch_certificate_email(certificate):
    """
    Hand the certificate email off without waiting for it.

    With CERTIFICATE_EMAIL_ASYNC disabled the email is delivered inline,
    which is what tests and management commands use.
    """
    if getattr(settings, "CERTIFICATE_EMAIL_ASYNC", True):
        CertificateEmailThread(certificate.pk).start()
        return

    try:
        deliver_certificate_email(certificate.pk)
    except Exception:
        logger.exception("Certificate email job failed for certificate %s", certificate.pk)


def send_batch_summary_email(admin_email, total, success_count):
    """Notify an administrator about the outcome of a batch run."""
    email = _html_email(
        subject="Batch Certificate Generation Complete",
        template_name="certificates/emails/batch_summary.html",
        context={
            "total": total,
            "success_count": success_count,
            "failed_count": total - success_count,
        },
        to=[admin_email],
    )
    EmailThread(email).start()
