import logging
from datetime import datetime, time

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from templates_app.services import get_default_template, get_template

from .emails import dispatch_certificate_email, send_batch_summary_email
from .exceptions import AllocationFailure, TemplateNotFound
from .identifiers import allocate_certificate_id
from .models import Certificate
from .rendering import render_certificate_pdf, render_certificate_png, render_verification_code
from .storage import certificate_storage

logger = logging.getLogger(__name__)


# -----------------------------
# Helper Functions
# -----------------------------
def resolve_template(template_id=None):
    """
    Template for a request: the requested one if it exists, else the default
    template, else None.
    """
    if template_id is not None:
        try:
            return get_template(template_id)
        except TemplateNotFound:
            logger.warning("Template %s not found, falling back to default", template_id)
    return get_default_template()


def certificate_id_exists(certificate_id):
    return Certificate.objects.filter(certificate_id=certificate_id).exists()


def build_certificate(request, template):
    """Unsaved Certificate for a request."""
    if request.completion_date is not None:
        completion_date = timezone.make_aware(datetime.combine(request.completion_date, time.min))
    else:
        completion_date = timezone.now()

    return Certificate(
        recipient_name=request.recipient_name,
        recipient_email=request.recipient_email,
        course_name=request.course_name,
        achievement_title=request.achievement_title,
        completion_date=completion_date,
        issuer_name=request.issuer_name,
        instructor_name=request.instructor_name,
        template=template,
        email_sent=False,
        status=Certificate.STATUS_ACTIVE,
    )


def _discard_artifacts(certificate):
    storage = certificate_storage()
    for name in (certificate.file_path, certificate.qr_code_path):
        if name and storage.exists(name):
            storage.delete(name)


def _render_and_save(certificate, template):
    # Row first: a taken id must fail before any file named after it is written.
    certificate.certificate_id = allocate_certificate_id(certificate_id_exists)
    try:
        with transaction.atomic():
            certificate.save()
            certificate.qr_code_path = render_verification_code(certificate.certificate_id)
            certificate.file_path = render_certificate_pdf(certificate, template, certificate.qr_code_path)
            certificate.save(update_fields=["qr_code_path", "file_path"])
    except IntegrityError:
        raise
    except Exception:
        _discard_artifacts(certificate)
        raise
    return certificate


# -----------------------------
# Issuance
# -----------------------------
def issue_certificate(request):
    """
    Issue one certificate: allocate an id, render the QR code and PDF,
    save the record and, if asked, email it in the background.

    The returned certificate reflects the state before the email is sent.
    """
    logger.info("Generating certificate for %s", request.recipient_name)

    template = resolve_template(request.template_id)
    certificate = build_certificate(request, template)

    attempts = getattr(settings, "CERTIFICATE_PERSIST_ATTEMPTS", 3)
    for attempt in range(1, attempts + 1):
        try:
            _render_and_save(certificate, template)
            break
        except IntegrityError:
            if not certificate_id_exists(certificate.certificate_id):
                raise
            logger.warning(
                "Certificate id %s was taken at save time (attempt %d)",
                certificate.certificate_id, attempt,
            )
    else:
        raise AllocationFailure(f"Could not persist a unique certificate id after {attempts} attempts")

    if request.send_email and request.recipient_email:
        transaction.on_commit(lambda: dispatch_certificate_email(certificate))

    logger.info("Certificate generated successfully: %s", certificate.certificate_id)
    return certificate


def issue_batch(requests):
    """
    Issue certificates one by one in input order.

    A failing request is logged and left out; only issued certificates are
    returned.
    """
    certificates = []
    for request in requests:
        try:
            certificates.append(issue_certificate(request))
        except Exception:
            logger.exception("Failed to generate certificate for %s", request.recipient_name)

    logger.info("Batch issued %d of %d certificates", len(certificates), len(requests))

    admin_email = getattr(settings, "CERTIFICATE_BATCH_REPORT_EMAIL", "")
    if admin_email:
        send_batch_summary_email(admin_email, len(requests), len(certificates))
    return certificates


# -----------------------------
# Lookup & lifecycle
# -----------------------------
def verify_certificate(certificate_id):
    """Active certificate with this id, or None for revoked and unknown ids."""
    return Certificate.objects.filter(
        certificate_id=certificate_id,
        status=Certificate.STATUS_ACTIVE,
    ).first()


def revoke_certificate(certificate_id):
    certificate = Certificate.objects.filter(certificate_id=certificate_id).first()
    if certificate is None:
        return None

    certificate.status = Certificate.STATUS_REVOKED
    certificate.save(update_fields=["status"])
    logger.info("Certificate revoked: %s", certificate_id)
    return certificate


def get_all_certificates():
    return Certificate.objects.select_related("template").all()


def get_certificates_by_email(email):
    return Certificate.objects.filter(recipient_email__iexact=email)


def get_certificate(pk):
    return Certificate.objects.filter(pk=pk).first()


def render_certificate_image(certificate):
    """Render the PNG version of an issued certificate and return its storage path."""
    qr_code_path = certificate.qr_code_path
    if qr_code_path and not certificate_storage().exists(qr_code_path):
        qr_code_path = None
    return render_certificate_png(certificate, certificate.template, qr_code_path)
