import io
from datetime import date

import pytest
from django.core import mail
from django.db import IntegrityError
from django.utils import timezone

from certificates import services
from certificates.exceptions import AllocationFailure, RenderingFailure
from certificates.identifiers import CERTIFICATE_ID_PATTERN
from certificates.importers import import_from_csv
from certificates.models import Certificate
from certificates.storage import certificate_storage
from reports.models import EmailReport
from templates_app.models import CertificateTemplate

pytestmark = pytest.mark.django_db


# -----------------------------
# Issuance
# -----------------------------
def test_issue_without_templates(certificate_request):
    certificate = services.issue_certificate(certificate_request(recipient_name="Alice"))

    assert certificate.pk is not None
    assert CERTIFICATE_ID_PATTERN.match(certificate.certificate_id)
    assert certificate.template is None
    assert certificate.status == Certificate.STATUS_ACTIVE
    assert certificate.email_sent is False
    assert certificate.file_path == f"{certificate.certificate_id}.pdf"
    assert certificate.qr_code_path == f"qr/{certificate.certificate_id}_qr.png"

    storage = certificate_storage()
    assert storage.exists(certificate.file_path)
    assert storage.exists(certificate.qr_code_path)


def test_completion_date_is_start_of_day(certificate_request):
    certificate = services.issue_certificate(certificate_request(completion_date=date(2024, 3, 15)))

    completed = timezone.localtime(certificate.completion_date)
    assert completed.date() == date(2024, 3, 15)
    assert (completed.hour, completed.minute, completed.second) == (0, 0, 0)


def test_missing_completion_date_means_now(certificate_request):
    before = timezone.now()

    certificate = services.issue_certificate(certificate_request(completion_date=None))

    assert before <= certificate.completion_date <= timezone.now()


def test_issue_with_explicit_template(certificate_request):
    CertificateTemplate.objects.create(name="Default", is_default=True)
    modern = CertificateTemplate.objects.create(name="Modern")

    certificate = services.issue_certificate(certificate_request(template_id=modern.pk))

    assert certificate.template == modern


def test_unknown_template_falls_back_to_default(certificate_request, caplog):
    default = CertificateTemplate.objects.create(name="Default", is_default=True)

    certificate = services.issue_certificate(certificate_request(template_id=9999))

    assert certificate.template == default
    assert any("falling back to default" in r.getMessage() for r in caplog.records)


def test_default_template_used_when_none_requested(certificate_request):
    default = CertificateTemplate.objects.create(name="Default", is_default=True)

    assert services.issue_certificate(certificate_request()).template == default


def test_ids_are_unique_across_issues(certificate_request):
    ids = {services.issue_certificate(certificate_request()).certificate_id for _ in range(5)}

    assert len(ids) == 5


def test_render_failure_persists_nothing(certificate_request, mocker):
    mocker.patch(
        "certificates.services.render_certificate_pdf",
        side_effect=RenderingFailure("Failed to generate PDF: boom"),
    )

    with pytest.raises(RenderingFailure):
        services.issue_certificate(certificate_request())

    assert Certificate.objects.count() == 0
    storage = certificate_storage()
    assert not storage.exists("qr") or storage.listdir("qr")[1] == []


def test_qr_failure_still_issues(certificate_request, mocker):
    mocker.patch("certificates.services.render_verification_code", return_value=None)

    certificate = services.issue_certificate(certificate_request())

    assert certificate.pk is not None
    assert certificate.qr_code_path is None
    assert certificate_storage().exists(certificate.file_path)


def test_allocation_failure_persists_nothing(certificate_request, mocker):
    mocker.patch("certificates.services.certificate_id_exists", return_value=True)

    with pytest.raises(AllocationFailure):
        services.issue_certificate(certificate_request())

    assert Certificate.objects.count() == 0


def test_save_collision_allocates_a_new_id(certificate_request, mocker):
    existing = services.issue_certificate(certificate_request(recipient_name="First"))
    mocker.patch(
        "certificates.services.allocate_certificate_id",
        side_effect=[existing.certificate_id, "CERT-FRSH-0001"],
    )

    certificate = services.issue_certificate(certificate_request(recipient_name="Second"))

    assert certificate.certificate_id == "CERT-FRSH-0001"
    assert Certificate.objects.count() == 2


def test_persistent_save_collisions_give_up(certificate_request, mocker, settings):
    settings.CERTIFICATE_PERSIST_ATTEMPTS = 2
    existing = services.issue_certificate(certificate_request(recipient_name="First"))
    mocker.patch("certificates.services.allocate_certificate_id", return_value=existing.certificate_id)

    with pytest.raises(AllocationFailure):
        services.issue_certificate(certificate_request(recipient_name="Second"))

    assert Certificate.objects.count() == 1


def test_missing_recipient_name_is_not_an_id_collision(certificate_request, mocker, caplog):
    allocate = mocker.spy(services, "allocate_certificate_id")

    with pytest.raises(IntegrityError):
        services.issue_certificate(certificate_request(recipient_name=None))

    assert allocate.call_count == 1
    assert Certificate.objects.count() == 0
    assert not certificate_storage().exists(f"{allocate.spy_return}.pdf")
    assert not any("was taken at save time" in r.getMessage() for r in caplog.records)


def test_batch_drops_rows_without_a_recipient_name():
    requests = import_from_csv(io.BytesIO(b"student,email\nBob,bob@x.com\n"))
    assert requests[0].recipient_name is None

    assert services.issue_batch(requests) == []
    assert Certificate.objects.count() == 0


# -----------------------------
# Email
# -----------------------------
def test_email_sent_after_commit(certificate_request, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        certificate = services.issue_certificate(certificate_request(send_email=True))

    assert len(callbacks) == 1
    assert certificate.email_sent is False

    certificate.refresh_from_db()
    assert certificate.email_sent is True
    assert certificate.email_sent_date is not None

    assert len(mail.outbox) == 1
    message = mail.outbox[0]
    assert message.subject == "Your Certificate - Intro to X"
    assert message.to == ["alice@example.com"]
    assert message.attachments[0][0] == f"{certificate.certificate_id}.pdf"

    report = EmailReport.objects.get(certificate=certificate)
    assert report.status == "success"


def test_email_failure_leaves_certificate_issued(certificate_request, django_capture_on_commit_callbacks, mocker):
    mocker.patch(
        "django.core.mail.EmailMultiAlternatives.send",
        side_effect=ConnectionRefusedError("smtp down"),
    )

    with django_capture_on_commit_callbacks(execute=True):
        certificate = services.issue_certificate(certificate_request(send_email=True))

    certificate.refresh_from_db()
    assert certificate.email_sent is False
    assert certificate.email_sent_date is None

    report = EmailReport.objects.get(certificate=certificate)
    assert report.status == "failed"
    assert "smtp down" in report.error_message


@pytest.mark.parametrize("overrides", [
    {"send_email": False},
    {"send_email": True, "recipient_email": None},
])
def test_no_email_without_flag_and_address(certificate_request, django_capture_on_commit_callbacks, overrides):
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        certificate = services.issue_certificate(certificate_request(**overrides))

    assert callbacks == []
    assert mail.outbox == []
    certificate.refresh_from_db()
    assert certificate.email_sent is False


# -----------------------------
# Batch
# -----------------------------
def test_batch_keeps_order_and_drops_failures(certificate_request, mocker, caplog):
    real_render = services.render_certificate_pdf

    def render(certificate, *args):
        if certificate.recipient_name == "Broken":
            raise RenderingFailure("Failed to generate PDF: bad row")
        return real_render(certificate, *args)

    mocker.patch("certificates.services.render_certificate_pdf", side_effect=render)

    certificates = services.issue_batch([
        certificate_request(recipient_name="Ann"),
        certificate_request(recipient_name="Broken"),
        certificate_request(recipient_name="Cid"),
    ])

    assert [c.recipient_name for c in certificates] == ["Ann", "Cid"]
    assert Certificate.objects.count() == 2
    assert any("Failed to generate certificate for Broken" in r.getMessage() for r in caplog.records)


def test_empty_batch():
    assert services.issue_batch([]) == []


def test_batch_summary_sent_when_configured(certificate_request, mocker, settings):
    settings.CERTIFICATE_BATCH_REPORT_EMAIL = "admin@example.com"
    summary = mocker.patch("certificates.services.send_batch_summary_email")
    mocker.patch(
        "certificates.services.issue_certificate",
        side_effect=[Certificate(), RenderingFailure("nope"), Certificate()],
    )

    services.issue_batch([certificate_request() for _ in range(3)])

    summary.assert_called_once_with("admin@example.com", 3, 2)


def test_no_batch_summary_by_default(certificate_request, mocker):
    summary = mocker.patch("certificates.services.send_batch_summary_email")

    services.issue_batch([certificate_request()])

    summary.assert_not_called()


# -----------------------------
# Lookup & lifecycle
# -----------------------------
def test_verify_and_revoke(certificate_request):
    certificate = services.issue_certificate(certificate_request())

    assert services.verify_certificate(certificate.certificate_id) == certificate

    revoked = services.revoke_certificate(certificate.certificate_id)

    assert revoked.status == Certificate.STATUS_REVOKED
    assert services.verify_certificate(certificate.certificate_id) is None
    assert Certificate.objects.filter(pk=certificate.pk).exists()


def test_unknown_ids():
    assert services.verify_certificate("CERT-NONE-0000") is None
    assert services.revoke_certificate("CERT-NONE-0000") is None
    assert services.get_certificate(12345) is None


def test_lookup_by_email_is_case_insensitive(certificate_request):
    mine = services.issue_certificate(certificate_request(recipient_email="Alice@Example.com"))
    services.issue_certificate(certificate_request(recipient_email="bob@example.com"))

    assert list(services.get_certificates_by_email("alice@example.com")) == [mine]
    assert services.get_all_certificates().count() == 2
    assert services.get_certificate(mine.pk) == mine


def test_render_certificate_image(certificate_request):
    certificate = services.issue_certificate(certificate_request())

    assert services.render_certificate_image(certificate) == f"{certificate.certificate_id}.png"
    assert certificate_storage().exists(f"{certificate.certificate_id}.png")


def test_render_certificate_image_without_qr_file(certificate_request):
    certificate = services.issue_certificate(certificate_request())
    certificate_storage().delete(certificate.qr_code_path)

    assert services.render_certificate_image(certificate) == f"{certificate.certificate_id}.png"
