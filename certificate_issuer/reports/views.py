import csv
import logging

import dns.exception
import dns.resolver
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from certificates.emails import send_certificate_email
from certificates.exceptions import DispatchFailure
from .models import EmailReport

logger = logging.getLogger(__name__)


def report_to_dict(report):
    return {
        'id': report.id,
        'certificate_id': report.certificate.certificate_id,
        'recipient_email': report.certificate.recipient_email,
        'status': report.status,
        'sent_at': report.sent_at.isoformat() if report.sent_at else None,
        'error_message': report.error_message,
        'retry_count': report.retry_count,
    }


# ------------------ List View ------------------

@require_GET
def report_list(request):
    reports = EmailReport.objects.select_related('certificate').order_by('-sent_at')
    status = request.GET.get('status')
    if status:
        reports = reports.filter(status=status)

    return JsonResponse({
        'total_count': EmailReport.objects.count(),
        'success_count': EmailReport.objects.filter(status=EmailReport.STATUS_SUCCESS).count(),
        'failed_count': EmailReport.objects.filter(status=EmailReport.STATUS_FAILED).count(),
        'reports': [report_to_dict(r) for r in reports],
    })


# ------------------ Action Views ------------------

def _check_recipient(email):
    """Return an error message for an undeliverable address, else None."""
    try:
        validate_email(email or '')
    except ValidationError:
        return 'Invalid email address'

    domain = email.split('@')[1]
    try:
        dns.resolver.resolve(domain, 'MX')
    except dns.exception.DNSException:
        return f'Domain {domain} not found'
    return None


@csrf_exempt
@require_POST
def report_resend(request, pk):
    """Resend the certificate email with validation and error handling."""
    report = get_object_or_404(EmailReport.objects.select_related('certificate'), pk=pk)
    certificate = report.certificate

    error = _check_recipient(certificate.recipient_email)
    if error is None:
        try:
            send_certificate_email(certificate)
        except DispatchFailure as e:
            logger.error("Resend failed for certificate %s: %s", certificate.certificate_id, e)
            error = str(e)

    if error is None:
        report.status = EmailReport.STATUS_SUCCESS
        report.error_message = ''
        certificate.email_sent = True
        certificate.email_sent_date = timezone.now()
        certificate.save(update_fields=['email_sent', 'email_sent_date'])
    else:
        report.status = EmailReport.STATUS_FAILED
        report.error_message = error

    report.retry_count += 1
    report.last_retry = timezone.now()
    report.save()

    return JsonResponse({'status': report.status, 'report': report_to_dict(report)})


@require_GET
def report_export(request):
    """Export all email reports (success & failed) as CSV."""
    response = HttpResponse(content_type='text/csv')
    response['Content-Disposition'] = 'attachment; filename="email_reports.csv"'

    writer = csv.writer(response)
    writer.writerow([
        'Certificate ID',
        'Recipient Name',
        'Email',
        'Status',
        'Sent At',
        'Error Message',
        'Retry Count'
    ])

    reports = EmailReport.objects.select_related('certificate').order_by('-sent_at')
    for report in reports:
        writer.writerow([
            report.certificate.certificate_id,
            report.certificate.recipient_name,
            report.certificate.recipient_email,
            report.status,
            report.sent_at.strftime("%Y-%m-%d %H:%M") if report.sent_at else '',
            report.error_message or '',
            report.retry_count
        ])

    return response
