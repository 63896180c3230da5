import logging

from django.http import FileResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.urls import reverse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from . import services
from .exceptions import CertificateError, MalformedInput
from .forms import CertificateRequestForm, ImportFileForm
from .importers import normalize
from .models import Certificate
from .storage import certificate_storage

logger = logging.getLogger(__name__)


# -----------------------------
# Helper Functions
# -----------------------------
def certificate_to_dict(certificate):
    return {
        'id': certificate.id,
        'certificate_id': certificate.certificate_id,
        'recipient_name': certificate.recipient_name,
        'recipient_email': certificate.recipient_email,
        'course_name': certificate.course_name,
        'achievement_title': certificate.achievement_title,
        'completion_date': certificate.completion_date.isoformat() if certificate.completion_date else None,
        'issuer_name': certificate.issuer_name,
        'instructor_name': certificate.instructor_name,
        'issued_date': certificate.issued_date.isoformat() if certificate.issued_date else None,
        'email_sent': certificate.email_sent,
        'download_url': reverse('certificates:download', args=[certificate.id]),
        'verification_url': certificate.verification_url,
        'status': certificate.status,
    }


# -----------------------------
# Certificate Views
# -----------------------------
@require_GET
def certificate_list(request):
    email = request.GET.get('email', '').strip()
    if email:
        certificates = services.get_certificates_by_email(email)
    else:
        certificates = services.get_all_certificates()
    return JsonResponse({'certificates': [certificate_to_dict(c) for c in certificates]})


@require_GET
def certificate_detail(request, pk):
    certificate = get_object_or_404(Certificate, pk=pk)
    return JsonResponse(certificate_to_dict(certificate))


@csrf_exempt
@require_POST
def issue_certificate(request):
    form = CertificateRequestForm(request.POST)
    if not form.is_valid():
        return JsonResponse({'status': 'error', 'errors': form.errors}, status=400)

    try:
        certificate = services.issue_certificate(form.to_request())
    except CertificateError as e:
        logger.exception("Certificate issuance failed")
        return JsonResponse({'status': 'error', 'message': str(e)}, status=500)

    return JsonResponse({'status': 'success', 'certificate': certificate_to_dict(certificate)}, status=201)


@csrf_exempt
@require_POST
def import_certificates(request):
    form = ImportFileForm(request.POST, request.FILES)
    if not form.is_valid():
        return JsonResponse({'status': 'error', 'errors': form.errors}, status=400)

    uploaded = form.cleaned_data['file']
    try:
        requests = normalize(uploaded, form.shape)
    except MalformedInput as e:
        return JsonResponse({'status': 'error', 'message': str(e)}, status=400)

    certificates = services.issue_batch(requests)
    return JsonResponse({
        'status': 'success',
        'requested': len(requests),
        'issued': len(certificates),
        'certificates': [certificate_to_dict(c) for c in certificates],
    })


@require_GET
def download_certificate(request, pk):
    certificate = get_object_or_404(Certificate, pk=pk)
    storage = certificate_storage()
    if not certificate.file_path or not storage.exists(certificate.file_path):
        return JsonResponse({'status': 'error', 'message': 'Certificate file not found'}, status=404)

    return FileResponse(
        storage.open(certificate.file_path, 'rb'),
        as_attachment=True,
        filename=f"{certificate.certificate_id}.pdf",
        content_type='application/pdf',
    )


@require_GET
def download_certificate_png(request, pk):
    certificate = get_object_or_404(Certificate, pk=pk)
    try:
        png_path = services.render_certificate_image(certificate)
    except CertificateError as e:
        logger.exception("PNG rendering failed for certificate %s", certificate.certificate_id)
        return JsonResponse({'status': 'error', 'message': str(e)}, status=500)

    return FileResponse(
        certificate_storage().open(png_path, 'rb'),
        as_attachment=True,
        filename=f"{certificate.certificate_id}.png",
        content_type='image/png',
    )


@require_GET
def verify_certificate(request, certificate_id):
    certificate = services.verify_certificate(certificate_id)
    if certificate is None:
        return JsonResponse({'valid': False, 'message': 'Certificate not found'}, status=404)
    return JsonResponse({'valid': True, 'certificate': certificate_to_dict(certificate)})


@csrf_exempt
@require_POST
def revoke_certificate(request, certificate_id):
    services.revoke_certificate(certificate_id)
    return JsonResponse({'status': 'success', 'certificate_id': certificate_id})
