from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from certificates.exceptions import TemplateNotFound

from . import services
from .forms import CertificateTemplateForm, TemplateBackgroundForm, TemplateConfigurationForm


def template_to_dict(template):
    return {
        'id': template.id,
        'name': template.name,
        'description': template.description,
        'background_path': template.background_path,
        'background_type': template.background_type,
        'field_configuration': template.field_configuration,
        'is_default': template.is_default,
    }


def _not_found(e):
    return JsonResponse({'status': 'error', 'message': str(e)}, status=404)


@require_GET
def template_list(request):
    return JsonResponse({'templates': [template_to_dict(t) for t in services.get_all_templates()]})


@require_GET
def template_detail(request, pk):
    try:
        template = services.get_template(pk)
    except TemplateNotFound as e:
        return _not_found(e)
    return JsonResponse(template_to_dict(template))


@csrf_exempt
@require_POST
def template_create(request):
    form = CertificateTemplateForm(request.POST)
    if not form.is_valid():
        return JsonResponse({'status': 'error', 'errors': form.errors}, status=400)

    template = services.create_template(
        name=form.cleaned_data['name'],
        description=form.cleaned_data.get('description'),
        is_default=form.cleaned_data.get('is_default', False),
    )
    return JsonResponse({'status': 'success', 'template': template_to_dict(template)}, status=201)


@csrf_exempt
@require_POST
def template_upload_background(request, pk):
    form = TemplateBackgroundForm(request.POST, request.FILES)
    if not form.is_valid():
        return JsonResponse({'status': 'error', 'errors': form.errors}, status=400)

    try:
        template = services.upload_template_background(pk, form.cleaned_data['file'])
    except TemplateNotFound as e:
        return _not_found(e)
    except ValueError as e:
        return JsonResponse({'status': 'error', 'message': str(e)}, status=400)
    return JsonResponse({'status': 'success', 'template': template_to_dict(template)})


@csrf_exempt
@require_POST
def template_configure(request, pk):
    form = TemplateConfigurationForm(request.POST)
    if not form.is_valid():
        return JsonResponse({'status': 'error', 'errors': form.errors}, status=400)

    try:
        template = services.update_template_configuration(pk, form.cleaned_data['field_configuration'])
    except TemplateNotFound as e:
        return _not_found(e)
    return JsonResponse({'status': 'success', 'template': template_to_dict(template)})


@csrf_exempt
@require_POST
def template_set_default(request, pk):
    try:
        template = services.set_default_template(pk)
    except TemplateNotFound as e:
        return _not_found(e)
    return JsonResponse({'status': 'success', 'template': template_to_dict(template)})


@csrf_exempt
@require_POST
def template_delete(request, pk):
    try:
        services.delete_template(pk)
    except TemplateNotFound as e:
        return _not_found(e)
    return JsonResponse({'status': 'success', 'id': pk, 'message': 'Template deleted successfully!'})
