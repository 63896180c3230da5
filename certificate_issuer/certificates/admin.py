from django.contrib import admin
from import_export.admin import ExportMixin

from .models import Certificate
from .resources import CertificateResource
from .services import revoke_certificate


@admin.register(Certificate)
class CertificateAdmin(ExportMixin, admin.ModelAdmin):
    resource_classes = [CertificateResource]
    list_display = (
        'certificate_id',
        'recipient_name',
        'recipient_email',
        'course_name',
        'completion_date',
        'issued_date',
        'email_sent',
        'status',
        'template',
    )
    list_filter = ('status', 'email_sent', 'template')
    search_fields = ('recipient_name', 'recipient_email', 'certificate_id', 'course_name')
    readonly_fields = ('certificate_id', 'issued_date', 'file_path', 'qr_code_path', 'email_sent_date')
    ordering = ('-issued_date',)
    actions = ['revoke_selected']

    @admin.action(description='Revoke selected certificates')
    def revoke_selected(self, request, queryset):
        for certificate in queryset:
            revoke_certificate(certificate.certificate_id)
        self.message_user(request, f"Revoked {queryset.count()} certificate(s).")
