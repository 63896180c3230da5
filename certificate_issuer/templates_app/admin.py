from django.contrib import admin
from .models import CertificateTemplate

@admin.register(CertificateTemplate)
class CertificateTemplateAdmin(admin.ModelAdmin):
    list_display = ('name', 'background_type', 'is_default', 'created_at', 'updated_at')
    list_filter = ('background_type', 'is_default', 'created_at')
    search_fields = ('name', 'description')
