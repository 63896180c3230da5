from django import forms
from .models import CertificateTemplate

class CertificateTemplateForm(forms.ModelForm):
    class Meta:
        model = CertificateTemplate
        fields = [
            'name',
            'description',
            'is_default',
        ]


class TemplateBackgroundForm(forms.Form):
    file = forms.FileField(required=True, label="Background (PDF, SVG, PNG or JPEG)")


class TemplateConfigurationForm(forms.Form):
    field_configuration = forms.CharField(required=False, widget=forms.Textarea)
