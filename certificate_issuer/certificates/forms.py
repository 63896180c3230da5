from django import forms

from .exceptions import MalformedInput
from .importers import detect_shape
from .schemas import CertificateRequest


class CertificateRequestForm(forms.Form):
    recipient_name = forms.CharField(max_length=255)
    recipient_email = forms.EmailField(required=False)
    course_name = forms.CharField(max_length=255, required=False)
    achievement_title = forms.CharField(max_length=255, required=False)
    completion_date = forms.DateField(required=False)
    issuer_name = forms.CharField(max_length=255, required=False)
    instructor_name = forms.CharField(max_length=255, required=False)
    template_id = forms.IntegerField(required=False)
    send_email = forms.BooleanField(required=False)

    def to_request(self):
        data = {
            name: (value if value != "" else None)
            for name, value in self.cleaned_data.items()
        }
        data["send_email"] = bool(data["send_email"])
        return CertificateRequest(**data)


class ImportFileForm(forms.Form):
    file = forms.FileField(required=True, label="Select CSV or Excel file")

    def clean_file(self):
        uploaded = self.cleaned_data["file"]
        try:
            self.shape = detect_shape(uploaded.name)
        except MalformedInput:
            raise forms.ValidationError("Upload a .csv or .xlsx file.")
        return uploaded
