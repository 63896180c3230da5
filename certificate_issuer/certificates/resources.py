from import_export import resources
from import_export.fields import Field
from .models import Certificate

class CertificateResource(resources.ModelResource):
    certificate_id = Field(attribute='certificate_id', column_name='Certificate ID')
    recipient_name = Field(attribute='recipient_name', column_name='Recipient Name')
    recipient_email = Field(attribute='recipient_email', column_name='Email')
    course_name = Field(attribute='course_name', column_name='Course')
    achievement_title = Field(attribute='achievement_title', column_name='Achievement')
    completion_date = Field(attribute='completion_date', column_name='Completion Date')
    issuer_name = Field(attribute='issuer_name', column_name='Issuer')
    instructor_name = Field(attribute='instructor_name', column_name='Instructor')
    status = Field(attribute='status', column_name='Status')

    class Meta:
        model = Certificate
        fields = (
            'certificate_id', 'recipient_name', 'recipient_email', 'course_name',
            'achievement_title', 'completion_date', 'issuer_name', 'instructor_name', 'status',
        )
        export_order = fields
