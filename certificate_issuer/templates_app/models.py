from django.db import models, transaction


class CertificateTemplate(models.Model):
    BACKGROUND_TYPE_CHOICES = (
        ('PDF', 'PDF'),
        ('SVG', 'SVG'),
        ('PNG', 'PNG'),
        ('JPEG', 'JPEG'),
    )

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    background_path = models.CharField(max_length=500, blank=True, null=True)
    background_type = models.CharField(max_length=10, choices=BACKGROUND_TYPE_CHOICES, blank=True, null=True)
    field_configuration = models.TextField(blank=True, null=True)
    is_default = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        """
        Save the template; a template saved as default clears the flag on
        every other template in the same transaction.
        """
        with transaction.atomic():
            if self.is_default:
                others = CertificateTemplate.objects.select_for_update().filter(is_default=True)
                if self.pk:
                    others = others.exclude(pk=self.pk)
                others.update(is_default=False)
            super().save(*args, **kwargs)
