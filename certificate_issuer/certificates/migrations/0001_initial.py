import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('templates_app', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Certificate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('certificate_id', models.CharField(editable=False, max_length=20, unique=True)),
                ('recipient_name', models.CharField(max_length=255)),
                ('recipient_email', models.EmailField(blank=True, max_length=254, null=True)),
                ('course_name', models.CharField(blank=True, max_length=255, null=True)),
                ('achievement_title', models.CharField(blank=True, max_length=255, null=True)),
                ('completion_date', models.DateTimeField(blank=True, null=True)),
                ('issuer_name', models.CharField(blank=True, max_length=255, null=True)),
                ('instructor_name', models.CharField(blank=True, max_length=255, null=True)),
                ('issued_date', models.DateTimeField(auto_now_add=True)),
                ('file_path', models.CharField(blank=True, max_length=500, null=True)),
                ('qr_code_path', models.CharField(blank=True, max_length=500, null=True)),
                ('email_sent', models.BooleanField(default=False)),
                ('email_sent_date', models.DateTimeField(blank=True, null=True)),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('REVOKED', 'Revoked')], default='ACTIVE', max_length=10)),
                ('template', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to='templates_app.certificatetemplate')),
            ],
            options={
                'ordering': ['-issued_date'],
            },
        ),
    ]
