from django.core.management.base import BaseCommand

from templates_app.services import initialize_default_templates


class Command(BaseCommand):
    help = "Create the stock certificate template when none exist"

    def handle(self, *args, **options):
        template = initialize_default_templates()
        if template is None:
            self.stdout.write("Templates already exist, nothing to do.")
        else:
            self.stdout.write(self.style.SUCCESS(f"Created default template '{template.name}'"))
