from django.core.management.base import BaseCommand

from academics.services import academic_year as academic_year_service


class Command(BaseCommand):
    help = 'Mark the academic year covering today as the only active one.'

    def handle(self, *args, **options):
        active = academic_year_service.sync_active_academic_year()
        if active is None:
            self.stdout.write('Done. No academic year covers today; none active.')
        else:
            self.stdout.write(f'Done. Active academic year: {active.label} (id={active.id})')
