from django.conf import settings
from django.core.management.base import BaseCommand

from thesis.services import thesis_status


class Command(BaseCommand):
    help = (
        'Recompute ONGOING/SLOW/AT_RISK/FAILED ratings for every non-terminal thesis. '
        'Meant to be run daily by cron.'
    )

    def add_arguments(self, parser):
        parser.add_argument(
            '--page-size',
            type=int,
            default=None,
            help='Theses processed per page (default: THESIS_STATUS_PAGE_SIZE).',
        )

    def handle(self, *args, **options):
        page_size = options.get('page_size') or getattr(settings, 'THESIS_STATUS_PAGE_SIZE', 200)
        if page_size <= 0:
            self.stderr.write('--page-size must be positive')
            return

        updated = thesis_status.update_all_thesis_ratings(page_size=page_size)
        self.stdout.write(
            'Done. Updated: ' + ', '.join(f'{rating}={count}' for rating, count in updated.items())
        )
