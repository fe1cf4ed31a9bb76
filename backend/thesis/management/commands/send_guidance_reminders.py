from datetime import date

from django.core.management.base import BaseCommand, CommandError

from thesis.services import guidance as guidance_service


class Command(BaseCommand):
    help = 'Push a reminder to students and supervisors for every guidance accepted for today.'

    def add_arguments(self, parser):
        parser.add_argument('--date', help='Campus-local day to remind for, YYYY-MM-DD (default: today).')

    def handle(self, *args, **options):
        day = None
        if options.get('date'):
            try:
                day = date.fromisoformat(options['date'])
            except ValueError:
                raise CommandError('--date must be YYYY-MM-DD')

        result = guidance_service.send_guidance_reminders(today=day)
        self.stdout.write(f"Done. total={result['total']} sent={result['sent']} failed={result['failed']}")
