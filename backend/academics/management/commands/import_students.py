from django.core.management.base import BaseCommand, CommandError

from academics.services import student_import


class Command(BaseCommand):
    help = 'Import students from a CSV or XLSX file (columns: nim, full_name, email).'

    def add_arguments(self, parser):
        parser.add_argument('--file', '-f', dest='file', help='CSV/XLSX file path', required=True)

    def handle(self, *args, **options):
        path = options['file']
        try:
            with open(path, 'rb') as fh:
                rows = student_import.read_rows(fh)
        except FileNotFoundError:
            raise CommandError(f'File not found: {path}')

        result = student_import.import_students(rows)
        for err in result['errors']:
            self.stderr.write(err)
        self.stdout.write(self.style.SUCCESS(
            f"Done. created={result['created']} updated={result['updated']} errors={len(result['errors'])}"
        ))
