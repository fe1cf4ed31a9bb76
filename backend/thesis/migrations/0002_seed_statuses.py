from django.db import migrations


STATUS_NAMES = [
    'Diajukan',
    'Bimbingan',
    'Acc Seminar',
    'Selesai',
    'Lulus',
    'Drop Out',
    'Dibatalkan',
    'Gagal',
]


def seed_statuses(apps, schema_editor):
    ThesisStatus = apps.get_model('thesis', 'ThesisStatus')
    for name in STATUS_NAMES:
        ThesisStatus.objects.get_or_create(name=name)


def noop(apps, schema_editor):
    pass


class Migration(migrations.Migration):

    dependencies = [
        ('thesis', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_statuses, noop),
    ]
