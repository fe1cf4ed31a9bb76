from django.db import migrations


ROLE_NAMES = [
    'Ketua Departemen',
    'Sekretaris Departemen',
    'Pembimbing 1',
    'Pembimbing 2',
    'Admin',
    'Penguji',
    'Mahasiswa',
    'GKM',
]


def seed_roles(apps, schema_editor):
    Role = apps.get_model('accounts', 'Role')
    for name in ROLE_NAMES:
        Role.objects.get_or_create(name=name)


def noop(apps, schema_editor):
    pass


class Migration(migrations.Migration):

    dependencies = [
        ('accounts', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_roles, noop),
    ]
