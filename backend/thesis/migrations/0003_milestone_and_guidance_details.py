import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('thesis', '0002_seed_statuses'),
    ]

    operations = [
        migrations.AddField(
            model_name='thesismilestone',
            name='description',
            field=models.TextField(blank=True),
        ),
        migrations.AddField(
            model_name='thesismilestone',
            name='target_date',
            field=models.DateField(blank=True, null=True),
        ),
        migrations.AddField(
            model_name='thesismilestone',
            name='progress',
            field=models.PositiveSmallIntegerField(default=0),
        ),
        migrations.AddField(
            model_name='thesismilestone',
            name='started_at',
            field=models.DateTimeField(blank=True, null=True),
        ),
        migrations.AddField(
            model_name='thesismilestone',
            name='completed_at',
            field=models.DateTimeField(blank=True, null=True),
        ),
        migrations.AddField(
            model_name='thesismilestone',
            name='validated_by',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='validated_milestones', to=settings.AUTH_USER_MODEL),
        ),
        migrations.AddField(
            model_name='thesismilestone',
            name='validated_at',
            field=models.DateTimeField(blank=True, null=True),
        ),
        migrations.AddField(
            model_name='thesismilestone',
            name='student_notes',
            field=models.TextField(blank=True),
        ),
        migrations.AddField(
            model_name='thesismilestone',
            name='supervisor_notes',
            field=models.TextField(blank=True),
        ),
        migrations.AddField(
            model_name='milestonetemplate',
            name='description',
            field=models.TextField(blank=True),
        ),
        migrations.AddField(
            model_name='thesisguidance',
            name='milestones',
            field=models.ManyToManyField(blank=True, related_name='guidances', to='thesis.thesismilestone'),
        ),
        migrations.AddField(
            model_name='thesisguidance',
            name='approved_date',
            field=models.DateTimeField(blank=True, null=True),
        ),
        migrations.AddField(
            model_name='thesisguidance',
            name='duration',
            field=models.PositiveIntegerField(default=60),
        ),
        migrations.AddField(
            model_name='thesisguidance',
            name='supervisor_feedback',
            field=models.TextField(blank=True),
        ),
    ]
