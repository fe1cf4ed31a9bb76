import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('thesis', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Cpl',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=255, unique=True)),
                ('description', models.CharField(max_length=255)),
                ('minimal_score', models.PositiveSmallIntegerField(validators=[django.core.validators.MaxValueValidator(100)])),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'CPL',
                'verbose_name_plural': 'CPL',
                'ordering': ('code',),
            },
        ),
        migrations.CreateModel(
            name='Cpmk',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=255, unique=True)),
                ('description', models.CharField(max_length=255)),
                ('type', models.CharField(choices=[('research_method', 'Research Method'), ('thesis', 'Thesis')], max_length=32)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'CPMK',
                'verbose_name_plural': 'CPMK',
                'ordering': ('code',),
            },
        ),
        migrations.CreateModel(
            name='StudentCplScore',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('score', models.PositiveSmallIntegerField(validators=[django.core.validators.MaxValueValidator(100)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('cpl', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='student_scores', to='OBE.cpl')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='cpl_scores', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'unique_together': {('student', 'cpl')},
            },
        ),
        migrations.CreateModel(
            name='AssessmentCriteria',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(blank=True, max_length=255, null=True)),
                ('applies_to', models.CharField(choices=[('seminar', 'Seminar'), ('defence', 'Defence')], max_length=16)),
                ('role', models.CharField(choices=[('default', 'Default'), ('examiner', 'Examiner'), ('supervisor', 'Supervisor')], default='default', max_length=16)),
                ('max_score', models.PositiveSmallIntegerField()),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('cpmk', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='assessment_criteria', to='OBE.cpmk')),
            ],
            options={
                'verbose_name': 'Assessment Criteria',
                'verbose_name_plural': 'Assessment Criteria',
                'ordering': ('display_order', 'id'),
                'indexes': [models.Index(fields=['applies_to', 'role', 'is_active'], name='obe_criteria_scope_idx')],
            },
        ),
        migrations.CreateModel(
            name='AssessmentRubric',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('description', models.TextField(max_length=1000)),
                ('min_score', models.PositiveSmallIntegerField()),
                ('max_score', models.PositiveSmallIntegerField()),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('criteria', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rubrics', to='OBE.assessmentcriteria')),
            ],
            options={
                'ordering': ('display_order', 'id'),
            },
        ),
        migrations.CreateModel(
            name='AssessmentScore',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('score', models.PositiveSmallIntegerField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('assessor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='given_assessment_scores', to=settings.AUTH_USER_MODEL)),
                ('criteria', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='scores', to='OBE.assessmentcriteria')),
                ('rubric', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='scores', to='OBE.assessmentrubric')),
                ('thesis', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assessment_scores', to='thesis.thesis')),
            ],
            options={
                'ordering': ('-created_at',),
            },
        ),
    ]
