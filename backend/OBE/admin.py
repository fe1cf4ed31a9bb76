from django.contrib import admin

from .models import AssessmentCriteria, AssessmentRubric, AssessmentScore, Cpl, Cpmk, StudentCplScore


@admin.register(Cpl)
class CplAdmin(admin.ModelAdmin):
    list_display = ('code', 'description', 'minimal_score', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('code', 'description')


@admin.register(Cpmk)
class CpmkAdmin(admin.ModelAdmin):
    list_display = ('code', 'description', 'type', 'is_active')
    list_filter = ('type', 'is_active')
    search_fields = ('code', 'description')


@admin.register(StudentCplScore)
class StudentCplScoreAdmin(admin.ModelAdmin):
    list_display = ('student', 'cpl', 'score', 'created_at')
    search_fields = ('student__username', 'student__identity_number', 'cpl__code')


class AssessmentRubricInline(admin.TabularInline):
    model = AssessmentRubric
    extra = 0
    fields = ('display_order', 'min_score', 'max_score', 'description')


@admin.register(AssessmentCriteria)
class AssessmentCriteriaAdmin(admin.ModelAdmin):
    list_display = ('cpmk', 'name', 'applies_to', 'role', 'max_score', 'display_order', 'is_active')
    list_filter = ('applies_to', 'role', 'is_active')
    search_fields = ('name', 'cpmk__code')
    inlines = [AssessmentRubricInline]


@admin.register(AssessmentScore)
class AssessmentScoreAdmin(admin.ModelAdmin):
    list_display = ('thesis', 'criteria', 'rubric', 'assessor', 'score', 'created_at')
    list_filter = ('criteria__applies_to',)
