from django.contrib import admin

from .models import MilestoneTemplate, Thesis, ThesisGuidance, ThesisMilestone, ThesisStatus, ThesisSupervisor, Topic


class ThesisSupervisorInline(admin.TabularInline):
    model = ThesisSupervisor
    extra = 0


@admin.register(Thesis)
class ThesisAdmin(admin.ModelAdmin):
    list_display = ('title', 'student', 'topic', 'thesis_status', 'rating', 'deadline_date')
    list_filter = ('rating', 'thesis_status', 'academic_year')
    search_fields = ('title', 'student__username', 'student__full_name', 'student__identity_number')
    inlines = [ThesisSupervisorInline]


@admin.register(ThesisStatus)
class ThesisStatusAdmin(admin.ModelAdmin):
    list_display = ('id', 'name')


@admin.register(Topic)
class TopicAdmin(admin.ModelAdmin):
    list_display = ('name', 'created_at')
    search_fields = ('name',)


@admin.register(ThesisMilestone)
class ThesisMilestoneAdmin(admin.ModelAdmin):
    list_display = ('thesis', 'title', 'status', 'updated_at')
    list_filter = ('status',)


@admin.register(MilestoneTemplate)
class MilestoneTemplateAdmin(admin.ModelAdmin):
    list_display = ('title', 'topic', 'order', 'is_active')


@admin.register(ThesisGuidance)
class ThesisGuidanceAdmin(admin.ModelAdmin):
    list_display = ('thesis', 'supervisor', 'status', 'requested_date')
    list_filter = ('status',)
