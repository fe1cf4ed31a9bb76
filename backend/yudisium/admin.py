from django.contrib import admin

from .models import YudisiumCplRecommendation, YudisiumParticipantRequirement, YudisiumRequirement


@admin.register(YudisiumRequirement)
class YudisiumRequirementAdmin(admin.ModelAdmin):
    list_display = ('order', 'name', 'is_active', 'updated_at')
    list_filter = ('is_active',)
    search_fields = ('name',)


@admin.register(YudisiumParticipantRequirement)
class YudisiumParticipantRequirementAdmin(admin.ModelAdmin):
    list_display = ('student', 'requirement', 'status', 'updated_at')
    list_filter = ('status',)


@admin.register(YudisiumCplRecommendation)
class YudisiumCplRecommendationAdmin(admin.ModelAdmin):
    list_display = ('student', 'cpl', 'created_at')
