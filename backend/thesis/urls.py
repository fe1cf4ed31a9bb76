from django.urls import path

from .views import (
    LecturerGuidanceDecisionView,
    LecturerGuidanceListView,
    MilestoneActionView,
    MilestoneDetailView,
    MilestoneFromTemplatesView,
    MilestoneProgressView,
    MilestoneReorderView,
    MilestoneStatusView,
    MilestoneTemplateBulkDeleteView,
    MilestoneTemplateDetailView,
    MilestoneTemplateListCreateView,
    StudentGuidanceCancelView,
    StudentGuidanceView,
    ThesisDetailView,
    ThesisFailView,
    ThesisListCreateView,
    ThesisMilestoneListCreateView,
    ThesisProgressView,
    ThesisStatusListView,
    TopicBulkDeleteView,
    TopicDetailView,
    TopicListCreateView,
)

urlpatterns = [
    path('topics/', TopicListCreateView.as_view(), name='topics'),
    path('topics/bulk-delete/', TopicBulkDeleteView.as_view(), name='topics_bulk_delete'),
    path('topics/<int:id>/', TopicDetailView.as_view(), name='topic_detail'),
    path('statuses/', ThesisStatusListView.as_view(), name='thesis_statuses'),
    path('master-data/', ThesisListCreateView.as_view(), name='thesis_master_data'),
    path('master-data/<int:id>/', ThesisDetailView.as_view(), name='thesis_detail'),
    path('<int:id>/fail/', ThesisFailView.as_view(), name='thesis_fail'),

    path('milestone-templates/', MilestoneTemplateListCreateView.as_view(), name='milestone_templates'),
    path('milestone-templates/bulk-delete/', MilestoneTemplateBulkDeleteView.as_view(), name='milestone_templates_bulk_delete'),
    path('milestone-templates/<int:id>/', MilestoneTemplateDetailView.as_view(), name='milestone_template_detail'),

    path('<int:id>/milestones/', ThesisMilestoneListCreateView.as_view(), name='thesis_milestones'),
    path('<int:id>/milestones/from-templates/', MilestoneFromTemplatesView.as_view(), name='thesis_milestones_from_templates'),
    path('<int:id>/milestones/reorder/', MilestoneReorderView.as_view(), name='thesis_milestones_reorder'),
    path('<int:id>/progress/', ThesisProgressView.as_view(), name='thesis_progress'),
    path('milestones/<int:id>/', MilestoneDetailView.as_view(), name='milestone_detail'),
    path('milestones/<int:id>/status/', MilestoneStatusView.as_view(), name='milestone_status'),
    path('milestones/<int:id>/progress/', MilestoneProgressView.as_view(), name='milestone_progress'),
    path('milestones/<int:id>/submit/', MilestoneActionView.as_view(step='submit'), name='milestone_submit'),
    path('milestones/<int:id>/validate/', MilestoneActionView.as_view(step='validate'), name='milestone_validate'),
    path('milestones/<int:id>/revision/', MilestoneActionView.as_view(step='revision'), name='milestone_revision'),

    path('guidance/', StudentGuidanceView.as_view(), name='student_guidance'),
    path('guidance/<int:id>/cancel/', StudentGuidanceCancelView.as_view(), name='student_guidance_cancel'),
    path('lecturer/guidance/', LecturerGuidanceListView.as_view(), name='lecturer_guidance'),
    path('lecturer/guidance/<int:id>/accept/', LecturerGuidanceDecisionView.as_view(step='accept'), name='lecturer_guidance_accept'),
    path('lecturer/guidance/<int:id>/reject/', LecturerGuidanceDecisionView.as_view(step='reject'), name='lecturer_guidance_reject'),
    path('lecturer/guidance/<int:id>/complete/', LecturerGuidanceDecisionView.as_view(step='complete'), name='lecturer_guidance_complete'),
]
