from django.urls import path

from .views import (
    RequirementDetailView,
    RequirementListCreateView,
    RequirementMoveBottomView,
    RequirementMoveTopView,
    RequirementToggleView,
)

urlpatterns = [
    path('requirements/', RequirementListCreateView.as_view(), name='yudisium_requirements'),
    path('requirements/<int:id>/', RequirementDetailView.as_view(), name='yudisium_requirement_detail'),
    path('requirements/<int:id>/toggle/', RequirementToggleView.as_view(), name='yudisium_requirement_toggle'),
    path('requirements/<int:id>/move-top/', RequirementMoveTopView.as_view(), name='yudisium_requirement_move_top'),
    path('requirements/<int:id>/move-bottom/', RequirementMoveBottomView.as_view(), name='yudisium_requirement_move_bottom'),
]
