from django.urls import path

from OBE.services.rubrics import DEFENCE, SEMINAR

from .views import (
    CpmkConfigRemoveView,
    CplDetailView,
    CplListCreateView,
    CplToggleView,
    CpmkDetailView,
    CpmkListCreateView,
    CpmkToggleView,
    CriteriaCreateView,
    CriteriaDetailView,
    CriteriaReorderView,
    CriteriaToggleView,
    RubricCpmkListView,
    RubricCreateView,
    RubricDetailView,
    RubricOverviewView,
    RubricReorderView,
    RubricWeightSummaryView,
)


def _rubric_routes(prefix, scope):
    name = scope.applies_to
    return [
        path(f'{prefix}/', RubricOverviewView.as_view(scope=scope), name=f'rubric_{name}'),
        path(f'{prefix}/cpmks/', RubricCpmkListView.as_view(), name=f'rubric_{name}_cpmks'),
        path(f'{prefix}/weight-summary/', RubricWeightSummaryView.as_view(scope=scope), name=f'rubric_{name}_summary'),
        path(f'{prefix}/criteria/', CriteriaCreateView.as_view(scope=scope), name=f'rubric_{name}_criteria'),
        path(f'{prefix}/criteria/<int:id>/', CriteriaDetailView.as_view(scope=scope), name=f'rubric_{name}_criteria_detail'),
        path(f'{prefix}/criteria/<int:id>/toggle/', CriteriaToggleView.as_view(scope=scope), name=f'rubric_{name}_criteria_toggle'),
        path(f'{prefix}/criteria/<int:criteria_id>/rubrics/', RubricCreateView.as_view(scope=scope), name=f'rubric_{name}_rubrics'),
        path(f'{prefix}/criteria/<int:criteria_id>/rubrics/reorder/', RubricReorderView.as_view(scope=scope), name=f'rubric_{name}_rubrics_reorder'),
        path(f'{prefix}/cpmk/<int:cpmk_id>/criteria/reorder/', CriteriaReorderView.as_view(scope=scope), name=f'rubric_{name}_criteria_reorder'),
        path(f'{prefix}/cpmk/<int:cpmk_id>/', CpmkConfigRemoveView.as_view(scope=scope), name=f'rubric_{name}_cpmk_remove'),
        path(f'{prefix}/rubrics/<int:id>/', RubricDetailView.as_view(scope=scope), name=f'rubric_{name}_rubric_detail'),
    ]


urlpatterns = [
    path('cpl/', CplListCreateView.as_view(), name='cpl_list'),
    path('cpl/<int:id>/', CplDetailView.as_view(), name='cpl_detail'),
    path('cpl/<int:id>/toggle/', CplToggleView.as_view(), name='cpl_toggle'),
    path('cpmk/', CpmkListCreateView.as_view(), name='cpmk_list'),
    path('cpmk/<int:id>/', CpmkDetailView.as_view(), name='cpmk_detail'),
    path('cpmk/<int:id>/toggle/', CpmkToggleView.as_view(), name='cpmk_toggle'),
]

urlpatterns += _rubric_routes('rubric-seminar', SEMINAR)
urlpatterns += _rubric_routes('rubric-defence', DEFENCE)
