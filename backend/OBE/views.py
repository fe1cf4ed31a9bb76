import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsDepartmentOfficial, IsDepartmentSecretary
from OBE.serializers import (
    CplSerializer,
    CplWriteSerializer,
    CpmkSerializer,
    CpmkWithRubricsSerializer,
    CpmkWriteSerializer,
    CriteriaCreateSerializer,
    CriteriaSerializer,
    CriteriaUpdateSerializer,
    ReorderSerializer,
    RubricCreateSerializer,
    RubricSerializer,
    RubricUpdateSerializer,
    ToggleSerializer,
)
from OBE.services import outcomes as outcome_service
from OBE.services import rubrics as rubric_service

logger = logging.getLogger(__name__)


# CPL / CPMK

class CplListCreateView(APIView):
    permission_classes = (IsDepartmentOfficial,)

    def get(self, request):
        return Response(CplSerializer(outcome_service.list_cpls(), many=True).data)

    def post(self, request):
        serializer = CplWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cpl = outcome_service.create_cpl(**serializer.validated_data)
        return Response(CplSerializer(cpl).data, status=status.HTTP_201_CREATED)


class CplDetailView(APIView):
    permission_classes = (IsDepartmentOfficial,)

    def get(self, request, id: int):
        return Response(CplSerializer(outcome_service.get_cpl(id)).data)

    def patch(self, request, id: int):
        serializer = CplWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        cpl = outcome_service.update_cpl(id, **serializer.validated_data)
        return Response(CplSerializer(cpl).data)

    def delete(self, request, id: int):
        outcome_service.delete_cpl(id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CplToggleView(APIView):
    permission_classes = (IsDepartmentOfficial,)

    def patch(self, request, id: int):
        return Response(CplSerializer(outcome_service.toggle_cpl(id)).data)


class CpmkListCreateView(APIView):
    permission_classes = (IsDepartmentOfficial,)

    def get(self, request):
        qs = outcome_service.list_cpmks(request.query_params.get('type'))
        return Response(CpmkSerializer(qs, many=True).data)

    def post(self, request):
        serializer = CpmkWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cpmk = outcome_service.create_cpmk(**serializer.validated_data)
        return Response(CpmkSerializer(cpmk).data, status=status.HTTP_201_CREATED)


class CpmkDetailView(APIView):
    permission_classes = (IsDepartmentOfficial,)

    def get(self, request, id: int):
        return Response(CpmkSerializer(outcome_service.get_cpmk(id)).data)

    def patch(self, request, id: int):
        serializer = CpmkWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        cpmk = outcome_service.update_cpmk(id, **serializer.validated_data)
        return Response(CpmkSerializer(cpmk).data)

    def delete(self, request, id: int):
        outcome_service.delete_cpmk(id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CpmkToggleView(APIView):
    permission_classes = (IsDepartmentOfficial,)

    def patch(self, request, id: int):
        return Response(CpmkSerializer(outcome_service.toggle_cpmk(id)).data)


# Rubrics
#
# One set of views serves both contexts; urls.py binds ``scope`` to
# rubric_service.SEMINAR or rubric_service.DEFENCE through as_view().

class _RubricScopedView(APIView):
    permission_classes = (IsDepartmentSecretary,)
    scope = rubric_service.SEMINAR

    def role_param(self, request):
        return request.query_params.get('role') or None


class RubricCpmkListView(APIView):
    """Active thesis CPMKs available to attach criteria to."""
    permission_classes = (IsDepartmentSecretary,)

    def get(self, request):
        qs = outcome_service.list_cpmks('thesis').filter(is_active=True)
        return Response(CpmkSerializer(qs, many=True).data)


class RubricOverviewView(_RubricScopedView):
    def get(self, request):
        cpmks = rubric_service.get_cpmks_with_rubrics(self.scope, self.role_param(request))
        return Response(CpmkWithRubricsSerializer(cpmks, many=True).data)


class RubricWeightSummaryView(_RubricScopedView):
    def get(self, request):
        return Response(rubric_service.get_weight_summary(self.scope, self.role_param(request)))


class CriteriaCreateView(_RubricScopedView):
    def post(self, request):
        serializer = CriteriaCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.setdefault('role', self.role_param(request))
        criteria = rubric_service.create_criteria(self.scope, **data)
        return Response(CriteriaSerializer(criteria).data, status=status.HTTP_201_CREATED)


class CriteriaDetailView(_RubricScopedView):
    def patch(self, request, id: int):
        serializer = CriteriaUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        criteria = rubric_service.update_criteria(self.scope, id, **serializer.validated_data)
        return Response(CriteriaSerializer(criteria).data)

    def delete(self, request, id: int):
        rubric_service.delete_criteria(self.scope, id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CriteriaToggleView(_RubricScopedView):
    def patch(self, request, id: int):
        serializer = ToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        criteria = rubric_service.toggle_criteria(self.scope, id, serializer.validated_data['is_active'])
        return Response(CriteriaSerializer(criteria).data)


class CriteriaReorderView(_RubricScopedView):
    def put(self, request, cpmk_id: int):
        serializer = ReorderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        items = rubric_service.reorder_criteria(
            self.scope, cpmk_id, serializer.validated_data['ordered_ids'], self.role_param(request),
        )
        return Response(CriteriaSerializer(items, many=True).data)


class CpmkConfigRemoveView(_RubricScopedView):
    def delete(self, request, cpmk_id: int):
        result = rubric_service.remove_cpmk_config(self.scope, cpmk_id, self.role_param(request))
        return Response(result)


class RubricCreateView(_RubricScopedView):
    def post(self, request, criteria_id: int):
        serializer = RubricCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rubric = rubric_service.create_rubric(self.scope, criteria_id, **serializer.validated_data)
        return Response(RubricSerializer(rubric).data, status=status.HTTP_201_CREATED)


class RubricReorderView(_RubricScopedView):
    def put(self, request, criteria_id: int):
        serializer = ReorderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        items = rubric_service.reorder_rubrics(self.scope, criteria_id, serializer.validated_data['ordered_ids'])
        return Response(RubricSerializer(items, many=True).data)


class RubricDetailView(_RubricScopedView):
    def patch(self, request, id: int):
        serializer = RubricUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rubric = rubric_service.update_rubric(self.scope, id, **serializer.validated_data)
        return Response(RubricSerializer(rubric).data)

    def delete(self, request, id: int):
        rubric_service.delete_rubric(self.scope, id)
        return Response(status=status.HTTP_204_NO_CONTENT)
