from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminOrSecretary
from yudisium.serializers import (
    YudisiumRequirementDetailSerializer,
    YudisiumRequirementSerializer,
    YudisiumRequirementWriteSerializer,
)
from yudisium.services import requirements as requirement_service


class RequirementListCreateView(APIView):
    permission_classes = (IsAdminOrSecretary,)

    def get(self, request):
        qs = requirement_service.list_requirements()
        return Response(YudisiumRequirementSerializer(qs, many=True).data)

    def post(self, request):
        serializer = YudisiumRequirementWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        requirement = requirement_service.create_requirement(**serializer.validated_data)
        return Response(YudisiumRequirementSerializer(requirement).data, status=status.HTTP_201_CREATED)


class RequirementDetailView(APIView):
    permission_classes = (IsAdminOrSecretary,)

    def get(self, request, id: int):
        return Response(YudisiumRequirementDetailSerializer(requirement_service.get_requirement(id)).data)

    def patch(self, request, id: int):
        serializer = YudisiumRequirementWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        requirement = requirement_service.update_requirement(id, **serializer.validated_data)
        return Response(YudisiumRequirementSerializer(requirement).data)

    def delete(self, request, id: int):
        requirement_service.delete_requirement(id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class RequirementToggleView(APIView):
    permission_classes = (IsAdminOrSecretary,)

    def patch(self, request, id: int):
        return Response(YudisiumRequirementSerializer(requirement_service.toggle_requirement(id)).data)


class RequirementMoveTopView(APIView):
    permission_classes = (IsAdminOrSecretary,)

    def patch(self, request, id: int):
        return Response(YudisiumRequirementSerializer(requirement_service.move_to_top(id)).data)


class RequirementMoveBottomView(APIView):
    permission_classes = (IsAdminOrSecretary,)

    def patch(self, request, id: int):
        return Response(YudisiumRequirementSerializer(requirement_service.move_to_bottom(id)).data)
