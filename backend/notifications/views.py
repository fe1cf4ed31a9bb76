from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from notifications.serializers import NotificationSerializer
from notifications.services import notification_service


def _flag(value) -> bool:
    return str(value or '').strip().lower() in ('1', 'true', 'yes')


class NotificationListView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request):
        result = notification_service.list_notifications(
            request.user,
            limit=request.query_params.get('limit') or 20,
            offset=request.query_params.get('offset') or 0,
            only_unread=_flag(request.query_params.get('only_unread')),
        )
        result['items'] = NotificationSerializer(result['items'], many=True).data
        return Response(result)

    def delete(self, request):
        deleted = notification_service.delete_all(request.user)
        return Response({'deleted': deleted})


class NotificationUnreadCountView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request):
        return Response({'unread_count': notification_service.unread_count(request.user)})


class NotificationReadView(APIView):
    permission_classes = (IsAuthenticated,)

    def patch(self, request, id: int):
        notification = notification_service.mark_as_read(request.user, id)
        return Response(NotificationSerializer(notification).data)


class NotificationReadAllView(APIView):
    permission_classes = (IsAuthenticated,)

    def patch(self, request):
        updated = notification_service.mark_all_as_read(request.user)
        return Response({'updated': updated})


class NotificationDetailView(APIView):
    permission_classes = (IsAuthenticated,)

    def delete(self, request, id: int):
        notification_service.delete_notification(request.user, id)
        return Response(status=status.HTTP_204_NO_CONTENT)
