from django.urls import path

from .views import (
    NotificationDetailView,
    NotificationListView,
    NotificationReadAllView,
    NotificationReadView,
    NotificationUnreadCountView,
)

urlpatterns = [
    path('', NotificationListView.as_view(), name='notifications'),
    path('unread-count/', NotificationUnreadCountView.as_view(), name='notifications_unread_count'),
    path('read-all/', NotificationReadAllView.as_view(), name='notifications_read_all'),
    path('<int:id>/', NotificationDetailView.as_view(), name='notification_detail'),
    path('<int:id>/read/', NotificationReadView.as_view(), name='notification_read'),
]
