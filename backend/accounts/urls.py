from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import AvatarUploadView, CustomTokenObtainPairView, MeView

urlpatterns = [
    path('token/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('me/', MeView.as_view(), name='me'),
    path('profile/avatar/', AvatarUploadView.as_view(), name='profile_avatar'),
]
