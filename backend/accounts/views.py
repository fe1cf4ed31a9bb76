import logging
import os

from django.conf import settings
from rest_framework import permissions, status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from .serializers import IdentifierTokenObtainPairSerializer, MeSerializer

log = logging.getLogger(__name__)

AVATAR_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp'}


class CustomTokenObtainPairView(TokenObtainPairView):
    # identifier may be username, email or NIM/NIP
    serializer_class = IdentifierTokenObtainPairSerializer


class MeView(APIView):
    permission_classes = (permissions.IsAuthenticated,)

    def get(self, request):
        serializer = MeSerializer(request.user)
        return Response(serializer.data)


class AvatarUploadView(APIView):
    permission_classes = (permissions.IsAuthenticated,)
    parser_classes = (MultiPartParser, FormParser)

    def post(self, request):
        upload = request.FILES.get('avatar') or request.FILES.get('file')
        if upload is None:
            return Response({'detail': 'No file uploaded (field "avatar").'}, status=status.HTTP_400_BAD_REQUEST)

        ext = os.path.splitext(upload.name or '')[1].lower()
        if ext not in AVATAR_EXTENSIONS:
            return Response(
                {'detail': 'Avatar must be a JPG, PNG or WEBP image.'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        content_type = str(getattr(upload, 'content_type', '') or '')
        if content_type and not content_type.startswith('image/'):
            return Response({'detail': 'Avatar must be an image.'}, status=status.HTTP_400_BAD_REQUEST)

        max_mb = int(getattr(settings, 'UPLOAD_MAX_AVATAR_MB', 2))
        if upload.size > max_mb * 1024 * 1024:
            return Response({'detail': f'Avatar must not exceed {max_mb} MB.'}, status=status.HTTP_400_BAD_REQUEST)

        user = request.user
        old = user.avatar.name if user.avatar else None
        user.avatar = upload
        user.save(update_fields=['avatar'])
        if old and old != user.avatar.name:
            try:
                user.avatar.storage.delete(old)
            except OSError:
                log.warning('Failed to delete old avatar file=%s user=%s', old, user.pk)

        return Response(MeSerializer(user).data)
