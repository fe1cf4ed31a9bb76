import sys

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.http import HttpResponse
from django.urls import include, path
from django.views.generic import RedirectView

import sita.admin_customization  # noqa: F401

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False), name='root'),
    path('favicon.ico', lambda request: HttpResponse(status=204), name='favicon'),
    path('admin/', admin.site.urls),
    path('api/accounts/', include('accounts.urls')),
    path('api/academics/', include('academics.urls')),
    path('api/obe/', include('OBE.urls')),
    path('api/thesis/', include('thesis.urls')),
    path('api/yudisium/', include('yudisium.urls')),
    path('api/notifications/', include('notifications.urls')),
    path('api/documents/', include('documents.urls')),
]

# Serve uploaded media during local development only.
if 'runserver' in sys.argv or settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
