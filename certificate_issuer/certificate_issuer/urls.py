from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView
from django.conf import settings
from django.conf.urls.static import static

urlpatterns = [
    path('', RedirectView.as_view(url='/certificates/', permanent=False)),
    path('admin/', admin.site.urls),
    path('certificates/', include('certificates.urls')),
    path('reports/', include('reports.urls')),
    path('templates/', include('templates_app.urls')),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
