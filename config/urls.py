"""URL Configuration for the Student Activity Platform project."""

from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

urlpatterns = [
    path('', RedirectView.as_view(url='/reports/', permanent=False)),
    path('admin/', admin.site.urls),
    path('reports/', include('ActivityEngine.activity_reports.urls')),
]
