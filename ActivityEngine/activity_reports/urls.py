from django.urls import path
from . import views

urlpatterns = [
    path('', views.analytics_dashboard, name='analytics_dashboard'),
    path('activities/', views.activity_list, name='activity_list'),
    path('export/', views.export_report, name='export_report'),
]
