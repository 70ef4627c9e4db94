"""
URL configuration for reports app.
"""

from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    path('kpi/', views.kpi_view, name='kpi'),
    path('red-zone/', views.red_zone_view, name='red_zone'),
]
