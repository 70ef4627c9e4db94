"""
URL configuration for attendance app.
"""

from django.urls import path
from . import views

app_name = 'attendance'

urlpatterns = [
    path('', views.settings_view, name='settings'),
    path('holidays/add/', views.holiday_create_view, name='holiday_create'),
    path('holidays/<int:pk>/remove/', views.holiday_delete_view, name='holiday_delete'),
    path('absences/add/', views.absence_create_view, name='absence_create'),
]
