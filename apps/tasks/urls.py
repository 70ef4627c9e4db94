"""
URL configuration for tasks app.

Includes:
- Task table with filters
- Assign, detail and completion
- Bogus attachment audit
- Removal requests
"""

from django.urls import path
from . import views

app_name = 'tasks'

urlpatterns = [
    path('', views.task_list, name='task_list'),
    path('assign/', views.task_create, name='task_create'),
    path('<int:pk>/', views.task_detail, name='task_detail'),
    path('<int:pk>/complete/', views.task_complete, name='task_complete'),

    # Audit
    path('audit/', views.audit_list, name='audit_list'),
    path('<int:pk>/audit/', views.task_audit, name='task_audit'),

    # Removal requests
    path('removal-requests/', views.removal_request_list, name='removal_request_list'),
    path('removal-requests/<int:pk>/resolve/', views.removal_request_resolve, name='removal_request_resolve'),
]
