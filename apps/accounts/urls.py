"""
URL configuration for accounts app.
"""

from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # Authentication
    path('login/', views.login_view, name='login'),
    path('logout/', views.logout_view, name='logout'),

    # Members
    path('members/', views.member_list_view, name='member_list'),
    path('members/add/', views.member_create_view, name='member_create'),
    path('members/<int:pk>/remove/', views.member_delete_view, name='member_delete'),
]
