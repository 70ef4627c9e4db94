"""
URL configuration for task_tracker project.
"""

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.views.generic import RedirectView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', RedirectView.as_view(pattern_name='tasks:task_list', permanent=False), name='home'),

    # App URLs
    path('', include('apps.accounts.urls', namespace='accounts')),
    path('tasks/', include('apps.tasks.urls', namespace='tasks')),
    path('reports/', include('apps.reports.urls', namespace='reports')),
    path('attendance/', include('apps.attendance.urls', namespace='attendance')),
]

if settings.DEBUG and 'debug_toolbar' in settings.INSTALLED_APPS:
    import debug_toolbar
    urlpatterns = [
        path('__debug__/', include(debug_toolbar.urls)),
    ] + urlpatterns

# Admin site customization
admin.site.site_header = 'Task Tracker Administration'
admin.site.site_title = 'Task Tracker Admin'
admin.site.index_title = 'Welcome to Task Tracker Admin'
