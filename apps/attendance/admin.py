"""
Admin configuration for attendance app.
"""

from django.contrib import admin

from .models import Holiday, Absence


@admin.register(Holiday)
class HolidayAdmin(admin.ModelAdmin):
    list_display = ('date', 'name', 'created_at')
    search_fields = ('name',)
    date_hierarchy = 'date'
    ordering = ('date',)


@admin.register(Absence)
class AbsenceAdmin(admin.ModelAdmin):
    list_display = ('user_name', 'from_date', 'to_date', 'reason', 'created_at')
    list_filter = ('from_date',)
    search_fields = ('user_name', 'user__email', 'reason')
    raw_id_fields = ('user',)
