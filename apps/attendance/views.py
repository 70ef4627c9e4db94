"""
Views for attendance app.

A single settings page: holidays (managed by owners and managers) and
the current user's absences.
"""

from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.core.exceptions import PermissionDenied, ValidationError
from django.views.decorators.http import require_POST

from .forms import HolidayForm, AbsenceForm
from .models import Holiday, Absence
from .services import add_holiday, delete_holiday, mark_absent


@login_required
def settings_view(request):
    return render(request, 'attendance/settings.html', {
        'holidays': Holiday.objects.all(),
        'absences': Absence.objects.filter(user=request.user),
        'holiday_form': HolidayForm() if request.user.can_manage_holidays() else None,
        'absence_form': AbsenceForm(),
    })


@login_required
@require_POST
def holiday_create_view(request):
    form = HolidayForm(request.POST)
    if not form.is_valid():
        messages.error(request, 'Please enter a valid date and name.')
        return redirect('attendance:settings')

    try:
        holiday = add_holiday(request.user, form.cleaned_data['date'], form.cleaned_data['name'])
        messages.success(request, f'Holiday "{holiday.name}" added.')
    except PermissionDenied as e:
        messages.error(request, str(e))
    except ValidationError as e:
        messages.error(request, e.messages[0])

    return redirect('attendance:settings')


@login_required
@require_POST
def holiday_delete_view(request, pk):
    holiday = get_object_or_404(Holiday, pk=pk)

    try:
        delete_holiday(request.user, holiday)
        messages.success(request, f'Holiday "{holiday.name}" removed.')
    except PermissionDenied as e:
        messages.error(request, str(e))

    return redirect('attendance:settings')


@login_required
@require_POST
def absence_create_view(request):
    form = AbsenceForm(request.POST)
    if not form.is_valid():
        for error in form.non_field_errors():
            messages.error(request, error)
        if not form.non_field_errors():
            messages.error(request, 'Please enter a valid date range.')
        return redirect('attendance:settings')

    try:
        mark_absent(
            request.user,
            form.cleaned_data['from_date'],
            form.cleaned_data['to_date'],
            form.cleaned_data['reason'],
        )
        messages.success(request, 'Absence recorded.')
    except ValidationError as e:
        messages.error(request, e.messages[0])

    return redirect('attendance:settings')
