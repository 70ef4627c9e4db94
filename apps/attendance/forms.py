"""
Forms for attendance app.
"""

from django import forms
from django.core.exceptions import ValidationError

from apps.accounts.forms import INPUT_CLASS


class HolidayForm(forms.Form):
    date = forms.DateField(widget=forms.DateInput(attrs={'type': 'date', 'class': INPUT_CLASS}))
    name = forms.CharField(
        max_length=150,
        widget=forms.TextInput(attrs={'class': INPUT_CLASS, 'placeholder': 'e.g. Diwali'}),
    )


class AbsenceForm(forms.Form):
    from_date = forms.DateField(widget=forms.DateInput(attrs={'type': 'date', 'class': INPUT_CLASS}))
    to_date = forms.DateField(widget=forms.DateInput(attrs={'type': 'date', 'class': INPUT_CLASS}))
    reason = forms.CharField(
        max_length=255,
        required=False,
        widget=forms.TextInput(attrs={'class': INPUT_CLASS, 'placeholder': 'Reason (optional)'}),
    )

    def clean(self):
        cleaned_data = super().clean()
        from_date = cleaned_data.get('from_date')
        to_date = cleaned_data.get('to_date')
        if from_date and to_date and from_date > to_date:
            raise ValidationError("From date cannot be after to date.")
        return cleaned_data
