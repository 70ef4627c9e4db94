"""
Forms for accounts app.

- LoginForm: email + password login
- MemberCreationForm: owners/managers add organization members
"""

from django import forms
from django.contrib.auth import get_user_model, authenticate, password_validation
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

User = get_user_model()

INPUT_CLASS = (
    'mt-1 block w-full px-3 py-2 border border-gray-300 rounded-md '
    'shadow-sm focus:outline-none focus:ring-teal-500 '
    'focus:border-teal-500 sm:text-sm'
)


class LoginForm(forms.Form):
    """
    Login form with email and password.

    Authentication goes through EmailAuthBackend, which rejects
    inactive and unapproved members.
    """

    email = forms.EmailField(
        label=_('Email Address'),
        max_length=254,
        widget=forms.EmailInput(attrs={
            'class': INPUT_CLASS,
            'placeholder': 'Email address',
            'autofocus': True,
        })
    )

    password = forms.CharField(
        label=_('Password'),
        strip=False,
        widget=forms.PasswordInput(attrs={
            'class': INPUT_CLASS,
            'placeholder': 'Password',
        })
    )

    def __init__(self, request=None, *args, **kwargs):
        self.request = request
        self.user_cache = None
        super().__init__(*args, **kwargs)

    def clean_email(self):
        return self.cleaned_data.get('email', '').lower().strip()

    def clean(self):
        """Validate credentials."""
        email = self.cleaned_data.get('email')
        password = self.cleaned_data.get('password')

        if email and password:
            self.user_cache = authenticate(
                self.request,
                username=email,
                password=password
            )
            if self.user_cache is None:
                raise ValidationError(
                    _('Invalid email or password. Please try again.'),
                    code='invalid_login',
                )

        return self.cleaned_data

    def get_user(self):
        """Return the authenticated user."""
        return self.user_cache


class MemberCreationForm(forms.ModelForm):
    """
    Form for owners and managers to add a member.

    Phone is stored as typed; it is normalized only when a WhatsApp
    message is sent.
    """

    password = forms.CharField(
        label=_('Password'),
        strip=False,
        widget=forms.PasswordInput(attrs={'class': INPUT_CLASS}),
    )

    class Meta:
        model = User
        fields = ('name', 'email', 'role', 'city', 'phone')
        widgets = {
            'name': forms.TextInput(attrs={'class': INPUT_CLASS, 'placeholder': 'Full name'}),
            'email': forms.EmailInput(attrs={'class': INPUT_CLASS, 'placeholder': 'email@company.com'}),
            'role': forms.Select(attrs={'class': INPUT_CLASS}),
            'city': forms.TextInput(attrs={'class': INPUT_CLASS, 'placeholder': 'City'}),
            'phone': forms.TextInput(attrs={'class': INPUT_CLASS, 'placeholder': '+91...'}),
        }
        labels = {
            'phone': 'Phone (for WhatsApp)',
        }

    def clean_email(self):
        email = self.cleaned_data.get('email', '').lower().strip()
        if email and User.objects.filter(email__iexact=email).exists():
            raise ValidationError(
                _('A user with this email already exists.'),
                code='email_exists',
            )
        return email

    def clean_password(self):
        password = self.cleaned_data.get('password')
        if password:
            password_validation.validate_password(password)
        return password
