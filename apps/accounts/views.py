"""
Views for accounts app.

Includes:
- Authentication views (login, logout)
- Members views (list for everyone; add/remove for owners and managers)
"""

from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth import login, logout, get_user_model
from django.contrib.auth.decorators import login_required, user_passes_test
from django.contrib import messages
from django.core.exceptions import PermissionDenied
from django.views.decorators.http import require_POST
from django.utils.http import url_has_allowed_host_and_scheme

from .forms import LoginForm, MemberCreationForm
from .services import create_member, remove_member

User = get_user_model()


# =============================================================================
# Permission Decorators
# =============================================================================

def manager_required(view_func):
    """Decorator to require the owner or manager role."""
    def check_manager(user):
        return user.is_authenticated and user.can_manage_members()

    return user_passes_test(check_manager, login_url='accounts:login')(view_func)


# =============================================================================
# Authentication Views
# =============================================================================

def login_view(request):
    """Email + password login."""
    if request.user.is_authenticated:
        return redirect('tasks:task_list')

    if request.method == 'POST':
        form = LoginForm(request, data=request.POST)
        if form.is_valid():
            user = form.get_user()
            login(request, user)
            messages.success(request, f'Welcome back, {user.get_short_name()}!')

            next_url = request.GET.get('next')
            if next_url and url_has_allowed_host_and_scheme(next_url, {request.get_host()}):
                return redirect(next_url)
            return redirect('tasks:task_list')
    else:
        form = LoginForm(request)

    return render(request, 'accounts/login.html', {'form': form})


@login_required
def logout_view(request):
    """Log out the user and redirect to login page."""
    logout(request)
    messages.success(request, 'You have been logged out successfully.')
    return redirect('accounts:login')


# =============================================================================
# Members
# =============================================================================

@login_required
def member_list_view(request):
    """All members; owners and managers also get the add form."""
    members = User.objects.order_by('name')
    form = MemberCreationForm() if request.user.can_manage_members() else None

    return render(request, 'accounts/member_list.html', {
        'members': members,
        'form': form,
    })


@login_required
@manager_required
@require_POST
def member_create_view(request):
    form = MemberCreationForm(request.POST)
    if form.is_valid():
        try:
            member = create_member(
                created_by=request.user,
                name=form.cleaned_data['name'],
                email=form.cleaned_data['email'],
                password=form.cleaned_data['password'],
                role=form.cleaned_data['role'],
                city=form.cleaned_data.get('city', ''),
                phone=form.cleaned_data.get('phone', ''),
            )
        except PermissionDenied as e:
            messages.error(request, str(e))
        else:
            messages.success(request, f'Member {member.get_full_name()} added.')
            return redirect('accounts:member_list')

    members = User.objects.order_by('name')
    return render(request, 'accounts/member_list.html', {
        'members': members,
        'form': form,
    })


@login_required
@manager_required
@require_POST
def member_delete_view(request, pk):
    member = get_object_or_404(User, pk=pk)
    try:
        remove_member(request.user, member)
    except PermissionDenied as e:
        messages.error(request, str(e))
    else:
        messages.success(request, f'Member {member.get_full_name()} removed.')
    return redirect('accounts:member_list')
