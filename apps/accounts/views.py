from django.conf import settings
from django.contrib import messages
from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.utils.translation import gettext_lazy as _
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_http_methods

from .forms import LoginForm


# HELPER FUNCTIONS
def get_client_ip(request):

    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        # First address of the proxy chain is the client
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip


def safe_next_url(request):
    next_url = request.POST.get('next') or request.GET.get('next')
    if next_url and url_has_allowed_host_and_scheme(
        next_url,
        allowed_hosts={request.get_host()},
        require_https=request.is_secure(),
    ):
        return next_url
    return None


# AUTHENTICATION VIEWS
@never_cache
def login_view(request):
    # The session gate middleware already sends signed-in users away;
    # this guard covers deployments without it
    if request.user.is_authenticated:
        return redirect(settings.LOGIN_REDIRECT_URL)

    if request.method == 'POST':
        form = LoginForm(request.POST)

        if form.is_valid():
            email = form.cleaned_data['email']
            password = form.cleaned_data['password']
            remember = form.cleaned_data.get('remember', False)

            # Returns None for wrong credentials and for inactive accounts
            user = authenticate(request, username=email, password=password)

            if user is not None:
                login(request, user)

                if remember:
                    # Session expires in 30 days
                    request.session.set_expiry(30 * 24 * 60 * 60)
                else:
                    # Session expires when browser closes
                    request.session.set_expiry(0)

                user.increment_login_count(ip_address=get_client_ip(request))

                messages.success(
                    request,
                    _('Welkom terug, {}!').format(user.get_full_name())
                )

                return redirect(safe_next_url(request) or settings.LOGIN_REDIRECT_URL)

            messages.error(
                request,
                _('Ongeldig email adres of wachtwoord.')
            )
        else:
            messages.error(request, _('Controleer de gemarkeerde velden.'))

    else:
        form = LoginForm()

    context = {
        'form': form,
        'next': safe_next_url(request) or '',
        'page_title': _('Inloggen'),
    }

    return render(request, 'accounts/login.html', context)


@login_required
@require_http_methods(['GET', 'POST'])
def logout_view(request):
    logout(request)

    messages.success(request, _('Je bent uitgelogd.'))

    return redirect('accounts:login')
