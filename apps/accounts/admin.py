from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import User

BADGE_STYLE = 'padding: 2px 8px; border-radius: 3px; color: white; background: {};'


# PANEL USERS
@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Who may sign in to the panel.

    Only authentication data lives here; the admin_users table in the
    data store is managed through the CRUD pages like any other table.
    """

    list_display = ('email', 'full_name', 'status_badge', 'login_count', 'last_login_ip', 'last_login')
    list_display_links = ('email',)
    list_filter = ('is_active', 'is_staff')
    search_fields = ('email', 'full_name')
    ordering = ('email',)
    actions = ['reset_login_count']

    fieldsets = (
        (_('Inloggegevens'), {'fields': ('email', 'password')}),
        (_('Naam'), {'fields': ('full_name',)}),
        (_('Rechten'), {
            'fields': ('is_active', 'is_staff', 'is_superuser'),
            'classes': ('collapse',),
        }),
        (_('Activiteit'), {'fields': ('login_count', 'last_login_ip', 'last_login', 'date_joined')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'full_name', 'password1', 'password2', 'is_staff'),
        }),
    )

    readonly_fields = ('login_count', 'last_login_ip', 'last_login', 'date_joined')

    @admin.display(description=_('Status'), ordering='is_active')
    def status_badge(self, obj):
        if obj.is_active:
            return format_html('<span style="{}">{}</span>', BADGE_STYLE.format('#198754'), _('Actief'))
        return format_html('<span style="{}">{}</span>', BADGE_STYLE.format('#dc3545'), _('Geblokkeerd'))

    @admin.action(description=_('Inlogteller op nul zetten'))
    def reset_login_count(self, request, queryset):
        updated = queryset.update(login_count=0, last_login_ip=None)
        self.message_user(request, _('%d gebruiker(s) bijgewerkt') % updated, messages.SUCCESS)

    def has_delete_permission(self, request, obj=None):
        # The signed-in admin cannot remove their own account
        if obj is not None and obj == request.user:
            return False
        return super().has_delete_permission(request, obj)


admin.site.site_header = _('Auria Admin')
admin.site.site_title = _('Auria Admin')
admin.site.index_title = _('Panelgebruikers')
