"""
Admin configuration for the users app.

This module unregisters the default `User` admin and re-registers it with
an inline profile form so display names and presence are visible via the
Django admin.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User

from .models import UserProfile


class UserProfileInline(admin.StackedInline):
    model = UserProfile
    can_delete = False
    readonly_fields = ("is_online", "last_seen")


class UserAdmin(BaseUserAdmin):
    inlines = [UserProfileInline]
    list_display = ("username", "email", "is_active", "date_joined")


admin.site.unregister(User)
admin.site.register(User, UserAdmin)


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "full_name", "is_online", "last_seen")
    list_filter = ("is_online",)
    search_fields = ("user__username", "full_name")
    readonly_fields = ("is_online", "last_seen")
