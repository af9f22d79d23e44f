from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User

@admin.register(User)
class CustomUserAdmin(UserAdmin):
    list_display = ('username', 'name', 'reg_no', 'email', 'role', 'is_onboarded', 'is_staff')
    list_filter = ('role', 'is_staff', 'is_superuser', 'is_onboarded', 'is_active')
    search_fields = ('username', 'name', 'reg_no', 'email')
    fieldsets = UserAdmin.fieldsets + (
        ('Participant', {'fields': ('role', 'name', 'reg_no', 'is_onboarded')}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Participant', {'fields': ('role', 'name', 'reg_no')}),
    )
