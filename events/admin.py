from django.contrib import admin
from .models import Event, EventRegistration

@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ('name', 'key', 'max_team_size', 'first_slot', 'slot_count', 'teams_per_slot', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('name', 'key')
    prepopulated_fields = {'key': ('name',)}

@admin.register(EventRegistration)
class EventRegistrationAdmin(admin.ModelAdmin):
    list_display = ('email', 'reg_no', 'event', 'event_date', 'user', 'registered_at')
    list_filter = ('event', 'event_date')
    search_fields = ('email', 'reg_no', 'user__username', 'user__name')
    raw_id_fields = ('user',)
