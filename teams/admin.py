from django.contrib import admin
from .models import Team, TeamMember, JoinRequest, RandomPoolEntry


class TeamMemberInline(admin.TabularInline):
    model = TeamMember
    fields = ('user', 'joined_at')
    readonly_fields = ('joined_at',)
    raw_id_fields = ('user',)
    extra = 0


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ('name', 'event', 'event_date', 'slot_time', 'leader', 'score', 'is_random', 'created_at')
    list_filter = ('event', 'event_date', 'is_random')
    search_fields = ('name', 'leader__username', 'leader__name')
    raw_id_fields = ('leader',)
    inlines = [TeamMemberInline]

@admin.register(JoinRequest)
class JoinRequestAdmin(admin.ModelAdmin):
    list_display = ('user', 'team', 'status', 'created_at', 'handled_at')
    list_filter = ('status',)
    search_fields = ('user__username', 'user__name', 'team__name')

@admin.register(RandomPoolEntry)
class RandomPoolEntryAdmin(admin.ModelAdmin):
    list_display = ('user', 'event', 'event_date', 'queued_at')
    list_filter = ('event', 'event_date')
    search_fields = ('user__username', 'user__name', 'user__email')
