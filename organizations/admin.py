from django.contrib import admin
from .models import JoinRequest, Organization, OrganizationMember, PartnershipInterest


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ('name', 'owner', 'status', 'industry', 'location', 'created_at')
    search_fields = ('name', 'description', 'owner__username')
    list_filter = ('status', 'industry')


@admin.register(OrganizationMember)
class OrganizationMemberAdmin(admin.ModelAdmin):
    list_display = ('user', 'organization', 'role', 'created_at')
    list_filter = ('role',)
    search_fields = ('user__username', 'organization__name')


@admin.register(JoinRequest)
class JoinRequestAdmin(admin.ModelAdmin):
    list_display = ('user', 'organization', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('user__username', 'organization__name')


@admin.register(PartnershipInterest)
class PartnershipInterestAdmin(admin.ModelAdmin):
    list_display = ('organization', 'partnership_type', 'created_at')
    list_filter = ('partnership_type',)
    search_fields = ('organization__name', 'description')
