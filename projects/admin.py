from django.contrib import admin
from .models import Project, ProjectApplication, ProjectPhase, Review, PendingReview


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ('title', 'status', 'organizer', 'organization', 'applications_enabled', 'created_at')
    list_filter = ('status', 'applications_enabled', 'created_at')
    search_fields = ('title', 'description', 'organizer__username')
    date_hierarchy = 'created_at'


@admin.register(ProjectApplication)
class ProjectApplicationAdmin(admin.ModelAdmin):
    list_display = ('user', 'project', 'partnership_type', 'status', 'created_at')
    list_filter = ('status', 'partnership_type')
    search_fields = ('user__username', 'project__title')


@admin.register(ProjectPhase)
class ProjectPhaseAdmin(admin.ModelAdmin):
    list_display = ('title', 'project', 'order', 'status', 'due_date', 'completed_date')
    list_filter = ('status', 'template_key')
    search_fields = ('title', 'project__title')


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('project', 'reviewer', 'reviewee', 'rating', 'is_organizer_review', 'created_at')
    list_filter = ('rating', 'is_organizer_review')
    search_fields = ('comment', 'project__title', 'reviewer__username', 'reviewee__username')


@admin.register(PendingReview)
class PendingReviewAdmin(admin.ModelAdmin):
    list_display = ('project', 'reviewer', 'reviewee', 'status', 'position')
    list_filter = ('status', 'is_organizer_review')
