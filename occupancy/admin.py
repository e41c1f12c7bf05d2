from django.contrib import admin
from .models import AcceptedApplication


@admin.register(AcceptedApplication)
class AcceptedApplicationAdmin(admin.ModelAdmin):
    """
    Occupancy records are created by approving applications through the
    API, so they cannot be added here.
    """
    list_display = ['student_index_number', 'user', 'room', 'average_grade', 'academic_year', 'created_at']
    list_filter = ['academic_year', 'room__dormitory']
    search_fields = ['student_index_number', 'user__username', 'room__number']
    readonly_fields = ['application', 'user', 'room', 'student_index_number', 'average_grade', 'created_at', 'updated_at']

    fieldsets = (
        ('Resident', {
            'fields': ('user', 'student_index_number', 'average_grade')
        }),
        ('Location', {
            'fields': ('room', 'academic_year')
        }),
        ('Source', {
            'fields': ('application', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def has_add_permission(self, request):
        return False

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('user', 'room', 'room__dormitory')
