from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['application', 'period', 'amount', 'status', 'due_date', 'paid_at']
    list_filter = ['status', 'period']
    search_fields = ['application__student_index_number', 'application__user__username']
    date_hierarchy = 'due_date'

    fieldsets = (
        ('Application', {
            'fields': ('application',)
        }),
        ('Payment Information', {
            'fields': ('period', 'amount', 'status', 'due_date', 'paid_at')
        }),
        ('Notes', {
            'fields': ('notes',),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('application', 'application__user')
