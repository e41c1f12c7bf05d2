from django.contrib import admin
from .models import Dormitory, Room


class RoomInline(admin.TabularInline):
    model = Room
    extra = 1
    show_change_link = True


@admin.register(Dormitory)
class DormitoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'address', 'telephone', 'email']
    search_fields = ['name', 'address']
    inlines = [RoomInline]


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ['number', 'dormitory', 'capacity', 'occupant_count', 'free_beds']
    list_filter = ['dormitory']
    search_fields = ['number', 'dormitory__name']
    readonly_fields = ['occupant_count', 'free_beds']

    fieldsets = (
        ('Basic Information', {
            'fields': ('dormitory', 'number', 'capacity')
        }),
        ('Amenities', {
            'fields': ('amenities',)
        }),
        ('Occupancy', {
            'fields': ('occupant_count', 'free_beds')
        }),
    )
