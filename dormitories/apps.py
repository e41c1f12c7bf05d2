from django.apps import AppConfig


class DormitoriesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'dormitories'
    verbose_name = 'Dormitories'
