from django.apps import AppConfig


class ForkliftsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.forklifts'
    label = 'forklifts'
