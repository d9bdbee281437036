from django.apps import AppConfig


class AutomataConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'automata'
    verbose_name = 'Finite automata'
