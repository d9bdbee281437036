from django.db import models


class StoredAutomaton(models.Model):
    """One saved automaton, kept in its JSON form and keyed by the editing layer's id."""
    automaton_id = models.CharField(max_length=100, unique=True)
    name = models.CharField(max_length=200)
    definition = models.JSONField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return self.name
