import logging
from typing import List, Optional

from .automaton import Automaton, InvalidAutomatonError
from .models import StoredAutomaton

logger = logging.getLogger(__name__)


def save_automaton(automaton: Automaton) -> StoredAutomaton:
    """Inserts the automaton, or replaces the stored one with the same id."""
    stored, created = StoredAutomaton.objects.update_or_create(
        automaton_id=automaton.id,
        defaults={'name': automaton.name, 'definition': automaton.to_dict()},
    )
    logger.info('%s automaton %s (%s)', 'Created' if created else 'Updated', automaton.id, automaton.name)
    return stored


def get_stored_automata() -> List[Automaton]:
    automata = []
    for stored in StoredAutomaton.objects.all():
        automaton = _load(stored)
        if automaton is not None:
            automata.append(automaton)
    return automata


def get_automaton_by_id(automaton_id: str) -> Optional[Automaton]:
    try:
        stored = StoredAutomaton.objects.get(automaton_id=automaton_id)
    except StoredAutomaton.DoesNotExist:
        return None
    return _load(stored)


def delete_automaton(automaton_id: str) -> bool:
    deleted, _ = StoredAutomaton.objects.filter(automaton_id=automaton_id).delete()
    if deleted:
        logger.info('Deleted automaton %s', automaton_id)
    return bool(deleted)


def _load(stored: StoredAutomaton) -> Optional[Automaton]:
    try:
        return Automaton.from_dict(stored.definition)
    except InvalidAutomatonError:
        logger.warning('Skipping unreadable stored automaton %s', stored.automaton_id, exc_info=True)
        return None
