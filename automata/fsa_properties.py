from enum import Enum
from typing import Dict, Set, Tuple

from .automaton import Automaton


class AutomatonType(str, Enum):
    DFA = 'DFA'
    NFA = 'NFA'


_DESCRIPTIONS = {
    AutomatonType.DFA: 'Deterministic Finite Automaton',
    AutomatonType.NFA: 'Non-deterministic Finite Automaton',
}


def is_deterministic(fsa: Automaton) -> bool:
    """
    Checks if the FSA is deterministic.

    An FSA is deterministic if:
    1. It has no epsilon transitions
    2. For each state and each symbol, there is at most one destination

    Missing transitions are allowed: a partial DFA is still a DFA, and
    getting stuck is left to the simulator.

    Args:
        fsa: The automaton to classify

    Returns:
        bool: True if the FSA is deterministic, False otherwise
    """
    destinations: Dict[Tuple[str, str], Set[str]] = {}

    for transition in fsa.transitions:
        # Check for epsilon transitions
        if transition.is_epsilon:
            return False

        targets = destinations.setdefault((transition.source, transition.symbol), set())
        targets.add(transition.target)
        if len(targets) > 1:
            return False

    return True


def is_nondeterministic(fsa: Automaton) -> bool:
    return not is_deterministic(fsa)


def get_automaton_type(fsa: Automaton) -> AutomatonType:
    return AutomatonType.DFA if is_deterministic(fsa) else AutomatonType.NFA


def describe_type(automaton_type: AutomatonType) -> str:
    return _DESCRIPTIONS[automaton_type]
