from collections import deque
from dataclasses import replace
from typing import Dict, FrozenSet, List, Set

from .automaton import Automaton, InvalidAutomatonError, Transition, is_epsilon, new_automaton_id
from .fsa_properties import is_deterministic
from .fsa_simulation import epsilon_closure, move, state_set_label
from .fsa_validation import validate_automaton

ALREADY_DFA_SUFFIX = ' (Already DFA)'
CONVERTED_SUFFIX = ' (Converted to DFA)'


class _StateInterner:
    """
    Maps sets of NFA states to DFA state labels.

    Identity is the frozenset itself. The label is the canonical
    comma-joined name; if two different sets produce the same text (state
    names that contain the delimiter) the later one gets a '#n' suffix.
    """

    def __init__(self):
        self.labels: Dict[FrozenSet[str], str] = {}
        self.taken: Set[str] = set()

    def __contains__(self, state_set: FrozenSet[str]) -> bool:
        return state_set in self.labels

    def __getitem__(self, state_set: FrozenSet[str]) -> str:
        return self.labels[state_set]

    def add(self, state_set: FrozenSet[str]) -> str:
        base = state_set_label(state_set)
        label = base
        counter = 1
        while label in self.taken:
            label = f"{base}#{counter}"
            counter += 1

        self.labels[state_set] = label
        self.taken.add(label)
        return label


def nfa_to_dfa(nfa: Automaton) -> Automaton:
    """
    Converts a non-deterministic finite automaton (NFA) to a deterministic finite automaton (DFA)
    using subset construction algorithm.

    Only subsets reachable from the start closure are built, and only
    non-empty successors get a transition, so the result may be a partial
    DFA. An input that is already deterministic comes back unchanged apart
    from an ' (Already DFA)' name suffix.

    Args:
        nfa: A valid automaton

    Returns:
        Automaton: A new DFA whose states are labelled with the NFA states
        they stand for; state_composition maps each label to its members

    Raises:
        InvalidAutomatonError: If the input does not pass validation
    """
    errors = validate_automaton(nfa, require_name=False)
    if errors:
        raise InvalidAutomatonError(f"Invalid NFA structure: {', '.join(errors)}")

    if is_deterministic(nfa):
        return replace(nfa, name=f"{nfa.name}{ALREADY_DFA_SUFFIX}")

    table = nfa.transition_table()
    alphabet = [symbol for symbol in nfa.alphabet if not is_epsilon(symbol)]
    nfa_accepting = frozenset(nfa.accept_states)

    interner = _StateInterner()
    start_closure = epsilon_closure({nfa.start_state}, table)
    start_label = interner.add(start_closure)

    dfa_states: List[str] = [start_label]
    dfa_accepting: List[str] = []
    dfa_transitions: List[Transition] = []

    # Accepting-ness is settled when a subset is first discovered
    if start_closure & nfa_accepting:
        dfa_accepting.append(start_label)

    queue = deque([start_closure])

    while queue:
        current = queue.popleft()
        current_label = interner[current]

        for symbol in alphabet:
            moved_states = move(current, symbol, table)

            # Early pruning: no transition for an empty successor
            if not moved_states:
                continue

            new_state_set = epsilon_closure(moved_states, table)

            if new_state_set not in interner:
                new_label = interner.add(new_state_set)
                dfa_states.append(new_label)
                if new_state_set & nfa_accepting:
                    dfa_accepting.append(new_label)
                queue.append(new_state_set)

            dfa_transitions.append(Transition(current_label, symbol, interner[new_state_set]))

    return Automaton(
        id=f"{nfa.id}_dfa" if nfa.id else new_automaton_id(),
        name=f"{nfa.name}{CONVERTED_SUFFIX}",
        states=tuple(dfa_states),
        alphabet=tuple(alphabet),
        start_state=start_label,
        accept_states=tuple(dfa_accepting),
        transitions=tuple(dfa_transitions),
        state_composition={label: tuple(sorted(state_set)) for state_set, label in interner.labels.items()},
    )


def is_conversion_noop(result: Automaton) -> bool:
    """True when nfa_to_dfa returned its input because it was already deterministic."""
    return result.name.endswith(ALREADY_DFA_SUFFIX)
