from dataclasses import dataclass
from typing import AbstractSet, Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Union

from .automaton import EPSILON, Automaton
from .fsa_properties import is_deterministic

TransitionTable = Dict[str, Dict[str, Set[str]]]
InputSymbols = Union[str, Sequence[str]]

STATE_LABEL_DELIMITER = ','


class RejectionReason:
    SYMBOL_NOT_IN_ALPHABET = 'symbol_not_in_alphabet'
    NO_TRANSITION = 'no_transition'
    NO_LIVE_STATES = 'no_live_states'
    NOT_ACCEPTING = 'not_accepting'


@dataclass
class SimulationResult:
    """
    Outcome of running an input against an automaton.

    path holds one entry per step: a state name for a DFA run, a canonical
    state-set label for an NFA run. final_states is only set for NFA runs.
    A rejection always carries the reason and the input position where the
    run stopped; the reason is informational, every kind is a plain
    rejection to the caller.
    """
    accepted: bool
    path: List[str]
    final_states: Optional[List[str]] = None
    rejection_reason: Optional[str] = None
    rejection_position: Optional[int] = None

    def to_dict(self) -> Dict:
        data = {'accepted': self.accepted, 'path': list(self.path)}
        if self.final_states is not None:
            data['finalStates'] = list(self.final_states)
        if not self.accepted:
            data['rejectionReason'] = self.rejection_reason
            data['rejectionPosition'] = self.rejection_position
        return data


def state_set_label(states: Iterable[str]) -> str:
    """Canonical label for a set of states: sorted, deduplicated, comma-joined."""
    return STATE_LABEL_DELIMITER.join(sorted(set(states)))


def epsilon_closure(states: AbstractSet[str], table: TransitionTable) -> FrozenSet[str]:
    """
    Smallest superset of states closed under epsilon transitions.

    Args:
        states: The states to start from
        table: Transition table from Automaton.transition_table()

    Returns:
        FrozenSet[str]: The closure
    """
    closure = set(states)
    stack = list(states)

    while stack:
        state = stack.pop()
        for target in table.get(state, {}).get(EPSILON, ()):
            if target not in closure:
                closure.add(target)
                stack.append(target)

    return frozenset(closure)


def move(states: AbstractSet[str], symbol: str, table: TransitionTable) -> FrozenSet[str]:
    """Compute all states reachable from given states on given symbol"""
    result = set()
    for state in states:
        result.update(table.get(state, {}).get(symbol, ()))
    return frozenset(result)


def simulate_deterministic_fsa(fsa: Automaton, input_symbols: InputSymbols) -> SimulationResult:
    """
    Simulates a deterministic FSA with the given input.

    Args:
        fsa: A deterministic automaton
        input_symbols: A string (one symbol per character) or a sequence of symbols

    Returns:
        SimulationResult: path lists every state visited, starting with the
        start state. The run halts on the first symbol outside the alphabet
        or without a transition, keeping the path built so far.
    """
    table = fsa.transition_table()
    alphabet = set(fsa.alphabet)

    current_state = fsa.start_state
    path = [current_state]

    for position, symbol in enumerate(input_symbols):
        if symbol not in alphabet:
            return SimulationResult(False, path,
                                    rejection_reason=RejectionReason.SYMBOL_NOT_IN_ALPHABET,
                                    rejection_position=position)

        next_states = table.get(current_state, {}).get(symbol)
        if not next_states:
            return SimulationResult(False, path,
                                    rejection_reason=RejectionReason.NO_TRANSITION,
                                    rejection_position=position)

        # Deterministic: exactly one destination
        current_state = next(iter(next_states))
        path.append(current_state)

    if current_state in fsa.accept_states:
        return SimulationResult(True, path)

    return SimulationResult(False, path,
                            rejection_reason=RejectionReason.NOT_ACCEPTING,
                            rejection_position=len(input_symbols))


def simulate_nondeterministic_fsa(fsa: Automaton, input_symbols: InputSymbols) -> SimulationResult:
    """
    Simulates a non-deterministic FSA by tracking the set of live states.

    Args:
        fsa: Any automaton; epsilon transitions are followed
        input_symbols: A string (one symbol per character) or a sequence of symbols

    Returns:
        SimulationResult: path holds the label of the live state set after
        each step, starting with the epsilon-closure of the start state.
        final_states is the live set where the run ended, which is empty
        when every branch died.
    """
    table = fsa.transition_table()
    alphabet = set(fsa.alphabet)
    accepting = set(fsa.accept_states)

    current_states = epsilon_closure({fsa.start_state}, table)
    path = [state_set_label(current_states)]

    for position, symbol in enumerate(input_symbols):
        if symbol not in alphabet:
            return SimulationResult(False, path, sorted(current_states),
                                    rejection_reason=RejectionReason.SYMBOL_NOT_IN_ALPHABET,
                                    rejection_position=position)

        current_states = epsilon_closure(move(current_states, symbol, table), table)

        # Stop as soon as no branch survives; the remaining input is not read
        if not current_states:
            return SimulationResult(False, path, [],
                                    rejection_reason=RejectionReason.NO_LIVE_STATES,
                                    rejection_position=position)

        path.append(state_set_label(current_states))

    if current_states & accepting:
        return SimulationResult(True, path, sorted(current_states))

    return SimulationResult(False, path, sorted(current_states),
                            rejection_reason=RejectionReason.NOT_ACCEPTING,
                            rejection_position=len(input_symbols))


def simulate_automaton(fsa: Automaton, input_symbols: InputSymbols) -> SimulationResult:
    """
    Runs the input with the DFA or NFA algorithm.

    The automaton is classified again on every call so the choice never
    depends on a stored type.
    """
    if is_deterministic(fsa):
        return simulate_deterministic_fsa(fsa, input_symbols)
    return simulate_nondeterministic_fsa(fsa, input_symbols)
