from typing import Dict, List, Mapping, Union

from .automaton import Automaton, is_epsilon

NAME_REQUIRED = 'Name is required'
STATES_REQUIRED = 'At least one state is required'
ALPHABET_REQUIRED = 'At least one symbol in alphabet is required'
EPSILON_IN_ALPHABET = 'Alphabet must not contain the epsilon symbol'
START_STATE_REQUIRED = 'Start state is required'
START_STATE_UNKNOWN = 'Start state must be in the list of states'
ACCEPT_STATES_UNKNOWN = 'All accept states must be in the list of states'
TRANSITIONS_INVALID = 'All transitions must use valid states and symbols'
NOT_A_LIST = '{field} must be a list of strings'


def validate_automaton(fsa: Union[Automaton, Mapping], require_name: bool = True) -> List[str]:
    """
    Collects every structural problem of a (possibly partial) automaton.

    The editing layer calls this while an automaton is still being built, so
    any field may be missing. Each check only runs when the fields it needs
    are present, and all applicable checks run: a definition with two
    independent problems yields two messages.

    Args:
        fsa: An Automaton, or a mapping in the JSON form with any of the keys
            name, states, alphabet, startState, acceptStates, transitions
        require_name: Whether a missing name counts as an error. Algorithms
            only need the structure, so they pass False

    Returns:
        List[str]: Human-readable error messages, empty when the automaton
        is valid
    """
    if isinstance(fsa, Automaton):
        fsa = fsa.to_dict()

    errors = []

    name = fsa.get('name')
    if require_name and (not isinstance(name, str) or not name.strip()):
        errors.append(NAME_REQUIRED)

    # A field of the wrong type is reported once and then treated as absent
    states = _string_list(fsa, 'states', errors)
    alphabet = _string_list(fsa, 'alphabet', errors)

    if not fsa.get('states'):
        errors.append(STATES_REQUIRED)

    if not fsa.get('alphabet'):
        errors.append(ALPHABET_REQUIRED)
    elif alphabet and any(is_epsilon(symbol) for symbol in alphabet):
        errors.append(EPSILON_IN_ALPHABET)

    start_state = fsa.get('startState')
    if not start_state:
        errors.append(START_STATE_REQUIRED)
    elif states is not None and start_state not in states:
        errors.append(START_STATE_UNKNOWN)

    accept_states = _string_list(fsa, 'acceptStates', errors) or []
    if states is not None and any(state not in states for state in accept_states):
        errors.append(ACCEPT_STATES_UNKNOWN)

    transitions = fsa.get('transitions') or []
    if not isinstance(transitions, list):
        errors.append(NOT_A_LIST.format(field='transitions'))
        transitions = []
    if any(not _is_valid_transition(t, states, alphabet) for t in transitions):
        errors.append(TRANSITIONS_INVALID)

    return errors


def _string_list(fsa: Mapping, key: str, errors: List[str]):
    value = fsa.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        errors.append(NOT_A_LIST.format(field=key))
        return None
    return value


def _is_valid_transition(transition: Dict, states, alphabet) -> bool:
    if not isinstance(transition, Mapping):
        return False

    symbol = transition.get('symbol')
    if symbol is None:
        symbol = ''

    # Endpoints are only checked against a declared state list, symbols against a declared alphabet
    if states is not None and (transition.get('from') not in states or transition.get('to') not in states):
        return False
    if alphabet is not None and not is_epsilon(symbol) and symbol not in alphabet:
        return False

    return True


def is_valid_automaton(fsa: Union[Automaton, Mapping]) -> bool:
    return not validate_automaton(fsa)
