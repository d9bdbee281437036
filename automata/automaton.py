import time
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, NamedTuple, Set, Tuple

EPSILON = 'ε'
EPSILON_SYMBOLS = (EPSILON, '')


class InvalidAutomatonError(ValueError):
    """Raised when a payload cannot be turned into an Automaton at all."""


def is_epsilon(symbol: str) -> bool:
    return symbol in EPSILON_SYMBOLS


def new_automaton_id() -> str:
    # Millisecond stamp plus a random suffix so ids made in the same millisecond differ
    return f"fa_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _unique(items: Iterable) -> Tuple:
    # Keeps first occurrence order
    return tuple(dict.fromkeys(items))


class Transition(NamedTuple):
    source: str
    symbol: str
    target: str

    @property
    def is_epsilon(self) -> bool:
        return is_epsilon(self.symbol)

    def to_dict(self) -> Dict[str, str]:
        return {'from': self.source, 'symbol': self.symbol, 'to': self.target}

    @classmethod
    def from_dict(cls, data: Mapping) -> 'Transition':
        if not isinstance(data, Mapping):
            raise InvalidAutomatonError('Each transition must be an object')

        source = data.get('from')
        target = data.get('to')
        symbol = data.get('symbol', '')
        if symbol is None:
            symbol = ''

        if not isinstance(source, str) or not isinstance(target, str) or not isinstance(symbol, str):
            raise InvalidAutomatonError("Transitions need string 'from', 'symbol' and 'to' fields")

        return cls(source, symbol, target)


@dataclass(frozen=True)
class Automaton:
    """
    A finite automaton value.

    States, alphabet and accept states keep the order they were declared in
    (the rendering layer relies on it) but hold no duplicates. Transitions
    form a relation: identical triples are collapsed, and the two epsilon
    markers are normalised to EPSILON before comparing.

    Instances are never mutated. The editing helpers (with_state,
    without_transition, ...) return new automata.
    """
    name: str
    states: Tuple[str, ...]
    alphabet: Tuple[str, ...]
    start_state: str
    accept_states: Tuple[str, ...] = ()
    transitions: Tuple[Transition, ...] = ()
    id: str = field(default_factory=new_automaton_id)
    created_at: str = field(default_factory=_now_iso)
    state_composition: Mapping[str, Tuple[str, ...]] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        normalised = []
        for transition in self.transitions:
            transition = Transition(*transition)
            if transition.is_epsilon:
                transition = transition._replace(symbol=EPSILON)
            normalised.append(transition)

        object.__setattr__(self, 'states', _unique(self.states))
        object.__setattr__(self, 'alphabet', _unique(self.alphabet))
        object.__setattr__(self, 'accept_states', _unique(self.accept_states))
        object.__setattr__(self, 'transitions', _unique(normalised))
        object.__setattr__(self, 'state_composition', MappingProxyType(
            {label: tuple(members) for label, members in dict(self.state_composition).items()}))

    # --- wire format -------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping) -> 'Automaton':
        """
        Builds an Automaton from its JSON form.

        Args:
            data: A mapping with the keys used by the editing layer:
                - id, name, createdAt: optional metadata
                - states, alphabet, acceptStates: lists of strings
                - startState: string
                - transitions: list of {'from', 'symbol', 'to'} objects

        Returns:
            Automaton: the parsed automaton. Structural problems (unknown
            start state, dangling transitions, ...) are kept as-is for the
            validator to report.

        Raises:
            InvalidAutomatonError: If a field has the wrong JSON type
        """
        if not isinstance(data, Mapping):
            raise InvalidAutomatonError('Automaton must be an object')

        def string_list(key: str) -> List[str]:
            value = data.get(key) or []
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                raise InvalidAutomatonError(f'{key} must be a list of strings')
            return value

        transitions = data.get('transitions') or []
        if not isinstance(transitions, list):
            raise InvalidAutomatonError('transitions must be a list')

        start_state = data.get('startState') or ''
        name = data.get('name') or ''
        if not isinstance(start_state, str) or not isinstance(name, str):
            raise InvalidAutomatonError('name and startState must be strings')

        composition = data.get('stateComposition') or {}
        if not isinstance(composition, Mapping):
            raise InvalidAutomatonError('stateComposition must be an object')

        metadata = {}
        if data.get('id'):
            metadata['id'] = str(data['id'])
        if data.get('createdAt'):
            metadata['created_at'] = str(data['createdAt'])

        return cls(
            name=name,
            states=tuple(string_list('states')),
            alphabet=tuple(string_list('alphabet')),
            start_state=start_state,
            accept_states=tuple(string_list('acceptStates')),
            transitions=tuple(Transition.from_dict(t) for t in transitions),
            state_composition=composition,
            **metadata
        )

    def to_dict(self) -> Dict:
        data = {
            'id': self.id,
            'name': self.name,
            'states': list(self.states),
            'alphabet': list(self.alphabet),
            'startState': self.start_state,
            'acceptStates': list(self.accept_states),
            'transitions': [t.to_dict() for t in self.transitions],
            'createdAt': self.created_at,
        }
        if self.state_composition:
            data['stateComposition'] = {label: list(members) for label, members in self.state_composition.items()}
        return data

    # --- lookups -----------------------------------------------------------

    def transition_table(self) -> Dict[str, Dict[str, Set[str]]]:
        """Returns the relation as state -> symbol -> set of destinations."""
        table: Dict[str, Dict[str, Set[str]]] = {}
        for source, symbol, target in self.transitions:
            table.setdefault(source, {}).setdefault(symbol, set()).add(target)
        return table

    def epsilon_transitions(self) -> List[Transition]:
        return [t for t in self.transitions if t.is_epsilon]

    def has_epsilon_transitions(self) -> bool:
        return any(t.is_epsilon for t in self.transitions)

    # --- editing -----------------------------------------------------------

    def renamed(self, name: str) -> 'Automaton':
        return replace(self, name=name)

    def with_state(self, state: str) -> 'Automaton':
        state = state.strip()
        if not state or state in self.states:
            return self
        return replace(self, states=self.states + (state,))

    def without_state(self, state: str) -> 'Automaton':
        """Removes a state together with everything that refers to it."""
        return replace(
            self,
            states=tuple(s for s in self.states if s != state),
            start_state='' if self.start_state == state else self.start_state,
            accept_states=tuple(s for s in self.accept_states if s != state),
            transitions=tuple(t for t in self.transitions if state not in (t.source, t.target)),
        )

    def with_symbol(self, symbol: str) -> 'Automaton':
        symbol = symbol.strip()
        if not symbol or symbol in self.alphabet:
            return self
        return replace(self, alphabet=self.alphabet + (symbol,))

    def without_symbol(self, symbol: str) -> 'Automaton':
        return replace(
            self,
            alphabet=tuple(s for s in self.alphabet if s != symbol),
            transitions=tuple(t for t in self.transitions if t.symbol != symbol),
        )

    def with_start_state(self, state: str) -> 'Automaton':
        return replace(self, start_state=state)

    def toggle_accept_state(self, state: str) -> 'Automaton':
        if state in self.accept_states:
            return replace(self, accept_states=tuple(s for s in self.accept_states if s != state))
        return replace(self, accept_states=self.accept_states + (state,))

    def with_transition(self, source: str, symbol: str, target: str) -> 'Automaton':
        # Duplicates collapse in __post_init__, so re-adding is a no-op
        return replace(self, transitions=self.transitions + (Transition(source, symbol, target),))

    def without_transition(self, index: int) -> 'Automaton':
        if not 0 <= index < len(self.transitions):
            raise IndexError(f'No transition at index {index}')
        return replace(self, transitions=self.transitions[:index] + self.transitions[index + 1:])

