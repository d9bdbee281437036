from dataclasses import replace

from django.test import TestCase

from automata.automaton import (
    EPSILON,
    Automaton,
    InvalidAutomatonError,
    Transition,
    is_epsilon,
    new_automaton_id
)
from automata.tests.fixtures import ends_with_ab_nfa, parity_dfa


class TestAutomatonModel(TestCase):
    """Test cases for the Automaton value and its JSON form"""

    def test_from_dict_round_trip(self):
        data = parity_dfa()
        data['createdAt'] = '2024-01-01T00:00:00+00:00'

        automaton = Automaton.from_dict(data)

        self.assertEqual(automaton.id, 'fa_parity')
        self.assertEqual(automaton.start_state, 'q0')
        self.assertEqual(automaton.accept_states, ('q1',))
        self.assertEqual(automaton.transitions[1], Transition('q0', '1', 'q1'))
        self.assertEqual(automaton.to_dict(), data)

    def test_missing_metadata_is_generated(self):
        data = parity_dfa()
        del data['id']

        automaton = Automaton.from_dict(data)

        self.assertTrue(automaton.id.startswith('fa_'))
        self.assertTrue(automaton.created_at)

    def test_epsilon_markers_are_interchangeable(self):
        self.assertTrue(is_epsilon(''))
        self.assertTrue(is_epsilon('ε'))
        self.assertFalse(is_epsilon('a'))

        automaton = Automaton(
            name='eps',
            states=('s0', 's1'),
            alphabet=('a',),
            start_state='s0',
            transitions=(('s0', '', 's1'), ('s0', 'ε', 's1')),
        )

        # Both spellings collapse into a single normalised transition
        self.assertEqual(automaton.transitions, (Transition('s0', EPSILON, 's1'),))
        self.assertTrue(automaton.has_epsilon_transitions())
        self.assertEqual(automaton.epsilon_transitions(), [Transition('s0', EPSILON, 's1')])

    def test_duplicates_are_removed(self):
        data = ends_with_ab_nfa()
        data['states'].append('s0')
        data['transitions'].append({'from': 's1', 'symbol': 'b', 'to': 's2'})

        automaton = Automaton.from_dict(data)

        self.assertEqual(automaton.states, ('s0', 's1', 's2'))
        self.assertEqual(len(automaton.transitions), 3)

    def test_transition_table(self):
        table = Automaton.from_dict(ends_with_ab_nfa()).transition_table()

        self.assertEqual(table['s0']['a'], {'s0', 's1'})
        self.assertEqual(table['s1']['b'], {'s2'})
        self.assertNotIn('s2', table)

    def test_from_dict_rejects_wrong_types(self):
        with self.assertRaises(InvalidAutomatonError):
            Automaton.from_dict(['not', 'an', 'object'])

        data = parity_dfa()
        data['states'] = 'q0,q1'
        with self.assertRaises(InvalidAutomatonError):
            Automaton.from_dict(data)

        data = parity_dfa()
        data['transitions'] = [{'from': 'q0', 'symbol': '0'}]
        with self.assertRaises(InvalidAutomatonError):
            Automaton.from_dict(data)

    def test_invalid_automaton_error_is_a_value_error(self):
        self.assertTrue(issubclass(InvalidAutomatonError, ValueError))


class TestAutomatonEditing(TestCase):
    """Test cases for the editing helpers, which always return new automata"""

    def setUp(self):
        self.automaton = Automaton.from_dict(ends_with_ab_nfa())

    def test_with_state(self):
        edited = self.automaton.with_state('  s3 ')

        self.assertEqual(edited.states, ('s0', 's1', 's2', 's3'))
        self.assertEqual(self.automaton.states, ('s0', 's1', 's2'))

        # Blank and existing names are ignored
        self.assertIs(edited.with_state('   '), edited)
        self.assertIs(edited.with_state('s1'), edited)

    def test_without_state_cascades(self):
        edited = self.automaton.without_state('s0')

        self.assertEqual(edited.states, ('s1', 's2'))
        self.assertEqual(edited.start_state, '')
        self.assertEqual(edited.transitions, (Transition('s1', 'b', 's2'),))

        edited = self.automaton.without_state('s2')
        self.assertEqual(edited.accept_states, ())
        self.assertEqual(edited.start_state, 's0')

    def test_symbols(self):
        edited = self.automaton.with_symbol('c')
        self.assertEqual(edited.alphabet, ('a', 'b', 'c'))
        self.assertIs(edited.with_symbol('c'), edited)

        edited = self.automaton.without_symbol('a')
        self.assertEqual(edited.alphabet, ('b',))
        self.assertEqual(edited.transitions, (Transition('s1', 'b', 's2'),))

    def test_accept_and_start_states(self):
        edited = self.automaton.toggle_accept_state('s1')
        self.assertEqual(edited.accept_states, ('s2', 's1'))

        edited = edited.toggle_accept_state('s2')
        self.assertEqual(edited.accept_states, ('s1',))

        self.assertEqual(self.automaton.with_start_state('s1').start_state, 's1')

    def test_transitions(self):
        edited = self.automaton.with_transition('s2', 'a', 's0')
        self.assertEqual(edited.transitions[-1], Transition('s2', 'a', 's0'))

        # Adding an identical triple changes nothing
        self.assertEqual(edited.with_transition('s2', 'a', 's0').transitions, edited.transitions)

        edited = edited.without_transition(0)
        self.assertEqual(edited.transitions[0], Transition('s0', 'a', 's1'))

        with self.assertRaises(IndexError):
            edited.without_transition(10)

    def test_renamed_keeps_identity(self):
        edited = self.automaton.renamed('Other')

        self.assertEqual(edited.name, 'Other')
        self.assertEqual(edited.id, self.automaton.id)
        self.assertEqual(edited.created_at, self.automaton.created_at)


class TestAutomatonValue(TestCase):
    """Automata behave as immutable, hashable values"""

    def test_hashable(self):
        first = Automaton.from_dict(parity_dfa())
        second = Automaton.from_dict(parity_dfa())
        second = replace(second, created_at=first.created_at)

        self.assertEqual(hash(first), hash(second))
        self.assertEqual(len({first, second}), 1)

    def test_state_composition_is_read_only(self):
        automaton = Automaton(
            name='composite',
            states=('s0,s1',),
            alphabet=('a',),
            start_state='s0,s1',
            state_composition={'s0,s1': ['s0', 's1']},
        )

        self.assertEqual(automaton.state_composition['s0,s1'], ('s0', 's1'))
        self.assertIsInstance(hash(automaton), int)
        with self.assertRaises(TypeError):
            automaton.state_composition['s2'] = ('s2',)

    def test_generated_ids_are_unique(self):
        ids = {new_automaton_id() for _ in range(200)}

        self.assertEqual(len(ids), 200)
        self.assertTrue(all(i.startswith('fa_') for i in ids))
