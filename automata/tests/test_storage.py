from django.test import TestCase

from automata import storage
from automata.automaton import Automaton
from automata.fsa_transformations import nfa_to_dfa
from automata.models import StoredAutomaton
from automata.tests.fixtures import ends_with_ab_nfa, parity_dfa


class TestStorage(TestCase):
    """Test cases for the keyed automaton store"""

    def test_save_and_load(self):
        automaton = Automaton.from_dict(parity_dfa())

        storage.save_automaton(automaton)

        self.assertEqual(storage.get_automaton_by_id('fa_parity'), automaton)
        self.assertEqual(StoredAutomaton.objects.get().name, 'Odd ones')

    def test_save_replaces_same_id(self):
        automaton = Automaton.from_dict(parity_dfa())
        storage.save_automaton(automaton)

        storage.save_automaton(automaton.renamed('Renamed'))

        self.assertEqual(StoredAutomaton.objects.count(), 1)
        self.assertEqual(storage.get_automaton_by_id('fa_parity').name, 'Renamed')

    def test_list_keeps_insertion_order(self):
        storage.save_automaton(Automaton.from_dict(ends_with_ab_nfa()))
        storage.save_automaton(Automaton.from_dict(parity_dfa()))

        self.assertEqual([a.id for a in storage.get_stored_automata()], ['fa_ab', 'fa_parity'])

    def test_missing_automaton(self):
        self.assertIsNone(storage.get_automaton_by_id('fa_missing'))
        self.assertFalse(storage.delete_automaton('fa_missing'))

    def test_delete(self):
        storage.save_automaton(Automaton.from_dict(parity_dfa()))

        self.assertTrue(storage.delete_automaton('fa_parity'))
        self.assertEqual(storage.get_stored_automata(), [])

    def test_converted_automaton_keeps_composition(self):
        dfa = nfa_to_dfa(Automaton.from_dict(ends_with_ab_nfa()))

        storage.save_automaton(dfa)

        loaded = storage.get_automaton_by_id('fa_ab_dfa')
        self.assertEqual(loaded, dfa)
        self.assertEqual(loaded.state_composition['s0,s1'], ('s0', 's1'))

    def test_unreadable_rows_are_skipped(self):
        storage.save_automaton(Automaton.from_dict(parity_dfa()))
        StoredAutomaton.objects.create(automaton_id='fa_broken', name='broken', definition={'states': 'oops'})

        with self.assertLogs('automata.storage', level='WARNING'):
            automata = storage.get_stored_automata()

        self.assertEqual([a.id for a in automata], ['fa_parity'])
        with self.assertLogs('automata.storage', level='WARNING'):
            self.assertIsNone(storage.get_automaton_by_id('fa_broken'))
