"""Automata shared by the test modules, in their JSON form."""


def parity_dfa():
    # Accepts binary strings with an odd number of 1s
    return {
        'id': 'fa_parity',
        'name': 'Odd ones',
        'states': ['q0', 'q1'],
        'alphabet': ['0', '1'],
        'startState': 'q0',
        'acceptStates': ['q1'],
        'transitions': [
            {'from': 'q0', 'symbol': '0', 'to': 'q0'},
            {'from': 'q0', 'symbol': '1', 'to': 'q1'},
            {'from': 'q1', 'symbol': '0', 'to': 'q1'},
            {'from': 'q1', 'symbol': '1', 'to': 'q0'},
        ],
    }


def ends_with_ab_nfa():
    # Non-deterministic on (s0, a)
    return {
        'id': 'fa_ab',
        'name': 'Contains ab',
        'states': ['s0', 's1', 's2'],
        'alphabet': ['a', 'b'],
        'startState': 's0',
        'acceptStates': ['s2'],
        'transitions': [
            {'from': 's0', 'symbol': 'a', 'to': 's0'},
            {'from': 's0', 'symbol': 'a', 'to': 's1'},
            {'from': 's1', 'symbol': 'b', 'to': 's2'},
        ],
    }


def epsilon_nfa():
    return {
        'id': 'fa_eps',
        'name': 'Epsilon start',
        'states': ['s0', 's1'],
        'alphabet': ['a'],
        'startState': 's0',
        'acceptStates': ['s1'],
        'transitions': [
            {'from': 's0', 'symbol': 'ε', 'to': 's1'},
            {'from': 's1', 'symbol': 'a', 'to': 's1'},
        ],
    }


def a_star_b_nfa():
    # a*b built from epsilon moves, with an epsilon cycle back to the start
    return {
        'id': 'fa_astar_b',
        'name': 'a*b',
        'states': ['S0', 'S1', 'S2', 'S3'],
        'alphabet': ['a', 'b'],
        'startState': 'S0',
        'acceptStates': ['S3'],
        'transitions': [
            {'from': 'S0', 'symbol': '', 'to': 'S1'},
            {'from': 'S0', 'symbol': 'a', 'to': 'S0'},
            {'from': 'S1', 'symbol': 'ε', 'to': 'S2'},
            {'from': 'S2', 'symbol': 'ε', 'to': 'S0'},
            {'from': 'S2', 'symbol': 'b', 'to': 'S3'},
        ],
    }
