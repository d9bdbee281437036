import json
import logging

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods, require_POST

from . import storage
from .automaton import Automaton, InvalidAutomatonError
from .fsa_properties import AutomatonType, describe_type, get_automaton_type
from .fsa_simulation import simulate_automaton
from .fsa_transformations import is_conversion_noop, nfa_to_dfa
from .fsa_validation import validate_automaton

logger = logging.getLogger(__name__)

DEFAULT_MAX_INPUT_LENGTH = 10000


class InvalidDefinition(Exception):
    """An automaton payload that parsed but failed structural validation."""

    def __init__(self, errors):
        super().__init__(', '.join(errors))
        self.errors = errors


def _parse_body(request) -> dict:
    data = json.loads(request.body or b'{}')
    if not isinstance(data, dict):
        raise ValueError('Request body must be a JSON object')
    return data


def _validated_automaton(fsa) -> Automaton:
    """Parses an FSA payload and runs the validator over it."""
    if not isinstance(fsa, dict):
        raise InvalidAutomatonError('Automaton must be an object')

    automaton = Automaton.from_dict(fsa)

    errors = validate_automaton(fsa)
    if errors:
        raise InvalidDefinition(errors)

    return automaton


def _input_symbols(data: dict):
    input_symbols = data.get('input', '')
    if input_symbols is None:
        input_symbols = ''

    if not isinstance(input_symbols, (str, list)) or \
            (isinstance(input_symbols, list) and not all(isinstance(s, str) for s in input_symbols)):
        raise ValueError('input must be a string or a list of symbols')

    max_length = getattr(settings, 'FSA_MAX_INPUT_LENGTH', DEFAULT_MAX_INPUT_LENGTH)
    if len(input_symbols) > max_length:
        raise ValueError(f'input is longer than {max_length} symbols')

    return input_symbols


def _with_type(automaton: Automaton) -> dict:
    data = automaton.to_dict()
    data['type'] = get_automaton_type(automaton).value
    return data


def _simulation_response(automaton: Automaton, input_symbols) -> JsonResponse:
    automaton_type = get_automaton_type(automaton)
    result = simulate_automaton(automaton, input_symbols)

    response = result.to_dict()
    response['type'] = automaton_type.value
    return JsonResponse(response)


def _invalid_definition_response(error: InvalidDefinition) -> JsonResponse:
    return JsonResponse({'error': 'Invalid automaton', 'errors': error.errors}, status=400)


def _bad_request(error: Exception) -> JsonResponse:
    logger.warning('Rejected request: %s', error)
    return JsonResponse({'error': str(error)}, status=400)


def _server_error(error: Exception) -> JsonResponse:
    logger.exception('Unexpected error while handling automaton request')
    return JsonResponse({'error': f'Server error: {str(error)}'}, status=500)


def _not_found(automaton_id: str) -> JsonResponse:
    return JsonResponse({'error': f'Automaton {automaton_id} not found'}, status=404)


@csrf_exempt
@require_POST
def validate_fsa(request):
    """
    Django view reporting every structural problem of an FSA definition.

    Expects a POST request with a JSON body containing:
    - fsa: The (possibly incomplete) FSA definition

    Returns {'valid': bool, 'errors': [...]}.
    """
    try:
        data = _parse_body(request)
        fsa = data.get('fsa')

        if not isinstance(fsa, dict):
            return JsonResponse({'error': 'Missing FSA definition'}, status=400)

        errors = validate_automaton(fsa)
        return JsonResponse({'valid': not errors, 'errors': errors})

    except ValueError as e:
        return _bad_request(e)
    except Exception as e:
        return _server_error(e)


@csrf_exempt
@require_POST
def check_fsa_type(request):
    """
    Django view to check if an FSA is deterministic or non-deterministic.
    """
    try:
        data = _parse_body(request)
        if not data.get('fsa'):
            return JsonResponse({'error': 'Missing FSA definition'}, status=400)

        automaton = _validated_automaton(data['fsa'])
        automaton_type = get_automaton_type(automaton)

        return JsonResponse({
            'is_nondeterministic': automaton_type is AutomatonType.NFA,
            'type': automaton_type.value,
            'description': describe_type(automaton_type)
        })

    except InvalidDefinition as e:
        return _invalid_definition_response(e)
    except ValueError as e:
        return _bad_request(e)
    except Exception as e:
        return _server_error(e)


@csrf_exempt
@require_POST
def simulate_fsa(request):
    """
    Django view to handle FSA simulation requests.
    Automatically detects if FSA is deterministic or non-deterministic.

    Expects a POST request with a JSON body containing:
    - fsa: The FSA definition
    - input: The input string, or a list of symbols

    Returns a JSON response with simulation results.
    """
    try:
        data = _parse_body(request)
        if not data.get('fsa'):
            return JsonResponse({'error': 'Missing FSA definition'}, status=400)

        automaton = _validated_automaton(data['fsa'])
        return _simulation_response(automaton, _input_symbols(data))

    except InvalidDefinition as e:
        return _invalid_definition_response(e)
    except ValueError as e:
        return _bad_request(e)
    except Exception as e:
        return _server_error(e)


@csrf_exempt
@require_POST
def convert_nfa_to_dfa(request):
    """
    Django view converting an NFA to an equivalent DFA.

    Returns {'dfa': ..., 'converted': bool}; converted is False when the
    input was already deterministic and came back unchanged.
    """
    try:
        data = _parse_body(request)
        if not data.get('fsa'):
            return JsonResponse({'error': 'Missing FSA definition'}, status=400)

        automaton = _validated_automaton(data['fsa'])
        dfa = nfa_to_dfa(automaton)

        return JsonResponse({'dfa': _with_type(dfa), 'converted': not is_conversion_noop(dfa)})

    except InvalidDefinition as e:
        return _invalid_definition_response(e)
    except ValueError as e:
        return _bad_request(e)
    except Exception as e:
        return _server_error(e)


@csrf_exempt
@require_http_methods(['GET', 'POST'])
def automaton_list(request):
    """
    GET lists every stored automaton.
    POST validates {'fsa': ...} and saves it, replacing any automaton with the same id.
    """
    try:
        if request.method == 'GET':
            return JsonResponse({'automata': [_with_type(a) for a in storage.get_stored_automata()]})

        data = _parse_body(request)
        if not data.get('fsa'):
            return JsonResponse({'error': 'Missing FSA definition'}, status=400)

        automaton = _validated_automaton(data['fsa'])
        storage.save_automaton(automaton)

        return JsonResponse({'automaton': _with_type(automaton)}, status=201)

    except InvalidDefinition as e:
        logger.info('Refused to save invalid automaton: %s', e)
        return _invalid_definition_response(e)
    except ValueError as e:
        return _bad_request(e)
    except Exception as e:
        return _server_error(e)


@csrf_exempt
@require_http_methods(['GET', 'DELETE'])
def automaton_detail(request, automaton_id):
    try:
        if request.method == 'DELETE':
            if not storage.delete_automaton(automaton_id):
                return _not_found(automaton_id)
            return JsonResponse({'status': 'success'})

        automaton = storage.get_automaton_by_id(automaton_id)
        if automaton is None:
            return _not_found(automaton_id)
        return JsonResponse({'automaton': _with_type(automaton)})

    except Exception as e:
        return _server_error(e)


@csrf_exempt
@require_POST
def simulate_stored(request, automaton_id):
    """Simulates {'input': ...} against a stored automaton."""
    try:
        automaton = storage.get_automaton_by_id(automaton_id)
        if automaton is None:
            return _not_found(automaton_id)

        data = _parse_body(request)
        return _simulation_response(automaton, _input_symbols(data))

    except ValueError as e:
        return _bad_request(e)
    except Exception as e:
        return _server_error(e)


@csrf_exempt
@require_POST
def convert_stored(request, automaton_id):
    """
    Converts a stored automaton to a DFA.

    With {'save': true} in the body a real conversion is stored as a new
    automaton; a no-op conversion is never stored.
    """
    try:
        automaton = storage.get_automaton_by_id(automaton_id)
        if automaton is None:
            return _not_found(automaton_id)

        data = _parse_body(request)
        dfa = nfa_to_dfa(automaton)
        converted = not is_conversion_noop(dfa)

        if converted:
            logger.info('Converted automaton %s to a DFA with %d states', automaton_id, len(dfa.states))
            if data.get('save'):
                storage.save_automaton(dfa)

        return JsonResponse({
            'dfa': _with_type(dfa),
            'converted': converted,
            'saved': bool(converted and data.get('save'))
        })

    except ValueError as e:
        return _bad_request(e)
    except Exception as e:
        return _server_error(e)
