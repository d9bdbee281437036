from django.urls import path
from . import views

urlpatterns = [
    # Stateless endpoints taking an FSA definition in the body
    path('api/validate/', views.validate_fsa, name='validate_fsa'),
    path('api/check-fsa-type/', views.check_fsa_type, name='check_fsa_type'),
    path('api/simulate-fsa/', views.simulate_fsa, name='simulate_fsa'),
    path('api/nfa-to-dfa/', views.convert_nfa_to_dfa, name='nfa_to_dfa'),

    # Stored automata
    path('api/automata/', views.automaton_list, name='automaton_list'),
    path('api/automata/<str:automaton_id>/', views.automaton_detail, name='automaton_detail'),
    path('api/automata/<str:automaton_id>/simulate/', views.simulate_stored, name='simulate_stored'),
    path('api/automata/<str:automaton_id>/convert/', views.convert_stored, name='convert_stored'),
]
