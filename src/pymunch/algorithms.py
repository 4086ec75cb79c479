#!/usr/bin/env python

"""Defines common graph queries over automata.

All functions take anything with a 'states' sequence, i.e. an Automaton or
an AutomatonBuilder, and never touch the runtime position of an automaton."""
from collections import deque
from typing import TYPE_CHECKING, List, Set, Tuple, Union

from pymunch.transition import Transition
from pymunch._private.states import all_transitions

if TYPE_CHECKING:
    from .automaton import Automaton, AutomatonBuilder

FSM = Union['Automaton', 'AutomatonBuilder']


def accessible_states(fsm: FSM) -> Set[int]:
    """Indices of the states that are on a path from the start state."""
    explored = {0}
    stack = deque([0])
    while stack:
        source = stack.pop()
        for target in fsm.states[source].all_targets():
            if target not in explored:
                explored.add(target)
                stack.append(target)
    return explored


def coaccessible_states(fsm: FSM) -> Set[int]:
    """Indices of the states from which some accepting state can be reached.

       A live automaton sitting in a state outside this set can never accept
       again, but it still counts as alive for the lexer."""
    index = {idx: set() for idx in range(len(fsm.states))}
    for source, t in all_transitions(fsm.states):
        index[t.targetstate].add(source)
    explored = {idx for idx, s in enumerate(fsm.states) if s.accepting}
    stack = deque(explored)
    while stack:
        target = stack.pop()
        for source in index[target]:
            if source not in explored:
                explored.add(source)
                stack.append(source)
    return explored


def shadowed_transitions(fsm: FSM) -> List[Tuple[int, Transition]]:
    """Transitions that can never be taken because a single earlier range in
       the same state already contains their whole range (first range wins).
       Returns (source state index, transition) pairs in table order."""
    shadowed = []
    for source, state in enumerate(fsm.states):
        for pos, t in enumerate(state.transitions):
            if any(e.first <= t.first and t.last <= e.last for e in state.transitions[:pos]):
                shadowed.append((source, t))
    return shadowed
