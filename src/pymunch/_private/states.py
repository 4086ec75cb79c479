from typing import Iterable, Optional, Sequence, Tuple

from pymunch.transition import Transition


class State:
    __slots__ = 'transitions', 'accepting'

    def __init__(self, accepting: bool = False, transitions: Optional[Sequence[Transition]] = None):
        # Ordered: the first transition whose range contains a symbol wins
        self.transitions = [] if transitions is None else transitions
        self.accepting = accepting

    def add_transition(self, first, last, target: int) -> Transition:
        """Append a transition from self to state index 'target' on first..last."""
        newtrans = Transition(first, last, target)
        self.transitions.append(newtrans)
        return newtrans

    def transition(self, symbol) -> Optional[int]:
        """Index of the state reached on 'symbol', or None if no range contains it.
           The sentinel None never matches."""
        if symbol is None:
            return None
        for t in self.transitions:
            if symbol in t:
                return t.targetstate
        return None

    def all_targets(self) -> set:
        """Returns the set of state indices a state has transitions to."""
        return {t.targetstate for t in self.transitions}

    def frozen(self) -> 'FrozenState':
        """A copy that can no longer be changed."""
        return FrozenState(self.accepting, tuple(Transition(t.first, t.last, t.targetstate)
                                                 for t in self.transitions))


class FrozenState(State):
    """A State of a built automaton: the transition table is a tuple and the
       accepting flag is read-only."""
    __slots__ = '_accepting',

    def __init__(self, accepting: bool, transitions: Tuple[Transition, ...]):
        self.transitions = transitions
        self._accepting = accepting

    @property
    def accepting(self) -> bool:
        return self._accepting


def all_transitions(states: Iterable[State]):
    """Enumerate all transitions (source index, Transition) for a sequence of states."""
    for idx, state in enumerate(states):
        for t in state.transitions:
            yield idx, t
