import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, cast

from pymunch import algorithms
from pymunch._private import util
from pymunch._private.exceptions import StateIndexError
from pymunch._private.states import State, all_transitions

logger = logging.getLogger(__file__)

START = 0
"""Index of the start state of every automaton"""


class Automaton:
    # ==================
    # Initializers
    # ==================

    def __init__(self, states: Sequence[State]):
        """Creates a runtime automaton positioned at the start state.

        :param states: the state table; index 0 is the start state

        Automata are normally obtained from :code:`AutomatonBuilder.build`,
        :code:`keyword`, :code:`keywords` or :code:`character_ranges` rather
        than constructed directly. The state table is never modified once
        the automaton exists; only the runtime position changes.
        """
        self.states = tuple(states)
        """The (immutable) state table"""
        self.current: Optional[int] = START
        """Index of the current state, None once the automaton has died"""
        self.previous_accepting = False
        """Whether the state held before the last transition was accepting"""

    @classmethod
    def fromdict(cls, fsmdict: Dict) -> 'Automaton':
        """Recreate an automaton from dictionary form (see :code:`todict`).
           Out-of-range targets raise StateIndexError."""
        entries = fsmdict["states"]
        if len(entries) == 0:
            raise ValueError("An automaton needs at least a start state")
        if entries[START]["accepting"]:
            raise ValueError("The start state cannot be accepting")
        builder = AutomatonBuilder()
        for entry in entries[1:]:
            builder.add_state(bool(entry["accepting"]))
        for source, entry in enumerate(entries):
            for first, last, target in entry["transitions"]:
                builder.add_transition(source, target, first, last)
        return builder.build()

    # ==================
    # Runtime
    # ==================

    def transition(self, symbol) -> None:
        """Feed one symbol to the automaton. None is the end-of-input sentinel,
           which kills every automaton. The accepting status of the state held
           before the move is kept for is_previous_accepting()."""
        self.previous_accepting = self.current is not None and self.states[self.current].accepting
        if self.current is not None:
            self.current = self.states[self.current].transition(symbol)

    def is_alive(self) -> bool:
        return self.current is not None

    def is_previous_accepting(self) -> bool:
        return self.previous_accepting

    def is_accepting(self) -> bool:
        """Is the automaton currently in an accepting state?"""
        return self.current is not None and self.states[self.current].accepting

    def reset(self) -> None:
        """Rewind to the start state, forgetting all history."""
        self.current = START
        self.previous_accepting = False

    def accepts(self, symbols: Iterable) -> bool:
        """Does the automaton recognize exactly this sequence? Leaves the
           runtime position untouched."""
        state = START
        for symbol in symbols:
            state = self.states[state].transition(symbol)
            if state is None:
                return False
        return self.states[state].accepting

    # ==================
    # Export
    # ==================

    def todict(self) -> Dict[str, Any]:
        """Create a dictionary form of the automaton for export to JSON.
           Symbols are stored as given, so they must be JSON-serializable
           for json.dumps() to succeed."""
        return {
            "states": [
                {
                    "accepting": state.accepting,
                    "transitions": [[t.first, t.last, t.targetstate] for t in state.transitions],
                }
                for state in self.states
            ]
        }

    # ==================
    # Rendering
    # ==================

    def view(self, show_ranges=True) -> 'graphviz.Digraph':
        """Creates a 'graphviz.Digraph' object to view the automaton. Will automatically display in Jupyter.

            :param show_ranges: label edges with the symbol ranges they accept
            :return: A Digraph object which will automatically display in Jupyter.

           If you would like to display the automaton from a non-Jupyter environment, please use :code:`Automaton.render`
        """
        import graphviz

        g = graphviz.Digraph('Automaton', graph_attr={"rankdir": "LR"})
        g.attr(size='8,5')
        for idx, s in enumerate(self.states):
            shape = 'doublecircle' if s.accepting else 'circle'
            style = 'filled, bold' if idx == START else 'filled'
            g.node(str(idx), shape=shape, style=style)

        # One edge per (source, target) pair, listing its ranges in table order
        grouped_ranges = defaultdict(list)
        for source, t in all_transitions(self.states):
            grouped_ranges[(source, t.targetstate)].append(util.range_label(t.first, t.last))
        for (source, target), labels in grouped_ranges.items():
            printlabel = ', '.join(labels) if show_ranges else ''
            g.edge(str(source), str(target), label=graphviz.nohtml(printlabel))
        return g

    def render(self, view=True, filename: str='Automaton', format='pdf', tight=True):
        """
        Renders the automaton to a file and optionally opens the file.
        :param view: If True, the rendered file will be opened.
        :param format: The file format for the Digraph. Typically 'pdf', 'png', or 'svg'. View all formats: https://graphviz.org/docs/outputs/
        :param tight: If False, the rendered file will have whitespace margins around the graph.
        """
        import graphviz
        if not util.check_graphviz_installed():
            raise EnvironmentError("Graphviz executable not found. Please install [Graphviz](https://www.graphviz.org/download/). On macOS, use `brew install graphviz`.")
        digraph = cast(graphviz.Digraph, self.view())
        digraph.format = format
        if tight:
            digraph.graph_attr['margin'] = '0' # Remove padding
        digraph.render(view=view, filename=filename, cleanup=True)

    # ==================
    # Magic Methods
    # ==================

    def __copy__(self):
        """Copy an automaton. The state table is shared, the copy starts at the start state."""
        return Automaton(self.states)

    copy = __copy__

    def __len__(self):
        """Return the number of states."""
        return len(self.states)

    def __str__(self):
        """A tab-separated table: one 'source target first last' line per
           transition, then one line per accepting state."""
        st = ""
        for source, t in all_transitions(self.states):
            st += '{}\t{}\t{}\t{}\n'.format(source, t.targetstate, t.first, t.last)
        for idx, s in enumerate(self.states):
            if s.accepting:
                st += '{}\n'.format(idx)
        return st


class AutomatonBuilder:
    """Incrementally constructs the state table of an automaton.

    A new builder holds a single, non-accepting start state. Transitions are
    kept in insertion order and the first range containing a symbol wins, so
    specific ranges should be added before catch-all ones.
    """

    def __init__(self):
        self.states: List[State] = [State(accepting=False)]

    def __len__(self):
        return len(self.states)

    def add_state(self, accepting: bool = False) -> int:
        """Append a state and return its index."""
        self.states.append(State(accepting=accepting))
        return len(self.states) - 1

    def set_accepting(self, state: int, accepting: bool = True) -> None:
        """Change the accepting flag of an existing non-start state."""
        self._check_index('state', state)
        if state == START:
            raise ValueError("The start state cannot be accepting")
        self.states[state].accepting = accepting

    def add_transition(self, source: int, target: int, first, last=None) -> None:
        """Add a transition from 'source' to 'target' on the inclusive range first..last.

        :param source: index of the state the transition leaves from
        :param target: index of the state the transition leads to
        :param first: lowest symbol of the range
        :param last: highest symbol of the range, defaults to 'first'

        Both indices must refer to existing states, otherwise StateIndexError
        is raised at once.
        """
        self._check_index('source', source)
        self._check_index('target', target)
        self.states[source].add_transition(first, first if last is None else last, target)

    def build(self) -> Automaton:
        """Freeze the current table into an Automaton at its start state.
           The builder stays usable and later edits don't affect the result."""
        automaton = Automaton(s.frozen() for s in self.states)
        logger.debug(f"Built automaton with {len(automaton)} states and "
                     f"{sum(len(s.transitions) for s in automaton.states)} transitions")
        for source, t in algorithms.shadowed_transitions(automaton):
            logger.debug(f"{t!r} from state {source} is shadowed by an earlier range")
        accessible = algorithms.accessible_states(automaton)
        coaccessible = algorithms.coaccessible_states(automaton)
        for idx in range(len(automaton)):
            if idx not in accessible:
                logger.debug(f"State {idx} is unreachable from the start state")
            elif idx not in coaccessible:
                # Keeps the automaton alive in a lexer without any chance to accept
                logger.debug(f"State {idx} can never reach an accepting state")
        return automaton

    def _check_index(self, argument: str, index: int) -> None:
        if not 0 <= index < len(self.states):
            raise StateIndexError(argument, index, len(self.states))


# ==================
# Constructors
# ==================

def keyword(symbols: Iterable) -> Automaton:
    """An automaton that recognizes exactly the literal sequence 'symbols'.
       Each state moves on the next symbol only; any other symbol kills it."""
    symbols = list(symbols)
    builder = AutomatonBuilder()
    for idx, symbol in enumerate(symbols):
        newstate = builder.add_state(accepting=idx == len(symbols) - 1)
        builder.add_transition(newstate - 1, newstate, symbol)
    return builder.build()

def keywords(words: Iterable[Iterable]) -> Automaton:
    """An automaton (a trie) that recognizes exactly the sequences in 'words'.
       The empty sequence is ignored since the start state never accepts."""
    builder = AutomatonBuilder()
    children: Dict[Tuple[int, Any], int] = {}
    for word in words:
        state = START
        for symbol in word:
            if (state, symbol) not in children:
                children[(state, symbol)] = builder.add_state()
                builder.add_transition(state, children[(state, symbol)], symbol)
            state = children[(state, symbol)]
        if state != START:
            builder.set_accepting(state)
    return builder.build()

def character_ranges(ranges: Iterable[Tuple[Any, Any]], repeat=False) -> Automaton:
    """Returns a two-state automaton from a list of inclusive (first, last) range pairs.
       Keyword arguments:
       repeat -- if True, accept one or more symbols from the ranges instead of exactly one
       """
    builder = AutomatonBuilder()
    final = builder.add_state(accepting=True)
    for first, last in ranges:
        builder.add_transition(START, final, first, last)
        if repeat:
            builder.add_transition(final, final, first, last)
    return builder.build()
