import copy
import importlib.util
import json
import unittest
from pymunch import START, Automaton, AutomatonBuilder, StateIndexError, character_ranges, keyword, keywords


def ident_automaton() -> Automaton:
    """Letter or underscore, then letters, digits or underscores."""
    builder = AutomatonBuilder()
    rest = builder.add_state(accepting=True)
    for first, last in [('a', 'z'), ('A', 'Z'), ('_', '_')]:
        builder.add_transition(START, rest, first, last)
        builder.add_transition(rest, rest, first, last)
    builder.add_transition(rest, rest, '0', '9')
    return builder.build()


class TestAutomaton(unittest.TestCase):
    """Test the automaton runtime"""

    def test_keyword(self):
        automaton = keyword("hello")
        self.assertTrue(automaton.is_alive())
        self.assertFalse(automaton.is_previous_accepting())
        for symbol in "hello":
            automaton.transition(symbol)
            self.assertTrue(automaton.is_alive())
            self.assertFalse(automaton.is_previous_accepting())
        self.assertTrue(automaton.is_accepting())
        automaton.transition(None)
        self.assertFalse(automaton.is_alive())
        self.assertTrue(automaton.is_previous_accepting())

        automaton.reset()
        self.assertTrue(automaton.is_alive())
        self.assertFalse(automaton.is_previous_accepting())
        automaton.transition('h')
        self.assertTrue(automaton.is_alive())
        self.assertFalse(automaton.is_previous_accepting())
        automaton.transition('h')
        self.assertFalse(automaton.is_alive())
        self.assertFalse(automaton.is_previous_accepting())

    def test_keyword_bytes(self):
        """Symbols can be anything ordered, e.g. the ints of a bytes object"""
        automaton = keyword(b"if")
        self.assertTrue(automaton.accepts(b"if"))
        self.assertFalse(automaton.accepts(b"of"))
        self.assertEqual(len(automaton), 3)

    def test_keyword_empty(self):
        automaton = keyword("")
        self.assertEqual(len(automaton), 1)
        self.assertFalse(automaton.accepts(""))
        automaton.transition('a')
        self.assertFalse(automaton.is_alive())
        self.assertFalse(automaton.is_previous_accepting())

    def test_dead_stays_dead(self):
        automaton = keyword("ab")
        automaton.transition('x')
        self.assertFalse(automaton.is_alive())
        for symbol in "ab":
            automaton.transition(symbol)
            self.assertFalse(automaton.is_alive())
            self.assertFalse(automaton.is_previous_accepting())

    def test_reset(self):
        """After reset() an automaton behaves like a freshly built one"""
        fresh = ident_automaton()
        used = ident_automaton()
        for symbol in ["a", "b", "1", "-", None, "c"]:
            used.transition(symbol)
        used.reset()
        for symbol in ["_", "x", "9", " ", None]:
            fresh.transition(symbol)
            used.transition(symbol)
            self.assertEqual(fresh.is_alive(), used.is_alive())
            self.assertEqual(fresh.is_previous_accepting(), used.is_previous_accepting())
            self.assertEqual(fresh.current, used.current)

    def test_first_range_wins(self):
        builder = AutomatonBuilder()
        wide = builder.add_state(accepting=True)
        narrow = builder.add_state(accepting=False)
        builder.add_transition(START, wide, 'a', 'z')
        builder.add_transition(START, narrow, 'a')
        automaton = builder.build()
        automaton.transition('a')
        self.assertEqual(automaton.current, wide)

    def test_inverted_range(self):
        builder = AutomatonBuilder()
        final = builder.add_state(accepting=True)
        builder.add_transition(START, final, 'z', 'a')
        self.assertFalse(builder.build().accepts("m"))

    def test_accepts(self):
        automaton = ident_automaton()
        self.assertTrue(automaton.accepts("_hello123"))
        self.assertFalse(automaton.accepts("1abc"))
        self.assertFalse(automaton.accepts(""))
        automaton.transition('a')
        automaton.transition('-')
        automaton.accepts("abc")
        # accepts() doesn't move the automaton
        self.assertFalse(automaton.is_alive())

    def test_copy(self):
        automaton = keyword("ab")
        automaton.transition('a')
        other = copy.copy(automaton)
        self.assertIs(other.states, automaton.states)
        self.assertEqual(other.current, START)
        other.transition('x')
        self.assertTrue(automaton.is_alive())
        self.assertFalse(other.is_alive())


class TestAutomatonBuilder(unittest.TestCase):
    """Test automaton construction"""

    def test_add_state(self):
        builder = AutomatonBuilder()
        self.assertEqual(len(builder), 1)
        self.assertFalse(builder.states[START].accepting)
        self.assertEqual(builder.add_state(), 1)
        self.assertEqual(builder.add_state(accepting=True), 2)
        self.assertTrue(builder.states[2].accepting)

    def test_bad_indices(self):
        builder = AutomatonBuilder()
        builder.add_state()
        with self.assertRaises(StateIndexError) as cm:
            builder.add_transition(2, 1, 'a')
        self.assertEqual(cm.exception.argument, 'source')
        self.assertEqual(cm.exception.index, 2)
        self.assertEqual(cm.exception.state_count, 2)
        with self.assertRaises(StateIndexError) as cm:
            builder.add_transition(0, 5, 'a')
        self.assertEqual(cm.exception.argument, 'target')
        self.assertIn("exceeds state count 2", str(cm.exception))
        with self.assertRaises(IndexError):
            builder.add_transition(-1, 0, 'a')
        self.assertEqual(len(builder.states[START].transitions), 0)

    def test_start_never_accepts(self):
        builder = AutomatonBuilder()
        with self.assertRaises(ValueError):
            builder.set_accepting(START)
        with self.assertRaises(StateIndexError):
            builder.set_accepting(1)

    def test_build_freezes(self):
        builder = AutomatonBuilder()
        final = builder.add_state(accepting=True)
        builder.add_transition(START, final, 'a')
        automaton = builder.build()
        builder.add_transition(START, final, 'b')
        builder.set_accepting(final, False)
        self.assertTrue(automaton.accepts("a"))
        self.assertFalse(automaton.accepts("b"))
        self.assertIsInstance(automaton.states[START].transitions, tuple)
        self.assertFalse(builder.build().accepts("b"))

    def test_build_logs(self):
        builder = AutomatonBuilder()
        final = builder.add_state(accepting=True)
        builder.add_transition(START, final, 'a', 'z')
        builder.add_transition(START, final, 'q')
        with self.assertLogs(level='DEBUG') as cm:
            builder.build()
        output = "\n".join(cm.output)
        self.assertIn("2 states and 2 transitions", output)
        self.assertIn("shadowed", output)

    def test_build_logs_useless_states(self):
        builder = AutomatonBuilder()
        final = builder.add_state(accepting=True)
        trap = builder.add_state()
        island = builder.add_state(accepting=True)
        builder.add_transition(START, final, 'a')
        builder.add_transition(START, trap, 'b')
        builder.add_transition(trap, trap, 'b')
        builder.add_transition(island, final, 'c')
        with self.assertLogs(level='DEBUG') as cm:
            builder.build()
        output = "\n".join(cm.output)
        self.assertIn(f"State {island} is unreachable", output)
        self.assertIn(f"State {trap} can never reach an accepting state", output)
        self.assertNotIn(f"State {final} ", output)

    def test_built_states_are_read_only(self):
        builder = AutomatonBuilder()
        final = builder.add_state(accepting=True)
        builder.add_transition(START, final, 'a')
        automaton = builder.build()
        with self.assertRaises(AttributeError):
            automaton.states[final].accepting = False
        with self.assertRaises(AttributeError):
            automaton.states[START].accepting = True
        with self.assertRaises(AttributeError):
            automaton.states[START].add_transition('b', 'b', final)
        self.assertTrue(automaton.accepts("a"))
        self.assertFalse(automaton.accepts(""))

    def test_index_error_hashable(self):
        error = StateIndexError('target', 5, 2)
        self.assertIn(error, {error})
        self.assertNotEqual(error, StateIndexError('target', 5, 2))

    def test_keywords(self):
        automaton = keywords(["if", "in", "int", ""])
        self.assertEqual(len(automaton), 5)
        for word in ["if", "in", "int"]:
            self.assertTrue(automaton.accepts(word))
        for word in ["", "i", "it", "inte"]:
            self.assertFalse(automaton.accepts(word))

    def test_character_ranges(self):
        digit = character_ranges([('0', '9')])
        self.assertTrue(digit.accepts("7"))
        self.assertFalse(digit.accepts("77"))
        self.assertFalse(digit.accepts(""))
        number = character_ranges([('0', '9'), ('_', '_')], repeat=True)
        self.assertTrue(number.accepts("1_000"))
        self.assertFalse(number.accepts("1.0"))
        self.assertEqual(len(number), 2)


class TestExport(unittest.TestCase):
    """Test dictionary, string and graphviz forms"""

    def test_todict(self):
        automaton = ident_automaton()
        d = json.loads(json.dumps(automaton.todict()))
        self.assertEqual(len(d["states"]), 2)
        self.assertFalse(d["states"][0]["accepting"])
        self.assertIn(["a", "z", 1], d["states"][0]["transitions"])
        restored = Automaton.fromdict(d)
        self.assertEqual(restored.todict(), automaton.todict())
        for word in ["_hello123", "x", "9lives", ""]:
            self.assertEqual(restored.accepts(word), automaton.accepts(word))

    def test_fromdict_errors(self):
        with self.assertRaises(StateIndexError):
            Automaton.fromdict({"states": [{"accepting": False, "transitions": [["a", "a", 3]]}]})
        with self.assertRaises(ValueError):
            Automaton.fromdict({"states": [{"accepting": True, "transitions": []}]})
        with self.assertRaises(ValueError):
            Automaton.fromdict({"states": []})

    def test_str(self):
        st = str(keyword("ab"))
        self.assertIn("0\t1\ta\ta\n", st)
        self.assertIn("1\t2\tb\tb\n", st)
        self.assertTrue(st.endswith("\n2\n"))

    @unittest.skipUnless(importlib.util.find_spec("graphviz"), "graphviz package not installed")
    def test_view(self):
        source = ident_automaton().view().source
        self.assertIn("doublecircle", source)
        self.assertIn("a-z, A-Z, _", source)
        self.assertIn("0-9", source)
        source = ident_automaton().view(show_ranges=False).source
        self.assertNotIn("a-z", source)


if __name__ == "__main__":
    unittest.main()
