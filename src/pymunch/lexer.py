"""Maximal-munch tokenizer over a set of automata.

A Lexer runs a priority-ordered list of (Automaton, kind) pairs in lock-step
over a sequence of symbols. A token ends only once every automaton has died;
its kind is taken from the first registered automaton that was accepting just
before dying, so the longest match wins and ties go to the earliest
registration. Input that no automaton accepts comes out as Unknown tokens,
never as an error.

Usage example:


from enum import Enum
from pymunch import Lexer, keyword, character_ranges

class Kind(Enum):
    IF = 1
    NUMBER = 2
    UNKNOWN = 3

    @classmethod
    def unknown(cls):
        return cls.UNKNOWN

    def has_text(self):
        return self is Kind.NUMBER

lexer = Lexer([(keyword("if"), Kind.IF),
               (character_ranges([("0", "9")], repeat=True), Kind.NUMBER)])

print([(t.kind.name, t.text) for t in lexer.tokenize("if 42", skip={Kind.UNKNOWN})])
# → [('IF', None), ('NUMBER', ('4', '2'))]

"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar

from typing_extensions import Protocol

from pymunch.automaton import Automaton

logger = logging.getLogger(__file__)


class TokenKind(Protocol):
    """What a Lexer needs from a token kind: a distinguished Unknown value
       and, per value, whether tokens of that kind keep their matched text."""

    @classmethod
    def unknown(cls) -> 'TokenKind':
        ...

    def has_text(self) -> bool:
        ...


K = TypeVar('K', bound=TokenKind)


@dataclass(frozen=True)
class Token(Generic[K]):
    kind: K
    text: Optional[Tuple[Any, ...]]
    length: int

    @classmethod
    def new(cls, kind: K, text: List) -> 'Token[K]':
        """Create a token from the symbols consumed for it; the text is only
           kept if the kind asks for it."""
        return cls(kind, tuple(text) if kind.has_text() else None, len(text))


class Lexer(Generic[K]):

    def __init__(self, automata: Iterable[Tuple[Automaton, K]], unknown: Optional[K] = None):
        """Creates a lexer from (automaton, kind) pairs given in priority order.

        :param automata: iterable of (Automaton, kind) pairs; earlier pairs win ties
        :param unknown: kind for unrecognized input, by default the unknown() of the kinds' type

        Each automaton is copied, so the caller's automata are never advanced
        and one automaton may be registered for several kinds.
        """
        self.automata: List[Tuple[Automaton, K]] = [(copy.copy(a), kind) for a, kind in automata]
        if unknown is None:
            if len(self.automata) == 0:
                raise ValueError("Cannot tell the unknown kind of a lexer without automata")
            unknown = type(self.automata[0][1]).unknown()
        self.unknown: K = unknown
        self.active: List[int] = list(range(len(self.automata)))
        self.pending_text: List = []

    def reset(self) -> None:
        """Rewind every automaton and forget any partially read token."""
        for automaton, _ in self.automata:
            automaton.reset()
        self.active = list(range(len(self.automata)))
        self.pending_text = []

    def step(self, symbol) -> Optional[Token[K]]:
        """Feed one symbol (None for end of input) and return the token it
           completes, if any. A symbol that ends a token also starts the next one."""
        self.active = [idx for idx in self.active if self.automata[idx][0].is_alive()]

        any_alive = False
        for idx in self.active:
            automaton = self.automata[idx][0]
            automaton.transition(symbol)
            any_alive = any_alive or automaton.is_alive()

        token = None
        if not any_alive:
            # self.active is in registration order, so the first accepting one wins ties
            kind = next((kind for automaton, kind in (self.automata[idx] for idx in self.active)
                         if automaton.is_previous_accepting()), self.unknown)
            # Empty (and Unknown) only when the first symbol or the sentinel of an empty input ends it
            token = Token.new(kind, self.pending_text)
            logger.debug(f"Token {kind!r} of length {token.length}")
            self.reset()
            for automaton, _ in self.automata:
                automaton.transition(symbol)

        if symbol is not None:
            self.pending_text.append(symbol)

        return token

    def lex(self, symbols: Iterable) -> Iterator[Token[K]]:
        """A generator to yield tokens for 'symbols', which must end with the
           None sentinel. The lexer is reset first."""
        self.reset()
        for symbol in symbols:
            token = self.step(symbol)
            if token is not None:
                yield token

    def tokenize(self, symbols: Iterable, skip=()) -> Iterator[Token[K]]:
        """Like lex(), but for a plain sequence (a str, bytes, a list...): the
           sentinel is appended here. Tokens whose kind is in 'skip' are dropped."""
        for token in self.lex(_with_sentinel(symbols)):
            if token.kind not in skip:
                yield token


def _with_sentinel(symbols: Iterable) -> Iterator:
    yield from symbols
    yield None


# ==================
# Global Functions
# ==================

def lex(automata: Iterable[Tuple[Automaton, K]], symbols: Iterable) -> Iterator[Token[K]]:
    return Lexer(automata).lex(symbols)
