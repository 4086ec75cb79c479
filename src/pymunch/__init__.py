from pymunch.automaton import Automaton, AutomatonBuilder, START, keyword, keywords, character_ranges
from pymunch.lexer import Lexer, Token, TokenKind, lex
from pymunch._private.exceptions import StateIndexError

__author__     = "Mans Hulden"
__copyright__  = "Copyright 2022"
__credits__    = ["Mans Hulden"]
__license__    = "Apache"
__version__    = "0.1"
__maintainer__ = "Mans Hulden"
__email__      = "mans.hulden@gmail.com"
__status__     = "Prototype"
