from functools import reduce
import operator

import regex

from .token import (BOOLEAN_TRUE, BOOLEAN_FALSE,
                    Str, Number, Func, Macro, Symbol, Bool)
from .util import (PescError, UnmatchedToken, EmptyLiteral,
                   InvalidNumberLit)


class Lexer:
    '''
    Lexer (and, for braces, recursive descent parser) for pesc source.

    For consistency, needs to be instantiated, despite holding no internal
    state.
    '''
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.DOTALL,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    # Run of characters making up a bare number.
    # _ is a sign marker, not a thousands separator: _5 is -5.
    NUMBER = regex.compile(r'[0-9._]+', flags=FLAGS)

    # Delimited literals. The closing group is absent when we ran off the end
    # of the input, which is how unmatched delimiters are told apart from
    # matched ones.
    LITERAL = r'''
               {open}
               (?<body>
                   [^{close}]*
               )
               (?<close>
                   {close}
               )?
               '''
    PAREN = regex.compile(LITERAL.format(open=r'\(', close=r'\)'),
                          flags=FLAGS)
    STR = regex.compile(LITERAL.format(open=r'"', close=r'"'),
                        flags=FLAGS)
    FUNC = regex.compile(LITERAL.format(open=r'\[', close=r'\]'),
                         flags=FLAGS)

    # Comments run up to and including a newline or backslash
    COMMENT = regex.compile(r'\# [^\n\\]* [\n\\]?', flags=FLAGS)

    SPACE = ' \t\n\r'
    NUMERIC = '0123456789._'

    def parse(self, text, start=0):
        '''
        Parse text into tokens, starting at index start.

        Return the index parsing stopped at, and the tokens. Stops either at
        the end of text, or at a closing brace, which ends the macro this
        (recursive) call was parsing. A closing brace is therefore never an
        error, even at top level, where it silently ends parsing.

        :raise PescError: with position set to where the lexer gave up.
        '''
        tokens = []
        i = start
        while i < len(text):
            char = text[i]
            if char in self.NUMERIC:
                match = self.NUMBER.match(text, i)
                i = match.end()
                tokens.append(self._number(match.group(0), i))
            elif char == '(':
                body, i = self._delimited(self.PAREN, text, i)
                if not body:
                    raise self._error(EmptyLiteral(), i)
                tokens.append(self._number(body, i))
            elif char == '"':
                body, i = self._delimited(self.STR, text, i)
                tokens.append(Str(body))
            elif char == '[':
                body, i = self._delimited(self.FUNC, text, i)
                tokens.append(Func(body))
            elif char == '{':
                stop, body = self.parse(text, i + 1)
                tokens.append(Macro(body))
                # Past the closing brace
                i = stop + 1
            elif char == '}':
                return i, tokens
            elif char in self.SPACE:
                i += 1
            elif char == '#':
                i = self.COMMENT.match(text, i).end()
            elif char == BOOLEAN_TRUE:
                tokens.append(Bool(True))
                i += 1
            elif char == BOOLEAN_FALSE:
                tokens.append(Bool(False))
                i += 1
            else:
                tokens.append(Symbol(char))
                i += 1
        return i, tokens

    def tokenize(self, text):
        '''
        Return just the tokens in text.
        '''
        return self.parse(text)[1]

    def is_incomplete(self, text):
        '''
        Return True if text is missing a closing delimiter.

        More input could make it parse, unlike other errors.
        '''
        try:
            self.parse(text)
        except UnmatchedToken:
            return True
        except PescError:
            return False
        return False

    def _delimited(self, pattern, text, i):
        '''
        Return body of the delimited literal at i, and the index just past it.
        '''
        match = pattern.match(text, i)
        if match.group('close') is None:
            raise self._error(UnmatchedToken(text[i]), match.end())
        return match.group('body'), match.end()

    def _number(self, text, i):
        '''
        Convert number literal text to a Number.
        '''
        sign = -1 if text.startswith('_') else 1
        digits = text.replace('_', '')
        # float() would forgive surrounding whitespace
        if digits != digits.strip():
            raise self._error(InvalidNumberLit(text), i)
        try:
            return Number(sign * float(digits))
        except ValueError:
            raise self._error(InvalidNumberLit(text), i) from None

    @staticmethod
    def _error(error, i):
        error.position = i
        return error
