'''
Tokens: the values that flow out of the lexer and live on the stack.

A closed set of variants. Every variant holds a single immutable payload and
compares structurally, so a Str('1') is never equal to a Func('1').
'''

from decimal import Decimal
import json


# Reserved operators. Never bindable to a function.
BOOLEAN_TRUE = 'T'
BOOLEAN_FALSE = 'F'


class Token:
    '''
    Base of all token variants.
    '''
    __slots__ = ('value',)

    # Name used when a typed pop complains
    KIND = 'token'

    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        return type(self) is type(other) and self.value == other.value

    def __hash__(self):
        return hash((type(self).__name__, self.value))

    def __repr__(self):
        return '{}({!r})'.format(type(self).__name__, self.value)


class Str(Token):
    KIND = 'string'

    def __str__(self):
        return json.dumps(self.value, ensure_ascii=False)


class Number(Token):
    KIND = 'number'

    def __init__(self, value):
        super().__init__(float(value))

    def __str__(self):
        text = repr(self.value)
        # Positional notation, as the lexer reads no exponents
        if 'e' in text:
            text = format(Decimal(text), 'f')
        # 7.0 reads as 7
        if text.endswith('.0'):
            text = text[:-2]
        return text


class Func(Token):
    '''
    Bracketed reference to a function, by (not yet resolved) name.
    '''
    KIND = 'function'

    def __str__(self):
        return '<fn {}>'.format(self.value)


class Macro(Token):
    '''
    Deferred block of tokens.

    Opaque: renders as an identity marker, never as its contents.
    '''
    KIND = 'macro'

    def __init__(self, tokens):
        super().__init__(tuple(tokens))

    def __str__(self):
        return '<mac {:#x}>'.format(id(self.value))


class Symbol(Token):
    '''
    Single character operator, awaiting lookup in the operator table.
    '''
    KIND = 'symbol'

    def __str__(self):
        return "<sym '{}'>".format(self.value)


class Bool(Token):
    KIND = 'boolean'

    def __init__(self, value):
        super().__init__(bool(value))

    def __str__(self):
        return '(true)' if self.value else '(false)'
