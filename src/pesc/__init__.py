'''
pesc, a stack based calculator language.

Source is a sequence of numbers, "strings", booleans (T and F), single
character operators, [bracketed] function references, and {braced} macros:
blocks of code pushed as values and run on demand. Everything is evaluated
left to right against a single stack, in reverse Polish notation:

    3 4 +               # 7
    {1 2 +} ;           # 3, the macro pushed then run
    {: *} "sq" [define]
    5 [sq]              # 25

Numbers are floats; _ marks a negative one (_5), so that - is always
subtraction. (1e3) takes anything Python's float() does, bar whitespace.

A function either succeeds or leaves the stack as it found it.
'''

from .cli import CLI
from .lexer import Lexer
from .machine import Machine
from .util import PescError


__all__ = 'Machine', 'Lexer', 'CLI', 'PescError'
