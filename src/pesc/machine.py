from collections import deque
import logging

from .lexer import Lexer
from .token import (BOOLEAN_TRUE, BOOLEAN_FALSE,
                    Str, Number, Func, Macro, Symbol, Bool)
from .util import (PescError, UnknownFunction, NotEnoughArguments,
                   InvalidArgumentType, InvalidBoolean, OutOfBounds)


logger = logging.getLogger(__name__)


class Machine:
    '''
    Stack machine (RPN interpreter).

    Owns one operand stack and the dispatch table: operator -> function name,
    and function name -> callable. Callables take the machine, mutate its
    stack through the primitives below, and raise PescError on failure.

    A function call is atomic: if it fails, the stack is put back as it was
    before the call.
    '''

    def __init__(self, functions=()):
        '''
        Create empty stack machine.

        :param functions: (operator, name, callable) triples to load.
        '''
        self.stack = deque()
        self.operators = dict()
        self.functions = dict()
        self.lexer = Lexer()
        self.load_all(functions)

    def load(self, operator, name, func):
        '''
        Make func callable as [name], and as operator if not None.

        The first function loaded under a name wins; later ones are ignored.
        '''
        if operator is not None:
            assert operator not in self.operators, \
                'cannot add operator {!r}: already added'.format(operator)
            assert operator not in (BOOLEAN_TRUE, BOOLEAN_FALSE), \
                'cannot add operator {!r}: reserved keyword'.format(operator)
            self.operators[operator] = name
        name = name.lower()
        if name in self.functions:
            logger.debug('function %s already loaded, ignoring', name)
            return
        self.functions[name] = func

    def load_all(self, functions):
        for operator, name, func in functions:
            self.load(operator, name, func)

    def define(self, name, body):
        '''
        Define function name as running the macro body.
        '''
        macro = Macro(body)

        def defined(machine):
            machine.exec(macro)
        defined.__name__ = name
        defined.__doc__ = 'User defined.'

        logger.debug('defining %s', name)
        self.load(None, name, defined)

    def run(self, text):
        '''
        Parse and evaluate text, returning the stack.
        '''
        self.eval(self.lexer.tokenize(text))
        return self.stack

    def eval(self, tokens):
        '''
        Push literals, and execute operators and functions, in order.

        Stops at the first error, tagging it with the token that caused it
        and the stack as it stood then.
        '''
        for token in tokens:
            if isinstance(token, (Symbol, Func)):
                try:
                    self.exec(token)
                except PescError as e:
                    e.token = token
                    if e.stack is None:
                        e.stack = list(self.stack)
                    raise
            else:
                self.push(token)

    def exec(self, token):
        '''
        Execute an operator, function reference or macro.
        '''
        if isinstance(token, Symbol):
            name = self.operators.get(token.value)
            if name is None:
                raise self._failed(UnknownFunction("'{}'".format(token.value)))
            self.exec(Func(name))
        elif isinstance(token, Func):
            name = token.value.lower()
            # Our own reference: the function may well add to the table.
            func = self.functions.get(name)
            if func is None:
                raise self._failed(UnknownFunction(name))
            backup = list(self.stack)
            try:
                func(self)
            except PescError as e:
                e.stack = list(self.stack)
                logger.debug('%s failed, rolling back %d item(s) to %d',
                             name, len(self.stack), len(backup))
                self.stack.clear()
                self.stack.extend(backup)
                raise
        elif isinstance(token, Macro):
            try:
                self.eval(token.value)
            except PescError as e:
                e.token = None
                raise
        else:
            raise self._failed(InvalidArgumentType('macro/function',
                                                   str(token)))

    def _failed(self, error):
        error.stack = list(self.stack)
        return error

    def push(self, token):
        '''
        Push token onto the top of the stack.
        '''
        self.stack.append(token)

    def pop(self):
        '''
        Pop token from the top of the stack.
        '''
        if not self.stack:
            raise NotEnoughArguments()
        return self.stack.pop()

    def _pop_typed(self, kind):
        token = self.pop()
        if not isinstance(token, kind):
            raise InvalidArgumentType(kind.KIND, str(token))
        return token.value

    def pop_number(self):
        return self._pop_typed(Number)

    def pop_string(self):
        return self._pop_typed(Str)

    def pop_macro(self):
        return self._pop_typed(Macro)

    def pop_boolean(self):
        '''
        Pop token from the top of the stack as a truth value.

        Empty strings, zero, and false are false. Strings, numbers and
        booleans are otherwise true. Anything else has no truth value.
        '''
        token = self.pop()
        if isinstance(token, (Str, Number, Bool)):
            return bool(token.value)
        raise InvalidBoolean(token)

    def _index(self, index):
        '''
        Return deque index of the item index places down from the top.
        '''
        if not 0 <= index < len(self.stack):
            raise OutOfBounds(index, len(self.stack))
        return len(self.stack) - 1 - int(index)

    def nth(self, index):
        '''
        Return token index places down from the top (0 is the top).
        '''
        return self.stack[self._index(index)]

    def set(self, index, token):
        '''
        Replace token index places down from the top (0 is the top).
        '''
        self.stack[self._index(index)] = token

    def top_first(self):
        '''
        Iterate over the stack, top first.
        '''
        return reversed(self.stack)

    def clear(self):
        '''
        Clear everything from the stack.
        '''
        self.stack.clear()
