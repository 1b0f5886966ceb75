from functools import wraps

from .token import Number


class PescError(Exception):
    '''
    Base of every error the lexer, machine or function library raises.

    Besides its own payload, carries diagnostics filled in on the way up:

    - position: character index the lexer stopped at.
    - token: token being evaluated when the error surfaced.
    - stack: copy of the stack as it stood at the moment of failure.
    '''
    def __init__(self, *args):
        super().__init__(*args)
        self.position = None
        self.token = None
        self.stack = None

    def __str__(self):
        return self.message()

    def message(self):
        return str(self.args[0]) if self.args else ''


class UnknownFunction(PescError):
    def __init__(self, name):
        super().__init__(name)
        self.name = name

    def message(self):
        return 'I have no idea what {} means.'.format(self.name)


class UnmatchedToken(PescError):
    def __init__(self, delimiter):
        super().__init__(delimiter)
        self.delimiter = delimiter

    def message(self):
        return "Where's the matching '{}'?".format(self.delimiter)


class NotEnoughArguments(PescError):
    def message(self):
        return 'I need just 1 more argument, OK?'


class InvalidArgumentType(PescError):
    def __init__(self, expected, found):
        super().__init__(expected, found)
        self.expected = expected
        self.found = found

    def message(self):
        return 'I wanted a {}, but you gave a {}'.format(self.expected,
                                                          self.found)


class InvalidNumberLit(PescError):
    def __init__(self, text):
        super().__init__(text)
        self.text = text

    def message(self):
        return "What makes you think '{}' is a number?".format(self.text)


class EmptyLiteral(PescError):
    def message(self):
        return "I don't know what to do with an empty literal."


class DivideByZero(PescError):
    def __init__(self, dividend, divisor):
        super().__init__(dividend, divisor)
        self.dividend = dividend
        self.divisor = divisor

    def message(self):
        return "You can't divide {} by {}, so don't try.".format(
            Number(self.dividend), Number(self.divisor))


class OutOfBounds(PescError):
    def __init__(self, index, length):
        super().__init__(index, length)
        self.index = index
        self.length = length

    def message(self):
        return '{} is out of bounds for a stack of {} item(s).'.format(
            Number(self.index), self.length)


class InvalidBoolean(PescError):
    def __init__(self, found):
        super().__init__(found)
        self.found = found

    def message(self):
        return "I can't make a boolean out of {}.".format(self.found)


class Other(PescError):
    '''
    Anything a library function wants to complain about that has no kind of
    its own.
    '''


def wrap_user_errors(fmt):
    '''
    Decorator converting exceptions raised by library functions to Other.

    Passes through PescErrors. fmt is formatted with the original exception.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except PescError:
                raise
            except Exception as e:
                raise Other(fmt.format(e)) from e
        return wrapper
    return decorator
