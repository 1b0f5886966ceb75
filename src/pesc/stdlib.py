'''
Functions loaded into a Machine at start-up.

Each is a callable taking the machine, popping its arguments and pushing its
results. Binary operators read their operands in writing order: 9 2 ^ is 81.
'''

from functools import wraps
import math

from .token import Str, Number, Macro, Bool
from .util import (InvalidArgumentType, DivideByZero, Other,
                   wrap_user_errors)


def _unary(f):
    '''
    Lift a float -> float function to pop its argument and push its result.
    '''
    @wraps(f)
    def wrapped(machine):
        machine.push(Number(f(machine.pop_number())))
    return wrapped


def _binary(f):
    '''
    Lift a (float, float) -> float function to the stack.
    '''
    @wraps(f)
    def wrapped(machine):
        right = machine.pop_number()
        left = machine.pop_number()
        machine.push(Number(f(left, right)))
    return wrapped


def _nullary(value):
    def wrapped(machine):
        machine.push(Number(value()))
    wrapped.__name__ = value.__name__
    wrapped.__doc__ = value.__doc__
    return wrapped


def _integer(n):
    '''
    Return n as a non-negative int, for functions that need one.
    '''
    if not math.isfinite(n) or n < 0 or n != int(n):
        raise Other('{} is not a non-negative integer'.format(Number(n)))
    return int(n)


# Arithmetic

def div(machine):
    '''
    Divide, refusing to divide by zero.
    '''
    right = machine.pop_number()
    left = machine.pop_number()
    if right == 0:
        raise DivideByZero(left, right)
    machine.push(Number(left / right))


def mod(machine):
    right = machine.pop_number()
    left = machine.pop_number()
    if right == 0:
        raise DivideByZero(left, right)
    machine.push(Number(math.fmod(left, right)))


@wrap_user_errors('Cannot raise to that power: {}')
def pow_(machine):
    '''
    Raise to a power. Overflows to infinity, as * does. Domain errors, like a
    negative number to a fractional power, are still errors.
    '''
    right = machine.pop_number()
    left = machine.pop_number()
    try:
        result = math.pow(left, right)
    except OverflowError:
        odd = right == int(right) and int(right) % 2 == 1
        result = math.copysign(math.inf, left) if odd else math.inf
    machine.push(Number(result))


# Stack

def dup(machine):
    '''
    Duplicate the item on top of the stack.
    '''
    top = machine.pop()
    machine.push(top)
    machine.push(top)


def swap(machine):
    '''
    Swap the two items on top of the stack.
    '''
    top = machine.pop()
    below = machine.pop()
    machine.push(top)
    machine.push(below)


def drop(machine):
    machine.pop()


def rot(machine):
    '''
    Rotate the third item to the top: a b c -> b c a.
    '''
    c = machine.pop()
    b = machine.pop()
    a = machine.pop()
    machine.push(b)
    machine.push(c)
    machine.push(a)


def get(machine):
    '''
    Replace the index on top of the stack with the item that many down.

    The index counts itself: 0 is the index, 1 the item below it.
    '''
    index = machine.nth(0)
    if not isinstance(index, Number):
        raise InvalidArgumentType(Number.KIND, str(index))
    item = machine.nth(index.value)
    machine.pop()
    machine.push(item)


def set_(machine):
    '''
    Pop an index and a value, and store the value that far down the stack.
    '''
    index = machine.pop_number()
    value = machine.pop()
    machine.set(index, value)


def size(machine):
    machine.push(Number(len(machine.stack)))


def clear(machine):
    machine.clear()


# Control

def run(machine):
    '''
    Pop a macro or function reference and execute it.
    '''
    machine.exec(machine.pop())


def if_(machine):
    '''
    cond {then} {else} ?: run then if cond is true, else otherwise.
    '''
    otherwise = machine.pop_macro()
    then = machine.pop_macro()
    if machine.pop_boolean():
        machine.exec(Macro(then))
    else:
        machine.exec(Macro(otherwise))


def times(machine):
    '''
    {body} n [times]: run body n times.
    '''
    n = _integer(machine.pop_number())
    body = Macro(machine.pop_macro())
    for _ in range(n):
        machine.exec(body)


def while_(machine):
    '''
    {cond} {body} [while]: run body for as long as cond leaves a true value.
    '''
    body = Macro(machine.pop_macro())
    cond = Macro(machine.pop_macro())
    while True:
        machine.exec(cond)
        if not machine.pop_boolean():
            break
        machine.exec(body)


def define(machine):
    '''
    {body} "name" [define]: define a new function, callable as [name].
    '''
    name = machine.pop_string()
    body = machine.pop_macro()
    machine.define(name, body)


# Logic

def not_(machine):
    machine.push(Bool(not machine.pop_boolean()))


def and_(machine):
    right = machine.pop_boolean()
    left = machine.pop_boolean()
    machine.push(Bool(left and right))


def or_(machine):
    right = machine.pop_boolean()
    left = machine.pop_boolean()
    machine.push(Bool(left or right))


def eq(machine):
    machine.push(Bool(machine.pop() == machine.pop()))


def lt(machine):
    right = machine.pop_number()
    left = machine.pop_number()
    machine.push(Bool(left < right))


def gt(machine):
    right = machine.pop_number()
    left = machine.pop_number()
    machine.push(Bool(left > right))


# Strings

def concat(machine):
    right = machine.pop_string()
    left = machine.pop_string()
    machine.push(Str(left + right))


def len_(machine):
    machine.push(Number(len(machine.pop_string())))


def str_(machine):
    '''
    Convert the item on top of the stack to its printed form.
    '''
    top = machine.pop()
    machine.push(top if isinstance(top, Str) else Str(str(top)))


def num(machine):
    '''
    Convert a string to a number, using the lexer's rules.
    '''
    text = machine.pop_string()
    tokens = machine.lexer.tokenize(text)
    if len(tokens) != 1 or not isinstance(tokens[0], Number):
        raise InvalidArgumentType(Number.KIND, str(Str(text)))
    machine.push(tokens[0])


def standard():
    '''
    Return the standard library: arithmetic, stack, control and logic.
    '''
    return [
        ('+', 'add', _binary(lambda a, b: a + b)),
        ('-', 'sub', _binary(lambda a, b: a - b)),
        ('*', 'mul', _binary(lambda a, b: a * b)),
        ('/', 'div', div),
        ('%', 'mod', mod),
        ('^', 'pow', pow_),

        (':', 'dup', dup),
        ('$', 'swap', swap),
        (',', 'drop', drop),
        ('@', 'rot', rot),
        ('ø', 'get', get),
        (None, 'set', set_),
        (None, 'size', size),
        (None, 'clear', clear),

        (';', 'run', run),
        ('?', 'if', if_),
        (None, 'times', times),
        (None, 'while', while_),
        (None, 'define', define),

        ('!', 'not', not_),
        ('&', 'and', and_),
        ('|', 'or', or_),
        ('=', 'eq', eq),
        ('<', 'lt', lt),
        ('>', 'gt', gt),

        (None, 'concat', concat),
        (None, 'len', len_),
        (None, 'str', str_),
        (None, 'num', num),
    ]


# Extended library

def pi():
    '''
    Machin's formula.
    '''
    return (4 * math.atan(1 / 5) - math.atan(1 / 239)) * 4


def e(iterations=20):
    '''
    1 + sum of 1/n! for n in 1..iterations.
    '''
    return 1 + sum(1 / math.factorial(n) for n in range(1, iterations + 1))


def gcd(u, v):
    '''
    Stein's binary GCD algorithm.
    '''
    if u == 0:
        return v
    if v == 0:
        return u
    shift = 0
    while (u | v) & 1 == 0:
        u >>= 1
        v >>= 1
        shift += 1
    while u & 1 == 0:
        u >>= 1
    while v:
        while v & 1 == 0:
            v >>= 1
        if u > v:
            u, v = v, u
        v -= u
    return u << shift


def lcm(u, v):
    if u == 0 or v == 0:
        return 0
    return u // gcd(u, v) * v


def is_prime(n):
    if n in (2, 3):
        return True
    if n < 2 or n % 2 == 0 or n % 3 == 0:
        return False
    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6
    return True


def ackermann(m, n):
    '''
    Ackermann function, with an explicit stack rather than recursion.
    '''
    pending = [m]
    while pending:
        m = pending.pop()
        if m == 0:
            n += 1
        elif n == 0:
            pending.append(m - 1)
            n = 1
        else:
            pending.append(m - 1)
            pending.append(m)
            n -= 1
    return n


ROMAN = {
    'm': 1000,
    'd': 500,
    'c': 100,
    'l': 50,
    'x': 10,
    'v': 5,
    'i': 1,
}


def roman(text):
    '''
    Value of a roman numeral, subtractive notation included.
    '''
    total = 0
    previous = 0
    for char in reversed(text.lower()):
        if char not in ROMAN:
            raise Other("invalid roman numeral ('{}')".format(char))
        value = ROMAN[char]
        if value < previous:
            total -= value
        else:
            total += value
            previous = value
    return total


def _integers(f):
    '''
    Lift an (int, int) -> int function to non-negative integer operands.
    '''
    @wraps(f)
    def wrapped(left, right):
        return f(_integer(left), _integer(right))
    return wrapped


def factorial(machine):
    machine.push(Number(math.factorial(_integer(machine.pop_number()))))


def prime(machine):
    machine.push(Bool(is_prime(_integer(machine.pop_number()))))


def roman_(machine):
    machine.push(Number(roman(machine.pop_string())))


def _math(f, name):
    '''
    Lift a math function, turning domain and range errors into Other.
    '''
    return wrap_user_errors(name + ': {}')(_unary(f))


def _whole(f, name):
    '''
    Lift an integer function of two operands. Results too large for a float
    become Other, like the math functions' range errors.
    '''
    return wrap_user_errors(name + ': {}')(_binary(_integers(f)))


def extended():
    '''
    Return the extended library: mostly math functions.
    '''
    return [
        (None, 'neg', _unary(lambda n: -n)),
        (None, 'abs', _unary(abs)),
        (None, 'sqrt', _math(math.sqrt, 'sqrt')),
        (None, 'cbrt', _unary(lambda n: math.copysign(abs(n) ** (1 / 3), n))),
        (None, 'floor', _math(math.floor, 'floor')),
        (None, 'ceil', _math(math.ceil, 'ceil')),
        (None, 'round', _math(round, 'round')),
        (None, 'sin', _math(math.sin, 'sin')),
        (None, 'cos', _math(math.cos, 'cos')),
        (None, 'tan', _math(math.tan, 'tan')),
        (None, 'asin', _math(math.asin, 'asin')),
        (None, 'acos', _math(math.acos, 'acos')),
        (None, 'atan', _math(math.atan, 'atan')),
        (None, 'ln', _math(math.log, 'ln')),
        (None, 'log', _math(math.log10, 'log')),
        (None, 'exp', _math(math.exp, 'exp')),
        (None, 'min', _binary(min)),
        (None, 'max', _binary(max)),
        (None, 'fact', wrap_user_errors('fact: {}')(factorial)),
        (None, 'gcd', _whole(gcd, 'gcd')),
        (None, 'lcm', _whole(lcm, 'lcm')),
        (None, 'prime', prime),
        (None, 'ack', _whole(ackermann, 'ack')),
        (None, 'pi', _nullary(pi)),
        (None, 'e', _nullary(e)),
        (None, 'roman', roman_),
    ]
