'''
Function library tests
'''

import math

from pesc import stdlib
from pesc.token import Str, Number, Bool
from pesc.util import (DivideByZero, InvalidArgumentType, NotEnoughArguments,
                       Other)

from pytest import raises, mark, approx


def top(machine, source):
    machine.run(source)
    return machine.stack[-1]


@mark.parametrize('source, expected', [
    ('3 4 +', 7.0),
    ('10 4 -', 6.0),
    ('3 4 *', 12.0),
    ('9 2 /', 4.5),
    ('9 2 ^', 81.0),
    ('9 4 %', 1.0),
    ('_9 4 %', -1.0),
])
def test_arithmetic(machine, source, expected):
    assert top(machine, source) == Number(expected)


def test_mod_by_zero(machine):
    with raises(DivideByZero):
        machine.run('1 0 %')


def test_arithmetic_needs_numbers(machine):
    with raises(InvalidArgumentType, match='wanted a number'):
        machine.run('"a" 1 +')
    assert list(machine.stack) == [Str('a'), Number(1.0)]


def test_stack_operations(machine):
    machine.run('1 2 3 @')
    assert [t.value for t in machine.stack] == [2.0, 3.0, 1.0]
    machine.run('$')
    assert [t.value for t in machine.stack] == [2.0, 1.0, 3.0]
    machine.run(', :')
    assert [t.value for t in machine.stack] == [2.0, 1.0, 1.0]
    machine.run('[size]')
    assert machine.stack[-1] == Number(3.0)


def test_get(machine):
    machine.run('10 20 30 2 ø')
    assert [t.value for t in machine.stack] == [10.0, 20.0, 30.0, 20.0]


def test_get_needs_number(machine):
    with raises(InvalidArgumentType):
        machine.run('1 "x" ø')


def test_set(machine):
    machine.run('1 2 3 "new" 2 [set]')
    assert list(machine.stack) == [Str('new'), Number(2.0), Number(3.0)]


def test_if(machine):
    assert top(machine, 'T {"yes"} {"no"} ?') == Str('yes')
    assert top(machine, '0 {"yes"} {"no"} ?') == Str('no')


def test_if_needs_macros(machine):
    with raises(InvalidArgumentType, match='wanted a macro'):
        machine.run('T 1 2 ?')


def test_times(machine):
    machine.run('1 {2 *} 10 [times]')
    assert machine.stack[-1] == Number(1024.0)


def test_times_needs_whole_count(machine):
    with raises(Other, match='not a non-negative integer'):
        machine.run('{} 1.5 [times]')


def test_while(machine):
    machine.run('0 {: 5 <} {1 +} [while]')
    assert list(machine.stack) == [Number(5.0)]


def test_run_needs_callable(machine):
    with raises(InvalidArgumentType, match='macro/function'):
        machine.run('5 ;')
    assert list(machine.stack) == [Number(5.0)]


@mark.parametrize('source, expected', [
    ('T F &', False),
    ('T "x" &', True),
    ('F 0 |', False),
    ('F 1 |', True),
    ('0 !', True),
    ('1 1 =', True),
    ('"1" 1 =', False),
    ('1 2 <', True),
    ('1 2 >', False),
])
def test_logic(machine, source, expected):
    assert top(machine, source) == Bool(expected)


def test_strings(machine):
    assert top(machine, '"foo" "bar" [concat]') == Str('foobar')
    assert top(machine, '"four" [len]') == Number(4.0)
    assert top(machine, '2.5 [str]') == Str('2.5')
    assert top(machine, 'T [str]') == Str('(true)')
    assert top(machine, '"_12" [num]') == Number(-12.0)


def test_num_rejects_non_numbers(machine):
    with raises(InvalidArgumentType):
        machine.run('"1 2" [num]')


@mark.parametrize('source, expected', [
    ('5 [neg]', -5.0),
    ('_5 [abs]', 5.0),
    ('16 [sqrt]', 4.0),
    ('_27 [cbrt]', -3.0),
    ('2.5 [floor]', 2.0),
    ('2.5 [ceil]', 3.0),
    ('0 [cos]', 1.0),
    ('100 [log]', 2.0),
    ('1 [exp] [ln]', 1.0),
    ('3 8 [min]', 3.0),
    ('3 8 [max]', 8.0),
    ('5 [fact]', 120.0),
    ('12 18 [gcd]', 6.0),
    ('4 6 [lcm]', 12.0),
    ('2 3 [ack]', 9.0),
    ('"MCMXCIV" [roman]', 1994.0),
])
def test_extended(machine, source, expected):
    assert top(machine, source).value == approx(expected)


def test_constants(machine):
    assert top(machine, '[pi]').value == approx(math.pi)
    assert top(machine, '[e]').value == approx(math.e)


def test_prime(machine):
    assert [n for n in range(30) if stdlib.is_prime(n)] == \
        [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]
    assert top(machine, '97 [prime]') == Bool(True)


def test_gcd_agrees_with_math():
    for u in range(40):
        for v in range(40):
            assert stdlib.gcd(u, v) == math.gcd(u, v)


def test_math_domain_error(machine):
    with raises(Other, match='sqrt'):
        machine.run('_1 [sqrt]')
    assert list(machine.stack) == [Number(-1.0)]


def test_bad_roman_numeral(machine):
    with raises(Other, match=r"invalid roman numeral \('z'\)"):
        machine.run('"xiz" [roman]')


def test_empty_stack(machine):
    with raises(NotEnoughArguments):
        machine.run('[sqrt]')


def test_library_operators_are_single_characters():
    for operator, name, func in stdlib.standard() + stdlib.extended():
        assert operator is None or len(operator) == 1
        assert callable(func)


def test_integer_result_too_large(machine):
    with raises(Other, match='lcm'):
        machine.run('(1e308) (9e307) [lcm]')
    assert list(machine.stack) == [Number(1e308), Number(9e307)]


@mark.parametrize('source, expected', [
    ('10 400 ^', math.inf),
    ('_10 400 ^', math.inf),
    ('_10 401 ^', -math.inf),
])
def test_pow_overflows_to_infinity(machine, source, expected):
    assert top(machine, source) == Number(expected)


def test_pow_domain_error(machine):
    with raises(Other, match='Cannot raise to that power'):
        machine.run('_8 0.5 ^')
    assert list(machine.stack) == [Number(-8.0), Number(0.5)]
