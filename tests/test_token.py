'''
Token rendering and equality, and error messages
'''

from pesc.token import Str, Number, Func, Macro, Symbol, Bool
from pesc.util import (PescError, Other, EmptyLiteral, InvalidBoolean,
                       wrap_user_errors)

from pytest import raises, mark


@mark.parametrize('token, text', [
    (Str('abc'), '"abc"'),
    (Str('say "hi"'), r'"say \"hi\""'),
    (Number(7.0), '7'),
    (Number(-3), '-3'),
    (Number(0.5), '0.5'),
    (Number(1e21), '1000000000000000000000'),
    (Number(float('inf')), 'inf'),
    (Func('sqrt'), '<fn sqrt>'),
    (Symbol('+'), "<sym '+'>"),
    (Bool(True), '(true)'),
    (Bool(False), '(false)'),
])
def test_rendering(token, text):
    assert str(token) == text


def test_macros_render_opaquely():
    macro = Macro([Number(1.0), Str('secret')])
    assert str(macro).startswith('<mac 0x')
    assert 'secret' not in str(macro)


def test_structural_equality():
    assert Str('1') != Func('1')
    assert Symbol('a') != Str('a')
    assert Number(1) == Number(1.0)
    assert Macro([Symbol('a')]) == Macro((Symbol('a'),))
    assert Macro([Number(1.0)]) != Macro([Number(2.0)])
    assert len({Str('x'), Str('x'), Func('x')}) == 2


def test_error_diagnostics_default_to_none():
    error = EmptyLiteral()
    assert (error.position, error.token, error.stack) == (None, None, None)
    assert isinstance(error, PescError)


def test_invalid_boolean_message():
    assert str(InvalidBoolean(Func('f'))) == \
        "I can't make a boolean out of <fn f>."


def test_wrap_user_errors():
    @wrap_user_errors('broken: {}')
    def broken():
        raise ValueError('badly')

    with raises(Other, match='broken: badly'):
        broken()


def test_wrap_user_errors_passes_pesc_errors():
    @wrap_user_errors('broken: {}')
    def broken():
        raise EmptyLiteral()

    with raises(EmptyLiteral):
        broken()
