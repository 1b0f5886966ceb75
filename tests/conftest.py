from pytest import Item, fixture

from pesc import stdlib
from pesc.lexer import Lexer
from pesc.machine import Machine


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Excessive in most cases.

    Use with pytest -rP, and enable_assertion_pass_hook set.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!
    print('actual', item.name + ':' + str(lineno),
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def lexer():
    return Lexer()


@fixture
def machine():
    '''
    Machine with both the standard and extended libraries loaded.
    '''
    return Machine(stdlib.standard() + stdlib.extended())


@fixture
def bare():
    '''
    Machine with nothing loaded.
    '''
    return Machine()
