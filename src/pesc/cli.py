from argparse import ArgumentParser, REMAINDER, OPTIONAL
from importlib import metadata
from os import environ, path
from time import perf_counter
import logging
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.history import FileHistory

from .util import PescError
from .lexer import Lexer
from .machine import Machine
from .output import OutputMode
from . import stdlib


logger = logging.getLogger(__name__)


class InteractiveInput:
    '''
    Prompting input, yielding one complete chunk of source at a time.

    Keeps asking for more lines while a delimiter is left open.
    '''
    def __init__(self, prompt, continuation, lexer, history=None):
        self.prompt = prompt
        self.continuation = continuation
        self.lexer = lexer
        self.history = history

    def __iter__(self):
        session = PromptSession(message=self.prompt,
                                vi_mode=True,
                                enable_suspend=True,
                                enable_open_in_editor=True,
                                history=self.history,
                                auto_suggest=AutoSuggestFromHistory(),
                                prompt_continuation=self.continuation,
                                erase_when_done=False)
        lines = []
        while True:
            try:
                lines.append(session.prompt(self.continuation if lines
                                            else self.prompt))
            except KeyboardInterrupt:
                lines = []
                print('Use Ctrl-D to quit.')
                continue
            except EOFError:
                return
            chunk = '\n'.join(lines)
            if self.lexer.is_incomplete(chunk):
                continue
            lines = []
            yield chunk


class CLI:
    '''
    Command line interface to the pesc interpreter.
    '''

    DEFAULT_PROMPT = 'pesc> '
    CONTINUATION_PROMPT = '... '
    HISTORY_FILE = '~/.pesc_history'

    def dumper(self):
        '''
        Dump all tokens, with their kind.
        '''
        machine = self._machine()
        print('<kind>\t<token>')
        for chunk in self._sources():
            try:
                tokens = machine.lexer.tokenize(chunk)
            except PescError as e:
                self._report(e)
                return 1
            for token in tokens:
                print(type(token).__name__, token, sep='\t')
        return 0

    def executor(self):
        '''
        Run machine, on a file, expressions, or standard input.
        '''
        machine = self._machine()
        if self.args.file is not None:
            with open(self.args.file) as fp:
                return self._batch(machine, fp.read())
        if self._interactive():
            return self._session(machine)
        if isinstance(self.args.expressions, list):
            status = 0
            for expression in self.args.expressions:
                try:
                    machine.run(expression)
                # Abort entire rest of expression, keep going with the next
                except PescError as e:
                    self._report(e)
                    status = 1
            self.output.format_stack(machine.top_first())
            return status
        return self._batch(machine, sys.stdin.read())

    def _machine(self):
        return Machine(stdlib.standard() + stdlib.extended())

    def _batch(self, machine, source):
        '''
        Run source as a whole, showing the stack at failure if it fails.
        '''
        start = perf_counter()
        try:
            machine.run(source)
        except PescError as e:
            self._report(e, prefix='pesc: error:')
            if e.stack is not None:
                self.output.format_stack(reversed(e.stack))
            return 1
        self.output.format_stack(machine.top_first())
        if self.args.verbose:
            self.output.format_elapsed(perf_counter() - start)
        return 0

    def _session(self, machine):
        '''
        Read, evaluate, print, until end of input. Errors don't end it.
        '''
        for chunk in self.args.expressions:
            start = perf_counter()
            try:
                machine.run(chunk)
            except PescError as e:
                self._report(e)
                if e.stack is not None:
                    print('problematic stack:')
                    self.output.format_stack(reversed(e.stack))
            self.output.format_stack(machine.top_first())
            if self.args.verbose:
                print()
                self.output.format_elapsed(perf_counter() - start)
        return 0

    def _sources(self):
        if self.args.file is not None:
            with open(self.args.file) as fp:
                return [fp.read()]
        if isinstance(self.args.expressions, list):
            return self.args.expressions
        return self.args.expressions or [sys.stdin.read()]

    def _report(self, error, prefix='error:'):
        if error.position is not None:
            logger.debug('gave up at character %d', error.position)
        if error.token is not None:
            logger.debug('failed evaluating %s', error.token)
        print(prefix, error, file=sys.stderr)

    def _prompting_input(self):
        '''
        Return prompting input, if either:

        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           sys.stdin.isatty() and sys.stdout.isatty():
            history = environ.get('PESC_HISTORY', self.HISTORY_FILE)
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    continuation=self.CONTINUATION_PROMPT,
                                    lexer=Lexer(),
                                    history=FileHistory(
                                        path.expanduser(history)))
        return None

    def version(self):
        try:
            print('pesc', metadata.version('pesc'))
        except metadata.PackageNotFoundError:
            print('pesc (not installed)')
        return 0

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(
            description='pesc, a stack based calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true',
                                          help='log debugging information '
                                               'and show elapsed time')
        self.argument_parser.add_argument('-q', '--quiet',
                                          action='store_true',
                                          help='reduce output')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        int_nonint_groups.add_argument('file', nargs=OPTIONAL,
                                       help='file to run')
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-D', '--dump', self.dumper),
                                      ('-V', '--version', self.version)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor)

    def _interactive(self):
        return isinstance(self.args.expressions, InteractiveInput)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.

        Return exit status.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(format='pesc: %(levelname)s: %(message)s')
        logging.getLogger('pesc').setLevel(logging.DEBUG if self.args.verbose
                                           else logging.WARNING)
        self.output = OutputMode.QUIET if self.args.quiet \
            else OutputMode.auto()
        if self.args.action != self.version and \
           self.args.expressions is None and self.args.file is None:
            self.args.expressions = self._prompting_input()
        try:
            return self.args.action()
        except KeyboardInterrupt:
            return 1


def main():
    sys.exit(CLI().run())
