from enum import Enum
from shutil import get_terminal_size
import sys

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText

from .token import Str, Number, Macro, Bool


# Columns of padding each item is right-aligned in
PADDING = 3
# Shown when the stack doesn't fit on one line
MORE = ' »'

GREY = 'ansibrightblack'
STYLES = {
    Str: 'ansicyan',
    Number: 'ansibrightwhite',
    Macro: 'underline',
    Bool: 'ansiyellow',
}


def _elapsed(seconds):
    '''
    Human scale duration: 1.25s, 3.40ms, 12.00µs.
    '''
    for unit, scale in ('s', 1), ('ms', 1e3):
        if seconds * scale >= 1:
            return '{:.2f}{}'.format(seconds * scale, unit)
    return '{:.2f}µs'.format(seconds * 1e6)


class OutputMode(Enum):
    '''
    How to show the stack: in colour on one line for a terminal, one item a
    line otherwise, and the same, quieter, when asked.
    '''
    HUMAN = 'human'
    SIMPLE = 'simple'
    QUIET = 'quiet'

    @classmethod
    def auto(cls):
        return cls.HUMAN if sys.stdout.isatty() else cls.SIMPLE

    def format_elapsed(self, seconds):
        if self is OutputMode.HUMAN:
            print_formatted_text(FormattedText([
                (GREY + ' italic', 'Done in {}.'.format(_elapsed(seconds))),
            ]))
        elif self is OutputMode.SIMPLE:
            print('elapsed:', _elapsed(seconds))

    def format_stack(self, items):
        '''
        Print items, top of the stack first.
        '''
        items = list(items)
        if self is not OutputMode.HUMAN:
            for item in items:
                print(item)
            return
        if not items:
            print_formatted_text(FormattedText([(GREY, '(empty stack)')]))
            return
        print_formatted_text(*self._cells(items), sep='\n')

    def _cells(self, items):
        '''
        Return formatted line of items and the line of positions under them.
        '''
        width = get_terminal_size().columns
        line = []
        positions = []
        used = 0
        for position, item in enumerate(items):
            text = '{:>{}}'.format(str(item), PADDING)
            cell = len(text) + 2
            if used + cell + 1 >= width:
                line.append(('', MORE))
                break
            style = STYLES.get(type(item), 'ansiwhite')
            if position == 0:
                style += ' bold'
            line.extend([(GREY, '['), (style, text), (GREY, ']')])
            positions.append((GREY, '{:>{}}'.format(position, cell)))
            used += cell
        return FormattedText(line), FormattedText(positions)
