from enum import Enum

import logging

from .util import ESCAPE, CalcError, UnknownToken, RecursionLimit
from .lexer import Lexer
from .machine import Machine, format_number


logger = logging.getLogger(__name__)


class Status(Enum):
    '''
    Outcome of running a line.
    '''
    EXECUTED = 0
    ERROR = 1
    # Line ended with a continuation; waiting for the next one.
    INCOMPLETE = 2
    EXIT = 3


class Interpreter:
    '''
    Line interpreter driving a stack machine.

    Owns the machine, the alias table and the continuation buffer. Each
    line runs statement by statement; aliases expand into their bodies,
    groups and dereferences recurse into what they enclose, until only
    numbers and commands remain.
    '''

    ERROR_INDICATOR = 'ERR!'
    # Deep enough for any sane alias nesting, shallow enough for Python's
    # own recursion limit.
    DEFAULT_MAX_DEPTH = 200

    def __init__(self, machine=None, lexer=None, output=None,
                 max_depth=DEFAULT_MAX_DEPTH):
        '''
        Create interpreter with no aliases.

        :param output: Stream for alias listings and error indicators.
                       Defaults to whatever sys.stdout is at the time.
        '''
        self.machine = machine if machine is not None else Machine()
        self.lexer = lexer if lexer is not None else Lexer()
        self.output = output
        self.max_depth = max_depth
        self.aliases = dict()
        self.pending = ''
        self.error = None

    @property
    def stack(self):
        return self.machine.stack

    def execute(self, line):
        '''
        Run one line of input.

        Joins it onto any previous line that ended in a continuation.
        '''
        text = self.lexer.normalize(self.pending + line)
        self.pending = ''
        self.error = None
        if not text:
            return Status.EXECUTED
        if self.lexer.continues(text):
            self.pending = text[:-1]
            logger.debug('continuing %r', self.pending)
            return Status.INCOMPLETE
        return self._evaluate(text, 0)

    def _evaluate(self, text, depth):
        '''
        Run normalized text, retrying it as a command if it fails.

        Statements run one after another at the same depth; only what they
        nest into goes deeper.
        '''
        if text and depth > self.max_depth:
            return self._fail(RecursionLimit(
                'Nested deeper than {} evaluating {}'.format(self.max_depth,
                                                              text)))
        while text:
            try:
                status, text = self._reduce(text, depth)
            except CalcError as e:
                if text.startswith(ESCAPE):
                    return self._fail(e)
                logger.debug('%s; retrying %r as a command', e, text)
                text = self.lexer.escape(text)
                continue
            if status is not Status.EXECUTED:
                return status
        return Status.EXECUTED

    def _fail(self, error):
        logger.debug('failed: %s', error)
        self.error = error
        self._print(type(self).ERROR_INDICATOR)
        return Status.ERROR

    def _print(self, *args):
        print(*args, file=self.output)

    def _reduce(self, text, depth):
        '''
        Classify text and run its first statement.

        Returns the Status and the statements left to run. Raises CalcError
        if text can't be run at this level. Failures of sub-expressions come
        back as their Status instead, and are not retried here.
        '''
        kind, groups = self.lexer.lex(text)
        if kind == 'assignment':
            return self._assign(groups['name'], groups['value'], depth)
        if text in self.aliases:
            logger.debug('expanding %s', text)
            return self._evaluate(self.aliases[text], depth + 1), ''
        if kind == 'statements':
            return self._evaluate(groups['head'], depth), groups['tail']
        if kind == 'shorthand':
            self.machine.push(self.lexer.parse_number(groups['left']),
                              self.lexer.parse_number(groups['right']))
            return self._evaluate(groups['op'], depth), ''
        if kind == 'index':
            status = self._evaluate(groups['expr'], depth + 1)
            if status is Status.EXECUTED:
                self.machine.apply(self.machine.pick)
            return status, ''
        if kind == 'number':
            self.machine.push(self.lexer.parse_number(text))
            return Status.EXECUTED, ''
        return self._command(text), ''

    def _assign(self, name, value, depth):
        '''
        Define, redefine, or delete (empty value) alias name.

        (body) stores body as is, {body} runs it and stores the number it
        leaves on top. Either may be followed by ;statements, which are
        returned with the Status.
        '''
        grouped = self.lexer.parenthetical(value)
        if grouped is None:
            self._define(name, value)
            return Status.EXECUTED, ''
        opening, body, rest = grouped
        if opening == '{':
            status = self._evaluate(body, depth + 1)
            if status is not Status.EXECUTED:
                return status, ''
            body = format_number(self.machine.pop())
        self._define(name, body)
        return Status.EXECUTED, rest

    def _define(self, name, body):
        if body:
            logger.debug('defining %s=%s', name, body)
            self.aliases[name] = body
        else:
            logger.debug('deleting %s', name)
            self.aliases.pop(name, None)

    def request_exit(self):
        return Status.EXIT

    def list_aliases(self):
        '''
        Print every alias definition, by name.
        '''
        for name, body in sorted(self.aliases.items()):
            self._print('{}={}'.format(name, body))
        return Status.EXECUTED

    # Commands needing more than the machine, bound to self on lookup.
    COMMANDS = {
        ESCAPE + 'exit': request_exit,
        ESCAPE + 'aliases': list_aliases,
    }

    def _command(self, token):
        command = type(self).COMMANDS.get(token)
        if command is not None:
            return command(self)
        f = self.machine.lookup(token)
        if f is None:
            raise UnknownToken('Unknown command {}'.format(token))
        self.machine.apply(f)
        return Status.EXECUTED
