from os import isatty
from sys import stdin, stdout, stderr, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL

import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from .util import ConfigError
from .machine import Machine
from .lexer import Lexer
from .interpreter import Interpreter, Status
from . import config


logger = logging.getLogger(__name__)


class InteractiveInput:
    '''
    Prompting line editor, iterated over like stdin.

    Set continuing while the interpreter waits for the rest of a line; the
    prompt is blanked out then.
    '''
    def __init__(self, prompt):
        self.prompt = prompt
        self.continuing = False

    def message(self):
        if self.continuing:
            return ' ' * len(self.prompt)
        return self.prompt

    def __iter__(self):
        try:
            session = PromptSession(vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    # Aliases aren't persisted; neither is
                                    # what defined them.
                                    history=InMemoryHistory(),
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Debatable. Interferes with X11 selection.
                                    mouse_support=True,
                                    erase_when_done=False)
            while True:
                yield session.prompt(self.message)
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the calculator.
    '''

    DEFAULT_PROMPT = '> '

    def dumper(self):
        '''
        Dump the lexeme kind and groups of every line.
        '''
        lexer = Lexer()
        print('<kind>\t<repr(line)>\t<groups>')
        for line in self.args.expressions:
            text = lexer.normalize(line)
            if not text:
                continue
            kind, groups = lexer.lex(text)
            print(kind, repr(text), groups, sep='\t')

    def executor(self):
        '''
        Run interpreter over config file, then input lines.
        '''
        machine = Machine(precision=self.args.precision)
        interpreter = Interpreter(machine=machine)
        if self.run_config(interpreter) is Status.EXIT:
            return
        self.printstack(interpreter)
        for line in self.args.expressions:
            status = interpreter.execute(line)
            if status is Status.EXIT:
                break
            if status is Status.ERROR and self.args.verbose:
                print(interpreter.error.args[0], file=stderr)
            if self._interactive():
                self.args.expressions.continuing = \
                    status is Status.INCOMPLETE
            if status is not Status.INCOMPLETE:
                self.printstack(interpreter)

    def printstack(self, interpreter):
        '''
        Print the stack, oldest first, unless empty.
        '''
        if interpreter.stack:
            print(interpreter.machine.render())

    def run_config(self, interpreter):
        '''
        Run the config file, if any, through the interpreter.
        '''
        if self.args.no_config:
            return Status.EXECUTED
        filename = self.args.config or config.default_config_file()
        if filename is None:
            print('Could not find config directory! '
                  'Config file will not be loaded!', file=stderr)
            return Status.EXECUTED
        try:
            status = config.run_config(interpreter, filename)
        except ConfigError as e:
            print(e.args[0], file=stderr)
            return Status.EXECUTED
        if status is Status.ERROR:
            print('Error in config file! File execution aborted!')
        elif status is Status.EXIT:
            print('Config file requested exit.')
        return status

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        lexer = Lexer()
        print(lexer.LEXEME)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT)
        else:
            return stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(description='RPN calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        self.argument_parser.add_argument('-k', '--precision',
                                          type=int,
                                          help='decimal places to show')
        config_groups = self.argument_parser.add_mutually_exclusive_group()
        config_groups.add_argument('-c', '--config',
                                   metavar='FILE',
                                   help='run FILE at startup instead of ' +
                                        config.CONFIG_FILE_NAME)
        config_groups.add_argument('-n', '--no-config',
                                   action='store_true')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    def _interactive(self):
        return isinstance(self.args.expressions, InteractiveInput)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(level=logging.DEBUG if self.args.verbose
                            else logging.WARNING,
                            format='%(name)s: %(message)s',
                            stream=stderr)
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except KeyboardInterrupt:
            exit(1)


def main():
    CLI().run()
