'''
RPN calculator with aliases.

Works a line at a time. Numbers go on a stack, operators and commands work
on its top:

    > 3;4;+
    7
    > 2;\\pow
    49

Lines can be split into statements with ;, continued with a trailing \\, and
commented with #. Whitespace is ignored entirely.

Aliases name reusable lines, expanded when a line is exactly their name:

    name=body     body verbatim
    name=(body)   body verbatim, may hold ; and be followed by ;statements
    name={body}   run body now; store the number it leaves on top
    name=         forget name

Startup runs the lines of ~/.calcrc ($XDG_CONFIG_HOME/.calcrc if set), so
that is where aliases live between sessions.
'''

from .cli import CLI
from .lexer import Lexer
from .machine import Machine
from .interpreter import Interpreter, Status


__all__ = 'Machine', 'Lexer', 'Interpreter', 'Status', 'CLI'
