from collections import deque
from functools import partial
from inspect import signature as getsignature, Parameter

import logging
import operator
import math

from .util import ESCAPE, StackUnderflow, IndexOutOfRange, wrap_user_errors


logger = logging.getLogger(__name__)

# Functions whose pole at zero is -inf rather than a domain error.
_LOGARITHMS = {math.log, math.log2, math.log10}
# Functions that overflow towards the sign of their argument.
_ODD = {math.sinh}


def _divide(dividend, divisor):
    try:
        return dividend / divisor
    except ZeroDivisionError:
        if dividend == 0 or math.isnan(dividend):
            return math.nan
        return math.copysign(math.inf, dividend) * math.copysign(1, divisor)


def _reciprocal(only):
    return _divide(1.0, only)


def _power(base, exponent):
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and exponent % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        # 0 to a negative power is a pole, anything else is out of domain.
        if base == 0:
            if exponent % 2 == 1:
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


def round_half_away(number):
    '''
    Round to the nearest integer, halves away from zero.

    Raises OverflowError/ValueError on infinities and NaN.
    '''
    return int(math.copysign(math.floor(abs(number) + 0.5), number))


def format_number(number):
    '''
    Text for a stack value that parses back to the same value.

    Integral values lose the trailing ".0", except -0.0, which would lose
    its sign.
    '''
    if number == 0 and math.copysign(1, number) < 0:
        return repr(number)
    if number.is_integer() and abs(number) < 2 ** 53:
        return str(int(number))
    return repr(number)


class Machine:
    '''
    Numeric stack machine.

    Holds a double-ended stack of floats, the right end being the top, and
    the tables of operations that run on it. Operations take their arguments
    off the top and push their result, if any.
    '''

    DEFAULT_PRECISION = None

    # FIXME: hacks around getsignature on builtins; _arity counts
    # positional-or-keyword parameters, and builtins' are positional-only.
    def _unary(f):
        '''
        Wrap 1-arg function, giving IEEE 754 results where math raises.
        '''
        def wrapped(only):
            try:
                return f(only)
            except OverflowError:
                if f in _ODD:
                    return math.copysign(math.inf, only)
                return math.inf
            except ValueError:
                if only == 0 and f in _LOGARITHMS:
                    return -math.inf
                if abs(only) == 1 and f is math.atanh:
                    return math.copysign(math.inf, only)
                return math.nan
        try:
            wrapped.__doc__ = f.__doc__
            wrapped.__name__ = f.__name__
        except AttributeError:
            pass
        return wrapped

    def _binary(f):
        '''
        Wrap 2-arg function. left was pushed before right.
        '''
        def wrapped(left, right):
            return f(left, right)
        try:
            wrapped.__doc__ = f.__doc__
            wrapped.__name__ = f.__name__
        except AttributeError:
            pass
        return wrapped

    # Also what the arithmetic shorthand (2+3) accepts.
    OPERATORS = {
        '+': _binary(operator.__add__),
        '-': _binary(operator.__sub__),
        '*': _binary(operator.__mul__),
        '/': _binary(_divide),
    }

    # Reached as \name
    MATH = {
        'sqrt': _unary(math.sqrt),
        'cbrt': _unary(math.cbrt),
        'sin': _unary(math.sin),
        'cos': _unary(math.cos),
        'tan': _unary(math.tan),
        'asin': _unary(math.asin),
        'acos': _unary(math.acos),
        'atan': _unary(math.atan),
        'sinh': _unary(math.sinh),
        'cosh': _unary(math.cosh),
        'tanh': _unary(math.tanh),
        'asinh': _unary(math.asinh),
        'acosh': _unary(math.acosh),
        'atanh': _unary(math.atanh),
        'log': _unary(math.log),
        'log2': _unary(math.log2),
        'log10': _unary(math.log10),
        'exp': _unary(math.exp),
    }

    def __init__(self, precision=DEFAULT_PRECISION):
        '''
        Create empty stack machine.

        :param precision: Decimal places to round to on output, or None.
        '''
        self.stack = deque()
        self.precision = precision

    def _arity(self, f):
        '''
        Return number of non-default positional arguments.
        '''
        signature = getsignature(f)
        parameters = signature.parameters.values()
        positionals = [parameter
                       for parameter
                       in parameters
                       if parameter.kind == Parameter.POSITIONAL_OR_KEYWORD and
                          parameter.default == Parameter.empty]
        return len(positionals)

    def lookup(self, token):
        '''
        Return the operation called token, ready to apply, or None.
        '''
        f = type(self).COMMANDS.get(token)
        # Bind non-instance methods to self.
        if f in type(self).FUNCTIONS.values():
            f = partial(f, self)
        return f

    def apply(self, f):
        '''
        Apply operation to stack, popping arguments as needed.

        Nothing is popped unless there are enough arguments.
        '''
        # If you don't reverse, you'll do 3-5 when you say 5 3 -.
        args = reversed(self._popstack(self._arity(f)))
        res = f(*args)
        if res is not None:
            self._pshstack(res)

    def _round(self, n):
        '''
        Round number to precision (on output) if machine set to round.
        '''
        if self.precision is None:
            return n
        else:
            return round(n, self.precision)

    def format(self, number):
        return format_number(self._round(number))

    def render(self):
        '''
        Return all elements on the stack, oldest first, space separated.
        '''
        return ' '.join(self.format(number) for number in self.stack)

    def _pshstack(self, *new):
        '''
        Push all elements onto stack, leftmost at the bottom.
        '''
        self.stack.extend(new)

    push = _pshstack

    def _popstack(self, n=1):
        '''
        Pop specified number of args from stack, topmost first.
        '''
        if len(self.stack) < n:
            raise StackUnderflow('Less than {} element(s) on stack'.format(n))
        return [self.stack.pop() for _ in range(n)]

    def pop(self):
        return self._popstack()[0]

    def clrstack(self):
        '''
        Clear everything from the stack.
        '''
        self.stack.clear()

    def dupstack(self):
        '''
        Duplicate element at top of stack.
        '''
        top = self._popstack()[0]
        self._pshstack(top)
        self._pshstack(top)

    def dropstack(self):
        '''
        Discard element at top of stack.
        '''
        self._popstack()

    def revstack(self):
        '''
        Swap two elements at top of stack.
        '''
        self._pshstack(*self._popstack(n=2))

    def rotstack(self):
        '''
        Rotate the entire stack, oldest element to the top.
        '''
        if len(self.stack) < 2:
            raise StackUnderflow('Less than 2 element(s) on stack')
        self.stack.rotate(-1)

    @wrap_user_errors('Cannot index stack with {1}', IndexOutOfRange)
    def pick(self, position):
        '''
        Return a copy of the element at position.

        0 is the oldest element, -1 the top.
        '''
        index = round_half_away(position)
        if index < 0:
            index += len(self.stack)
        if not 0 <= index < len(self.stack):
            raise IndexOutOfRange('No element {} in stack of {}'
                                  .format(format_number(position),
                                          len(self.stack)))
        logger.debug('picked element %d', index)
        return self.stack[index]

    # Stack manipulation, bound to the machine on lookup.
    FUNCTIONS = {
        ESCAPE + 'clear': clrstack,
        ESCAPE + 'swap': revstack,
        ESCAPE + 'roll': rotstack,
        ESCAPE + 'drop': dropstack,
        '!!': dupstack,
    }

    # Every command token the machine runs by itself.
    COMMANDS = dict(OPERATORS)
    COMMANDS[ESCAPE + 'pow'] = _binary(_power)
    COMMANDS['1/'] = _unary(_reciprocal)
    COMMANDS.update((ESCAPE + name, f) for name, f in MATH.items())
    COMMANDS.update(FUNCTIONS)
