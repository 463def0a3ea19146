from functools import wraps


# Grammar characters
ESCAPE = '\\'
CONTINUATION = '\\'
SEPARATOR = ';'
COMMENT = '#'
ASSIGN = '='


class CalcError(Exception):
    pass


class StackUnderflow(CalcError):
    pass


class IndexOutOfRange(StackUnderflow):
    pass


class MalformedGrouping(CalcError):
    pass


class UnknownToken(CalcError):
    pass


class RecursionLimit(CalcError):
    pass


class ConfigError(CalcError):
    pass


def wrap_user_errors(fmt, error=CalcError):
    '''
    Decorator that converts stray exceptions to calculator errors.

    Passes through CalcErrors. The message is fmt formatted with the call's
    arguments; the original exception rides along as the second argument.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except CalcError:
                raise
            except Exception as e:
                raise error(fmt.format(*args, **kwargs), e)
        return wrapper
    return decorator
