from pytest import Item, fixture

from ctrcalc.interpreter import Interpreter


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Excessive in most cases.

    Use with pytest -rP -o enable_assertion_pass_hook=true.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!)
    print('actual', item.name + ':' + str(lineno),
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def calc():
    '''
    Fresh interpreter: empty stack, no aliases.
    '''
    return Interpreter()


@fixture
def run(calc):
    '''
    Run each line in turn, returning the last Status.
    '''
    def run(*lines):
        status = None
        for line in lines:
            status = calc.execute(line)
        return status
    return run
