'''
User config file: a script of calculator lines run at startup.
'''

from os import environ, path

import logging
import os

from .util import ConfigError, wrap_user_errors
from .interpreter import Status


logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = '.calcrc'
CONFIG_HEADER = '# CTRCalculator Config\n'


def user_config_dir():
    '''
    Return the directory holding the config file, or None.

    The user profile on Windows; elsewhere $XDG_CONFIG_HOME, $HOME, then the
    home directory in the password database.
    '''
    if os.name == 'nt':
        home = path.expanduser('~')
        return None if home == '~' else home
    for variable in 'XDG_CONFIG_HOME', 'HOME':
        directory = environ.get(variable)
        if directory:
            return directory
    import pwd
    try:
        return pwd.getpwuid(os.getuid()).pw_dir
    except KeyError:
        return None


def default_config_file():
    directory = user_config_dir()
    if directory is None:
        return None
    return path.join(directory, CONFIG_FILE_NAME)


@wrap_user_errors('Could not create config file {0}', ConfigError)
def create_config(filename):
    with open(filename, 'x') as fp:
        fp.write(CONFIG_HEADER)


@wrap_user_errors('Could not read config file {0}', ConfigError)
def read_config(filename):
    with open(filename) as fp:
        return fp.read().splitlines()


def run_config(interpreter, filename):
    '''
    Run every line of the config file, creating it if missing.

    Stops at the first line that fails or asks to exit, returning its
    Status.
    '''
    if not path.exists(filename):
        logger.info('creating %s', filename)
        create_config(filename)
        return Status.EXECUTED
    for number, line in enumerate(read_config(filename), 1):
        status = interpreter.execute(line)
        if status in (Status.ERROR, Status.EXIT):
            logger.debug('%s:%d: %s', filename, number, status.name)
            return status
    return Status.EXECUTED
