from collections import namedtuple
from functools import reduce
import operator

import regex

from .util import (ESCAPE, CONTINUATION, SEPARATOR, COMMENT, ASSIGN,
                   MalformedGrouping, UnknownToken)
from .machine import Machine


Lexeme = namedtuple('Lexeme', 'kind groups')


def extract_parenthetical(text, opening, closing):
    '''
    Split text starting with opening into what its matching closing encloses
    and what follows.

    Nested pairs are skipped over. Returns (expr, rest), or None if text
    doesn't start with opening or the closing is never matched.
    '''
    if not text.startswith(opening):
        return None
    depth = 0
    for i, c in enumerate(text):
        if c == opening:
            depth += 1
        elif c == closing:
            depth -= 1
        if depth == 0:
            return text[1:i], text[i + 1:]
    return None


class Lexer:
    '''
    Lexer for the calculator's line grammar.

    Works on whole lines: a normalized line is exactly one lexeme, whose
    groups hold the sub-expressions to recurse into. Holds no state.
    '''
    # Number, of any kind float() reads and format_number() writes.
    NUMBER = r'''
              [+-]?
              (?:
                  (?:
                      # 1, 1., 1.5, .5
                      \d+ (?: \. \d* )?
                      |
                      \. \d+
                  )
                  (?: [eE] [+-]? \d+ )?
                  |
                  (?i: inf (?: inity )? | nan )
              )
              '''

    assert not [operator
                for operator
                in Machine.OPERATORS
                if len(operator) != 1]
    OPERATOR = r'[' + r''.join(map(regex.escape, Machine.OPERATORS)) + r']'

    # name=value. Names don't hold statement separators, and don't look like
    # commands, so that the escape retry never turns a line into a
    # definition.
    ASSIGNMENT = r'''
                  (?<name>
                      [^{ESCAPE}{SEPARATOR}{ASSIGN}]
                      [^{SEPARATOR}{ASSIGN}]*
                  )
                  {ASSIGN}
                  (?<value> .* )
                  '''.format(ESCAPE=regex.escape(ESCAPE),
                             SEPARATOR=regex.escape(SEPARATOR),
                             ASSIGN=regex.escape(ASSIGN))
    # Split on the first separator only; the tail recurses.
    STATEMENTS = r'''
                  (?<head> [^{SEPARATOR}]* )
                  {SEPARATOR}
                  (?<tail> .* )
                  '''.format(SEPARATOR=regex.escape(SEPARATOR))
    # 2+3, 1e3*-2
    SHORTHAND = r'''
                 (?<left> {NUMBER} )
                 (?<op> {OPERATOR} )
                 (?<right> {NUMBER} )
                 '''.format(NUMBER=NUMBER, OPERATOR=OPERATOR)
    INDEX = r'\[ (?<expr> .* ) \]'
    # Command or alias name
    WORD = r'.+'

    # Order matters: first full match wins.
    KINDS = ('assignment', 'statements', 'shorthand', 'index', 'number',
             'word')
    LEXEME = r'(?<assignment>' + ASSIGNMENT + r')|' \
             r'(?<statements>' + STATEMENTS + r')|' \
             r'(?<shorthand>' + SHORTHAND + r')|' \
             r'(?<index>' + INDEX + r')|' \
             r'(?<number>' + NUMBER + r')|' \
             r'(?<word>' + WORD + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.DOTALL,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    TRAILING_COMMENT = regex.escape(COMMENT) + r'.*'
    SPACE = r'\s+'

    # Assignment bodies that are extracted, rather than taken verbatim.
    GROUPS = {
        '(': ')',
        '{': '}',
    }

    def normalize(self, line):
        '''
        Strip comment, and all whitespace, from line.
        '''
        line = regex.sub(type(self).TRAILING_COMMENT, '', line,
                         flags=regex.DOTALL)
        return regex.sub(type(self).SPACE, '', line)

    def continues(self, text):
        '''
        Return True if (normalized) text is continued on the next line.
        '''
        return text.endswith(CONTINUATION)

    def lex(self, text):
        '''
        Classify a normalized, non-empty line.
        '''
        match = regex.fullmatch(type(self).LEXEME, text,
                                flags=type(self).FLAGS)
        # WORD matches anything non-empty
        if match is None:
            raise UnknownToken("Couldn't lex {0}".format(repr(text)))
        kind = next(kind
                    for kind
                    in type(self).KINDS
                    if match.group(kind) is not None)
        return Lexeme(kind, self.matchedgroups(match))

    def matchedgroups(self, match):
        '''
        Return sub-expression groups of the lexeme.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value is not None and key not in type(self).KINDS}

    def parse_number(self, text):
        '''
        Convert numeric literal to float.
        '''
        if regex.fullmatch(type(self).NUMBER, text,
                           flags=type(self).FLAGS) is None:
            raise UnknownToken('Not a number or command: {0}'.format(text))
        return float(text)

    def parenthetical(self, value):
        '''
        Extract grouped assignment body, if value starts a group.

        Returns (opening, expr, rest), rest being the statements after the
        group, or None if value isn't grouped.
        '''
        opening = value[:1]
        closing = type(self).GROUPS.get(opening)
        if closing is None:
            return None
        extracted = extract_parenthetical(value, opening, closing)
        if extracted is None:
            raise MalformedGrouping('Unbalanced {0}{1} in {2}'
                                    .format(opening, closing, value))
        expr, rest = extracted
        if rest and not rest.startswith(SEPARATOR):
            raise MalformedGrouping('Expected {0} after {1}, got {2}'
                                    .format(SEPARATOR, closing, rest))
        return opening, expr, rest[len(SEPARATOR):]

    def escape(self, text):
        '''
        Prefix text with the command escape character.
        '''
        return ESCAPE + text
