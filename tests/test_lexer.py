'''
Calculator lexer tests
'''

import regex

from ctrcalc.util import MalformedGrouping, UnknownToken
from ctrcalc.lexer import Lexer, extract_parenthetical

from pytest import raises, mark


def test_normalize_strips_whitespace_and_comment():
    l = Lexer()
    assert l.normalize(' 3 ; 4\t+ # add them\n') == '3;4+'
    assert l.normalize('# only a comment') == ''
    assert l.normalize('1 2') == '12'


def test_continues():
    l = Lexer()
    assert l.continues('3;\\')
    assert not l.continues('\\swap')


@mark.parametrize('text, kind', [
    ('pi=(3.14159)', 'assignment'),
    ('x=', 'assignment'),
    ('3;4;+', 'statements'),
    ('1;a=2', 'statements'),
    ('\\x=3', 'word'),
    ('2+3', 'shorthand'),
    ('1e3*-2', 'shorthand'),
    ('[-1]', 'index'),
    ('-3.5e-2', 'number'),
    ('inf', 'number'),
    ('1/', 'word'),
    ('!!', 'word'),
    ('\\sqrt', 'word'),
    ('1-2-3', 'word'),
])
def test_kinds(text, kind):
    assert Lexer().lex(text).kind == kind


def test_assignment_groups():
    l = Lexer()
    assert l.lex('c={1;1;+};c').groups == {'name': 'c',
                                          'value': '{1;1;+};c'}
    assert l.lex('x=').groups == {'name': 'x', 'value': ''}
    # First = splits
    assert l.lex('a=b=c').groups == {'name': 'a', 'value': 'b=c'}


def test_statements_split_on_first_separator():
    l = Lexer()
    assert l.lex(';4;+').groups == {'head': '', 'tail': '4;+'}
    assert l.lex('3;4;+').groups == {'head': '3', 'tail': '4;+'}


def test_shorthand_groups():
    assert Lexer().lex('2.5/-4').groups == {'left': '2.5',
                                            'op': '/',
                                            'right': '-4'}


def test_index_groups():
    assert Lexer().lex('[[0]]').groups == {'expr': '[0]'}


@mark.parametrize('text, number', [
    ('3', 3.0),
    ('-3.', -3.0),
    ('.5', 0.5),
    ('+1e3', 1000.0),
    ('2E-2', 0.02),
    ('-Infinity', float('-inf')),
])
def test_parse_number(text, number):
    assert Lexer().parse_number(text) == number


def test_parse_number_rejects_leftovers():
    l = Lexer()
    with raises(UnknownToken):
        l.parse_number('3x')
    with raises(UnknownToken):
        l.parse_number('1_000')


def test_extract_parenthetical():
    assert extract_parenthetical('(a(b)c)d', '(', ')') == ('a(b)c', 'd')
    assert extract_parenthetical('()', '(', ')') == ('', '')
    assert extract_parenthetical('{1;{2}}', '{', '}') == ('1;{2}', '')


def test_extract_parenthetical_fails():
    assert extract_parenthetical('a(b)', '(', ')') is None
    assert extract_parenthetical('((a)', '(', ')') is None


def test_parenthetical():
    l = Lexer()
    assert l.parenthetical('3') is None
    assert l.parenthetical('(1;2)') == ('(', '1;2', '')
    assert l.parenthetical('{1;1;+};c;d') == ('{', '1;1;+', 'c;d')


def test_parenthetical_malformed():
    l = Lexer()
    with raises(MalformedGrouping, match=regex.escape('Unbalanced ()')):
        l.parenthetical('(1;2')
    with raises(MalformedGrouping, match='Expected ;'):
        l.parenthetical('(1)2')


def test_escape():
    l = Lexer()
    assert l.escape('sqrt') == '\\sqrt'
    assert l.lex(l.escape('x=1')).kind == 'word'
