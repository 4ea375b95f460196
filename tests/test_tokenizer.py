import pytest

from Engine.tokenizer import tokenize


@pytest.mark.parametrize("line, expected", [
    ("echo  a   b", ["echo", "a", "b"]),
    ("echo 'a b' c", ["echo", "a b", "c"]),
    ('echo "a\\"b"', ["echo", 'a"b']),
    ("echo a'b''c'd", ["echo", "abcd"]),
    ("echo 'ab''cd'", ["echo", "abcd"]),
])
def test_documented_examples(line, expected):
    assert tokenize(line) == expected


def test_blank_lines_give_no_tokens():
    assert tokenize("") == []
    assert tokenize("    ") == []


def test_leading_and_trailing_spaces_are_ignored():
    assert tokenize("   ls   -l   ") == ["ls", "-l"]


def test_backslash_escapes_space_outside_quotes():
    assert tokenize("cat my\\ file.txt") == ["cat", "my file.txt"]


def test_backslash_makes_any_character_literal():
    assert tokenize("echo \\'quoted\\' \\\\") == ["echo", "'quoted'", "\\"]


def test_trailing_backslash_is_dropped():
    assert tokenize("echo abc\\") == ["echo", "abc"]


def test_single_quotes_keep_backslashes():
    assert tokenize("echo 'a\\nb \\\\'") == ["echo", "a\\nb \\\\"]


def test_double_quotes_collapse_only_four_escapes():
    assert tokenize('echo "a\\\\b" "\\$HOME" "\\"x\\""') == ["echo", "a\\b", "$HOME", '"x"']
    assert tokenize('echo "a\\nb"') == ["echo", "a\\nb"]
    assert tokenize('echo "line\\\nbreak"') == ["echo", "line\nbreak"]


def test_double_quotes_keep_single_quotes():
    assert tokenize("echo \"it's\"") == ["echo", "it's"]


def test_double_quoted_span_continues_the_token():
    assert tokenize("echo \"a\"'b'c") == ["echo", "ab", "c"]
    assert tokenize('echo "a"b') == ["echo", "ab"]


def test_closing_single_quote_ends_the_token():
    assert tokenize("echo 'ab'cd") == ["echo", "ab", "cd"]
    assert tokenize("echo x'y'z") == ["echo", "xy", "z"]


def test_doubled_single_quote_keeps_the_token_going():
    assert tokenize("echo 'a b''c d'") == ["echo", "a bc", "d"]


def test_empty_quotes_make_an_empty_argument():
    assert tokenize("echo '' x") == ["echo", "", "x"]


def test_unterminated_quotes_run_to_end_of_line():
    assert tokenize("echo 'a b c") == ["echo", "a b c"]
    assert tokenize('echo "a  b') == ["echo", "a  b"]


def test_long_tokens_are_kept_by_default():
    word = "x" * 5000
    assert tokenize(f"echo {word}") == ["echo", word]


def test_max_length_truncates_silently():
    assert tokenize("echo abcdef 'ghijkl' ab", max_length=3) == ["ech", "abc", "ghi", "ab"]


def test_each_call_returns_a_new_list():
    first = tokenize("echo a")
    first.append("mutated")
    assert tokenize("echo a") == ["echo", "a"]
