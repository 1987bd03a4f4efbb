"""
Verbum tokenizer (raw command line → tokens).

Scope
- Split one line of user input into the token sequence the dispatcher and the
  verbs consume. Used by Parser.parse() for string input and by Parser.shell().

Rules
- Leading whitespace before a token is skipped.
- The first character of a token picks its closing delimiter:
  • '"', "'" and '`' close on the same character; the token body starts after it.
  • anything else closes on whitespace; the token body starts on that character.
- An unterminated quote runs to the end of the line, whitespace and newlines included.
- Empty or blank input yields no tokens. A quoted empty string ("") yields "".
- There are no escapes: a quote inside an unquoted token is an ordinary character.

Contrast with shlex
- shlex.split raises on unbalanced quotes and understands backslashes; neither
  fits a line typed into an interactive prompt, hence this dedicated scanner.

Examples
    >>> list(tokenize("add 'b c' `d`"))
    ['add', 'b c', 'd']
    >>> list(tokenize('say "unterminated   tail'))
    ['say', 'unterminated   tail']
"""
QUOTES = frozenset("\"'`")


def tokenize(line, /):
    """
    Lazily yield the tokens of a raw command line.

    Parameters
    - line: str; the whole line as typed.

    Returns
    - Iterator[str] over the tokens, in order. The generator is a pure function
      of its input, so calling tokenize() again restarts the scan.

    Raises
    - TypeError: line is not a string.
    """
    if not isinstance(line, str):
        raise TypeError("tokenize() argument must be a string")
    return _scan(line)


def _scan(line):
    length = len(line)
    index = 0

    while True:
        # skip the gap before the next token
        while index < length and line[index].isspace():
            index += 1
        if index >= length:
            return

        if (opening := line[index]) in QUOTES:
            index += 1
            if index >= length:
                # a lone opening quote closes the line without a token
                return
            end = line.find(opening, index)
            if end < 0:
                yield line[index:]
                return
            yield line[index:end]
            index = end + 1
        else:
            end = index
            while end < length and not line[end].isspace():
                end += 1
            yield line[index:end]
            index = end


__all__ = (
    "tokenize",
)
