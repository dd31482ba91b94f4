"""
Scanner Helpers
===============

Small character-level readers shared by the directive parser and the
macro expander. None of them know anything about macros; they only
understand delimiters, backslash escapes and balanced parentheses.
"""


def walk_to_end(text: str) -> int:
    """
    Find the parenthesis that closes an already-opened group.

    ``text`` is assumed to start just after a ``(``. The walk keeps a depth
    counter (``(`` increments, ``)`` decrements) and stops the instant the
    depth would go negative.

    Returns:
        Index of the closing ``)`` in ``text``, or -1 if the group never closes
    """
    depth = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if depth < 0:
            return index
    return -1


def read_until(
    text: str,
    start: int,
    stop: str,
    escape: bool = False,
    brackets: bool = False,
) -> str:
    """
    Read characters from ``text[start:]`` up to (not including) ``stop``.

    Args:
        text: Text to read from
        start: Index to start reading at
        stop: Single character that ends the read
        escape: If True, a character following a backslash never stops the read
        brackets: If True, a ``(`` is read together with everything up to its
                  balanced ``)``, so ``stop`` characters inside are kept

    Returns:
        The characters read (possibly empty)
    """
    result = []
    escaped = False
    index = start

    while index < len(text) and (escaped or text[index] != stop):
        char = text[index]
        result.append(char)
        escaped = escape and char == "\\"

        if brackets and char == "(":
            end = walk_to_end(text[index + 1:])
            if end >= 0:
                result.append(text[index + 1:index + 2 + end])
                index += end + 1

        index += 1

    return "".join(result)


def split_arguments(text: str) -> list[str]:
    """
    Split a macro argument list on top-level commas.

    Commas inside nested parentheses belong to the argument, so
    ``f(1,2), 3`` yields ``["f(1,2)", "3"]``. Each argument is trimmed.
    """
    if not text.strip():
        return []

    args = []
    current = []
    depth = 0

    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "," and depth == 0:
            args.append("".join(current).strip())
            current = []
            continue
        current.append(char)

    args.append("".join(current).strip())
    return args
