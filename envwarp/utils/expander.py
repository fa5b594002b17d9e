"""Shell-style variable expansion over an explicit environment mapping.

Supported forms::

    $NAME  ${NAME}              value, or "" when unset
    ${NAME-word}  ${NAME=word}  word when NAME is unset
    ${NAME:-word} ${NAME:=word} word when NAME is unset or empty
    ${NAME+word}                word when NAME is set, else ""
    ${NAME:+word}               word when NAME is set and non-empty, else ""
    $$                          a literal "$"

``word`` is expanded too, so fallback chains such as ``${A:-${B:-x}}`` work.
Braces inside a reference must balance. A ``$`` followed by anything else is
left alone.
"""
import re
from typing import List, Mapping, Optional
from envwarp.exceptions import ExpansionError

_REFERENCE = re.compile(
    r"""
    \$(?:
        (?P<escaped>\$)
      | (?P<named>[_a-zA-Z][_a-zA-Z0-9]*)
      | (?P<braced>\{)
    )
    """,
    re.VERBOSE,
)

_BRACED_BODY = re.compile(r"(?P<name>[_a-zA-Z][_a-zA-Z0-9]*)(?:(?P<op>:?[-=+])(?P<word>.*))?\Z", re.DOTALL)


def _position(text: str, index: int) -> str:
    lines = text[:index].splitlines(keepends=True)
    if not lines or lines[-1].endswith(("\n", "\r")):
        return f"line {len(lines) + 1}, column 1"
    return f"line {len(lines)}, column {len(lines[-1]) + 1}"


def _closing_brace(text: str, start: int) -> int:
    """Index of the ``}`` balancing the ``{`` just before ``start``, or -1."""
    depth = 1
    for index in range(start, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return -1


def _lookup(name: str, op: Optional[str], word: str, env: Mapping[str, str]) -> str:
    is_set = name in env
    value = env.get(name, "")
    if op is None:
        return value
    if op in ("-", "="):
        return value if is_set else expand(word, env)
    if op in (":-", ":="):
        return value if value else expand(word, env)
    if op == "+":
        return expand(word, env) if is_set else ""
    # ":+"
    return expand(word, env) if value else ""


def expand(text: str, env: Mapping[str, str]) -> str:
    """Return ``text`` with every variable reference resolved against ``env``.

    Raises:
        ExpansionError: for a ``${`` that does not open a valid, closed reference.
    """
    parts: List[str] = []
    pos = 0
    for match in _REFERENCE.finditer(text):
        if match.start() < pos:
            # Inside a braced reference already consumed
            continue
        parts.append(text[pos:match.start()])
        pos = match.end()

        if match.group("escaped") is not None:
            parts.append("$")
            continue
        if match.group("named") is not None:
            parts.append(env.get(match.group("named"), ""))
            continue

        close = _closing_brace(text, match.end())
        body = _BRACED_BODY.match(text, match.end(), close) if close != -1 else None
        if body is None:
            raise ExpansionError(f"bad substitution at {_position(text, match.start())}")
        parts.append(_lookup(body.group("name"), body.group("op"), body.group("word") or "", env))
        pos = close + 1

    parts.append(text[pos:])
    return "".join(parts)
