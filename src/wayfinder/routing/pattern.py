"""Dynamic segment patterns — compile ``/users/:id`` style paths.

A path template is parsed into literal strings and ``Key`` tokens, then
compiled two ways: into a regex that tests a concrete path and extracts
params, and into a ``PathFiller`` that substitutes params back in.

Supported syntax::

    /users/:id         named segment
    /users/:id?        optional segment
    /files/:path*      zero or more segments
    /files/:path+      one or more segments
    /users/:id(\\d+)    custom segment pattern
    /icon-(\\d+).png    unnamed group (keys numbered 0, 1, ...)
    *                  catch-all
    \\:                escaped literal
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, unquote

from wayfinder.errors import ParamError

# Same grammar as the classic ``path-to-regexp`` tokenizer:
#   1: escaped char, 2: prefix, 3: name, 4: capture, 5: group,
#   6: modifier, 7: asterisk
_PATH_RE = re.compile(
    r"(\\.)"
    r"|([/.])?(?:(?:\:(\w+)(?:\(((?:\\.|[^\\()])+)\))?|\(((?:\\.|[^\\()])+)\))([+*?])?|(\*))",
    re.ASCII,
)
_GROUP_SPECIALS = re.compile(r"([=!:$/()])")

# Key name under which the catch-all segment is exposed in params
CATCH_ALL_PARAM = "pathMatch"


@dataclass(frozen=True, slots=True)
class PatternOptions:
    """Compilation flags for a path template.

    ``sensitive``: case-sensitive matching.
    ``strict``: a trailing delimiter is significant.
    ``end``: the pattern must match to the end of the path.
    """

    sensitive: bool = False
    strict: bool = False
    end: bool = True
    delimiter: str = "/"


@dataclass(frozen=True, slots=True)
class Key:
    """A parameter token of a parsed path template."""

    name: str
    prefix: str
    delimiter: str
    optional: bool
    repeat: bool
    partial: bool
    asterisk: bool
    pattern: str

    @property
    def param_name(self) -> str:
        """Name used for this key in a params dict."""
        if self.name == "0":
            return CATCH_ALL_PARAM
        return self.name


Token = str | Key


def _escape_group(group: str) -> str:
    return _GROUP_SPECIALS.sub(r"\\\1", group)


def parse_tokens(path: str, delimiter: str = "/") -> list[Token]:
    """Split a path template into literal strings and ``Key`` tokens.

    Examples::

        parse_tokens("/users/:id")  -> ["/users", Key(name="id", prefix="/", ...)]
        parse_tokens("*")           -> [Key(name="0", asterisk=True, pattern=".*", ...)]
    """
    tokens: list[Token] = []
    key_index = 0
    index = 0
    literal = ""

    for m in _PATH_RE.finditer(path):
        literal += path[index : m.start()]
        index = m.end()

        escaped = m.group(1)
        if escaped:
            literal += escaped[1]
            continue

        next_char = path[index] if index < len(path) else None
        prefix, name, capture, group, modifier, asterisk = m.group(2, 3, 4, 5, 6, 7)

        if literal:
            tokens.append(literal)
            literal = ""

        if not name:
            name = str(key_index)
            key_index += 1

        key_delimiter = prefix or delimiter
        pattern = capture or group
        if pattern:
            pattern = _escape_group(pattern)
        elif asterisk:
            pattern = ".*"
        else:
            pattern = f"[^{re.escape(key_delimiter)}]+?"

        tokens.append(
            Key(
                name=name,
                prefix=prefix or "",
                delimiter=key_delimiter,
                optional=modifier in ("?", "*"),
                repeat=modifier in ("+", "*"),
                partial=prefix is not None and next_char is not None and next_char != prefix,
                asterisk=bool(asterisk),
                pattern=pattern,
            )
        )

    if index < len(path):
        literal += path[index:]
    if literal:
        tokens.append(literal)

    return tokens


def tokens_to_regex(tokens: list[Token], options: PatternOptions) -> re.Pattern[str]:
    """Build the matching regex for parsed *tokens*."""
    route = ""
    for token in tokens:
        if isinstance(token, str):
            route += re.escape(token)
            continue

        prefix = re.escape(token.prefix)
        capture = f"(?:{token.pattern})"
        if token.repeat:
            capture += f"(?:{prefix}{capture})*"
        if token.optional:
            if not token.partial:
                capture = f"(?:{prefix}({capture}))?"
            else:
                capture = f"{prefix}({capture})?"
        else:
            capture = f"{prefix}({capture})"
        route += capture

    delimiter = re.escape(options.delimiter)
    ends_with_delimiter = route.endswith(delimiter)

    if not options.strict:
        if ends_with_delimiter:
            route = route[: -len(delimiter)]
        route += f"(?:{delimiter}(?=\\Z))?"

    if options.end:
        route += r"\Z"
    elif not (options.strict and ends_with_delimiter):
        route += f"(?={delimiter}|\\Z)"

    flags = 0 if options.sensitive else re.IGNORECASE
    return re.compile(f"^{route}", flags)


def _encode_pretty(value: str) -> str:
    # encodeURI with "/", "?" and "#" escaped as well
    encoded = quote(value, safe=";,/?:@&=+$-_.!~*'()#")
    return encoded.replace("/", "%2F").replace("?", "%3F").replace("#", "%23")


def _encode_component(value: str) -> str:
    return quote(value, safe="-_.!~*'()")


def _encode_asterisk(value: str) -> str:
    encoded = quote(value, safe=";,/?:@&=+$-_.!~*'()#")
    return encoded.replace("?", "%3F").replace("#", "%23")


def _to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _encode_value(encode: Callable[[str], str], value: Any, name: str) -> str:
    try:
        return encode(_to_str(value))
    except UnicodeEncodeError as exc:
        msg = f'Expected "{name}" to be encodable, but received {value!r}'
        raise ParamError(msg) from exc


class PathFiller:
    """Reverse of a compiled pattern: substitute params into a template.

    Raises ``ParamError`` when a required param is missing or a value
    does not fit its segment pattern.
    """

    __slots__ = ("_checks", "tokens")

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self._checks: dict[int, re.Pattern[str]] = {
            i: re.compile(f"(?:{token.pattern})")
            for i, token in enumerate(tokens)
            if isinstance(token, Key)
        }

    def __call__(self, params: dict[str, Any] | None = None, *, pretty: bool = False) -> str:
        data = params or {}
        encode = _encode_pretty if pretty else _encode_component
        path = ""

        for i, token in enumerate(self.tokens):
            if isinstance(token, str):
                path += token
                continue

            value = data.get(token.name)
            if value is None:
                if token.optional:
                    if token.partial:
                        path += token.prefix
                    continue
                msg = f'Expected "{token.name}" to be defined'
                raise ParamError(msg)

            check = self._checks[i]

            if isinstance(value, (list, tuple)):
                if not token.repeat:
                    msg = f'Expected "{token.name}" to not repeat, but received {list(value)!r}'
                    raise ParamError(msg)
                if not value:
                    if token.optional:
                        continue
                    msg = f'Expected "{token.name}" to not be empty'
                    raise ParamError(msg)
                for j, item in enumerate(value):
                    segment = _encode_value(encode, item, token.name)
                    if not check.fullmatch(segment):
                        msg = (
                            f'Expected all "{token.name}" to match "{token.pattern}", '
                            f"but received {segment!r}"
                        )
                        raise ParamError(msg)
                    path += (token.prefix if j == 0 else token.delimiter) + segment
                continue

            segment = _encode_value(_encode_asterisk if token.asterisk else encode, value, token.name)
            if not check.fullmatch(segment):
                msg = (
                    f'Expected "{token.name}" to match "{token.pattern}", '
                    f'but received "{segment}"'
                )
                raise ParamError(msg)
            path += token.prefix + segment

        return path


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A path template compiled for matching.

    Attributes:
        path: The template text.
        regex: Anchored regex; group *n* captures ``keys[n - 1]``.
        keys: Parameter tokens in template order.
    """

    path: str
    regex: re.Pattern[str]
    keys: tuple[Key, ...]

    @property
    def required_names(self) -> frozenset[str]:
        """Param names that must be supplied to fill the template."""
        return frozenset(key.param_name for key in self.keys if not key.optional)

    def test(self, path: str) -> bool:
        return self.regex.match(path) is not None

    def match(self, path: str) -> dict[str, str] | None:
        """Return decoded params if *path* matches, else ``None``.

        Optional keys that captured nothing are left out.
        """
        m = self.regex.match(path)
        if m is None:
            return None

        params: dict[str, str] = {}
        for key, value in zip(self.keys, m.groups(), strict=False):
            if value is not None:
                params[key.param_name] = _decode_param(value)
        return params


def _decode_param(value: str) -> str:
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        return value


def compile_pattern(path: str, options: PatternOptions | None = None) -> CompiledPattern:
    """Compile *path* into a ``CompiledPattern``."""
    options = options or PatternOptions()
    tokens = parse_tokens(path, options.delimiter)
    keys = tuple(token for token in tokens if isinstance(token, Key))
    return CompiledPattern(path=path, regex=tokens_to_regex(tokens, options), keys=keys)


def compile_filler(path: str, delimiter: str = "/") -> PathFiller:
    """Compile *path* into a ``PathFiller``."""
    return PathFiller(parse_tokens(path, delimiter))
