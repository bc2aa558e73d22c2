"""Path string helpers — relative resolution, splitting, slash cleanup."""

import re
from dataclasses import dataclass

_DOUBLE_SLASH = re.compile(r"//")


@dataclass(frozen=True, slots=True)
class ParsedPath:
    """A raw target split into its path, query and hash parts.

    ``query`` excludes the leading ``?``; ``hash`` keeps its leading ``#``.
    """

    path: str
    query: str = ""
    hash: str = ""


def resolve_path(relative: str, base: str, append: bool = False) -> str:
    """Resolve *relative* against *base* and return an absolute path.

    Without *append* the last segment of *base* is treated like a file
    name and replaced; with *append* it is kept as a directory (unless
    *base* already ends with a slash).

    Examples::

        resolve_path("../c", "/a/b")               -> "/c"
        resolve_path("../c", "/a/b", append=True)  -> "/a/c"
        resolve_path("?q=1", "/a")                 -> "/a?q=1"
    """
    first = relative[:1]
    if first == "/":
        return relative

    if first in ("?", "#"):
        return base + relative

    stack = base.split("/")

    # Drop the trailing segment when not appending, or when appending
    # onto a trailing slash (empty last segment)
    if not append or not stack[-1]:
        stack.pop()

    for segment in relative.split("/"):
        if segment == "..":
            if stack:
                stack.pop()
        elif segment != ".":
            stack.append(segment)

    if not stack or stack[0] != "":
        stack.insert(0, "")

    return "/".join(stack)


def parse_path(path: str) -> ParsedPath:
    """Split a raw target into path, query and hash.

    The hash is everything from the first ``#``; the query is whatever
    sits between the first remaining ``?`` and the hash.
    """
    hash_ = ""
    query = ""

    hash_index = path.find("#")
    if hash_index >= 0:
        hash_ = path[hash_index:]
        path = path[:hash_index]

    query_index = path.find("?")
    if query_index >= 0:
        query = path[query_index + 1 :]
        path = path[:query_index]

    return ParsedPath(path=path, query=query, hash=hash_)


def clean_path(path: str) -> str:
    """Collapse doubled slashes produced by joining path fragments."""
    return _DOUBLE_SLASH.sub("/", path)
