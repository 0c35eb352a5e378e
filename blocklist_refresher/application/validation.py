"""Line grammars of the blocklist formats."""

from typing import Callable, Dict

from .domain import ResourceKind
from .exceptions import ValidationError

SINK_ADDRESSES = frozenset({"0.0.0.0", "::"})

_COMMENT_MARKER = "#"


def is_sink_address(ip: str) -> bool:
    return ip in SINK_ADDRESSES


def is_valid_domain_line(line: str) -> bool:
    # ex: "address=/hostname.domain.com/0.0.0.0"
    fields = line.split("/")
    return (
        len(fields) == 3
        and fields[0] == "address="
        and is_sink_address(fields[2])
    )


def is_valid_hostname_line(line: str) -> bool:
    # ex: "0.0.0.0 hostname.domain.com"
    fields = line.split(" ")
    return len(fields) == 2 and is_sink_address(fields[0])


GRAMMARS: Dict[ResourceKind, Callable[[str], bool]] = {
    ResourceKind.DOMAINS: is_valid_domain_line,
    ResourceKind.HOSTNAMES: is_valid_hostname_line,
}


def validate(kind: ResourceKind, body: str):
    """
    Check every line of a blocklist body against the grammar of its kind.

    Empty lines and comment lines are skipped. The first line that does not
    match aborts the scan.

    Args:
        kind: The kind of list the body was fetched for.
        body: The raw text of the list.

    Raises:
        ValidationError: Naming the first offending line.
    """

    is_valid_line = GRAMMARS[kind]

    for line in body.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]

        if not line or line.startswith(_COMMENT_MARKER):
            continue

        if not is_valid_line(line):
            raise ValidationError(kind, line)
