from __future__ import annotations


class MissingHandlerError(RuntimeError):
    """A closed enumeration member has no entry in a dispatch table."""


class UnhandledCardError(RuntimeError):
    """Something that is not a known card id reached the effect executor."""


class UnknownCardError(ValueError):
    """A wire card id string does not name any card."""


def require_exhaustive(table: dict, members, what: str) -> None:
    missing = [m.value for m in members if m not in table]
    if missing:
        raise MissingHandlerError(f"{what} missing for: {', '.join(missing)}")
