"""
Participant addresses.

A participant is addressed as ``name@domain``. Addresses are validated once on
construction and never mutated afterwards.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

DOMAIN_PREFIX = "@"

_LOCAL_PART = re.compile(r"^[\w.+-]+$", re.ASCII)
_NEW_USERNAME = re.compile(r"^[\w.]+$", re.ASCII)
_DOMAIN_LABEL = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")


class InvalidParticipantAddress(ValueError):
    """Raised when an address does not follow the participant grammar."""

    def __init__(self, address: str | None, reason: str) -> None:
        self.address = address
        self.reason = reason
        super().__init__(f"Invalid participant address {address!r}: {reason}")


def _validate_domain(address: str, domain: str) -> None:
    labels = domain.split(".")
    for label in labels:
        if not _DOMAIN_LABEL.match(label):
            raise InvalidParticipantAddress(address, f"Invalid domain '{domain}'")


@dataclass(frozen=True)
class ParticipantId:
    """Validated ``name@domain`` address."""

    name: str
    domain: str

    @property
    def address(self) -> str:
        return f"{self.name}{DOMAIN_PREFIX}{self.domain}"

    def __str__(self) -> str:
        return self.address

    @classmethod
    def of(cls, address: str) -> ParticipantId:
        if not address:
            raise InvalidParticipantAddress(address, "Address cannot be empty")

        parts = address.split(DOMAIN_PREFIX)
        if len(parts) != 2:
            raise InvalidParticipantAddress(address, "Address must contain exactly one '@'")

        name, domain = parts
        if not name:
            raise InvalidParticipantAddress(address, "Username portion of address cannot be empty")
        if not domain:
            raise InvalidParticipantAddress(address, "Domain portion of address cannot be empty")
        if not _LOCAL_PART.match(name):
            raise InvalidParticipantAddress(address, f"Invalid characters in name '{name}'")
        _validate_domain(address, domain)
        return cls(name=name, domain=domain)


def check_new_username(domain: str, username: str | None) -> ParticipantId:
    """
    Build the address for a new local user.

    A bare username is placed in ``domain``. A username that already carries a
    domain must carry this one.

    Raises:
        InvalidParticipantAddress: if the result is not a valid local address.
    """
    if username is None or not username.strip():
        raise InvalidParticipantAddress(username, "Username portion of address cannot be empty")

    username = username.strip()
    if DOMAIN_PREFIX in username:
        participant = ParticipantId.of(username)
    else:
        participant = ParticipantId.of(f"{username}{DOMAIN_PREFIX}{domain}")

    if not _NEW_USERNAME.match(participant.name):
        raise InvalidParticipantAddress(
            username,
            "Only letters (a-z), numbers (0-9), underscores (_) and periods (.) "
            "are allowed in Username",
        )
    if participant.domain != domain:
        raise InvalidParticipantAddress(
            username, f"You can only create users at the {domain} domain"
        )
    return participant
