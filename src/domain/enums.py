"""Domain enumerations and state-transition rules."""

import enum


class MatchType(str, enum.Enum):
    PERFECT = "perfect"
    NEARBY = "nearby"


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# State machine: maps current status -> set of valid next statuses
REQUEST_TRANSITIONS: dict[RequestStatus, set[RequestStatus]] = {
    RequestStatus.PENDING: {RequestStatus.ACCEPTED, RequestStatus.REJECTED},
    RequestStatus.ACCEPTED: set(),
    RequestStatus.REJECTED: set(),
}

# Statuses a recipient may answer a request with
RESPONSE_STATUSES: frozenset[RequestStatus] = frozenset(
    {RequestStatus.ACCEPTED, RequestStatus.REJECTED}
)
