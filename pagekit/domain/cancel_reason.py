from enum import Enum


class CancelReason(str, Enum):
    """Why a paginated fetch was rejected before any I/O happened."""

    ALREADY_FETCHING = "already_fetching"
    NO_MORE_CONTENT = "no_more_content"
    INTERVAL_NOT_ELAPSED = "interval_not_elapsed"
    WILL_FETCH_RETURNED_FALSE = "will_fetch_returned_false"
