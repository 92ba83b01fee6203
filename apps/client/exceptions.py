class ClientCodeCapacityExceeded(Exception):
    """Raised when every number in a client-code prefix is already assigned.

    Args:
        prefix: The three-letter prefix that has no free number left.
    """

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        super().__init__(f"Maximum client codes reached for prefix {prefix}")


class NotFoundError(ValueError):
    """A client, contact or link referenced by a request does not exist."""


class DuplicateLinkError(ValueError):
    """The client and contact are already linked."""
