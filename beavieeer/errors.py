class BeavieeerError(Exception):
    """ Base class for all Beavieeer host-level errors"""
    pass


class BeavieeerSyntaxError(BeavieeerError):
    """ Raised when source text fails to parse; `errors` holds every message"""

    def __init__(self, errors: list[str]):
        super().__init__("\n".join(errors))
        self.errors = list(errors)


class BeavieeerUnboundIdentifier(BeavieeerError):
    """ Raised when a name is looked up before it is bound"""


class BeavieeerOverflowError(BeavieeerError):
    """ Raised when an integer literal does not fit in 64 signed bits"""
