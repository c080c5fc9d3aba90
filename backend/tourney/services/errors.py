"""
Domain errors raised by the generation layer.

Routes translate these into HTTP responses; nothing is persisted when one is raised.
"""


class InsufficientEntrantsError(ValueError):
    """Raised when a generator is given fewer entrants than its format needs"""

    def __init__(self, required: int, actual: int, entrant_kind: str = "teams", context: str = "a tournament"):
        self.required = required
        self.actual = actual
        self.entrant_kind = entrant_kind
        super().__init__(f"At least {required} {entrant_kind} are required for {context} (got {actual})")
