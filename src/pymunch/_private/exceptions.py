from dataclasses import dataclass


@dataclass(eq=False)
class StateIndexError(IndexError):
    """A transition referred to a state that does not exist."""
    argument: str
    index: int
    state_count: int

    def __str__(self):
        return (f"Transition '{self.argument}' argument {self.index} exceeds "
                f"state count {self.state_count}")
