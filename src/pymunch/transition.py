class Transition:
    __slots__ = ['first', 'last', 'targetstate']
    def __init__(self, first, last, targetstate):
        self.first = first
        self.last = last
        self.targetstate = targetstate

    def __contains__(self, symbol):
        return self.first <= symbol <= self.last

    def __repr__(self):
        return f"Transition({self.first!r}, {self.last!r}, {self.targetstate})"
