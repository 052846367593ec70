"""Generation counter used to discard results of superseded requests."""


class GenerationCounter:
    """Hands out tokens; only the most recently issued token is current."""

    def __init__(self) -> None:
        self._value = 0

    @property
    def value(self) -> int:
        return self._value

    def next(self) -> "GenerationToken":
        self._value += 1
        return GenerationToken(self, self._value)


class GenerationToken:
    def __init__(self, counter: GenerationCounter, generation: int) -> None:
        self._counter = counter
        self.generation = generation

    @property
    def is_current(self) -> bool:
        return self._counter.value == self.generation

    def __repr__(self) -> str:
        return f"GenerationToken(generation={self.generation}, current={self.is_current})"
