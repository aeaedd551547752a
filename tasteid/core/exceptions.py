class TasteIDError(Exception):
    """Base class for errors raised by the TasteID engine."""


class ComputationError(TasteIDError):
    """
    An engine value came out non-finite or outside its declared range.

    Inputs are validated at the model boundary, so this always indicates a
    defect and is never caught inside the engine.
    """

    def __init__(self, name: str, value: float, bounds: tuple[float, float]):
        self.name = name
        self.value = value
        self.bounds = bounds
        super().__init__(f"{name}={value!r} is outside [{bounds[0]}, {bounds[1]}]")
