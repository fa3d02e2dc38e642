"""Decision engine exceptions."""


class DecisionEngineError(Exception):
    """Base class for errors raised while evaluating a milestone."""


class CriticalDataMissingError(DecisionEngineError):
    """Milestone or project record could not be loaded."""

    def __init__(self, record: str, record_id: str):
        self.record = record
        self.record_id = record_id
        super().__init__(
            f"Critical data missing for decision engine: {record} {record_id} not found"
        )


class InvalidRecordError(DecisionEngineError):
    """A stored field could not be interpreted (e.g. an unparsable amount)."""

    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"Invalid value for {field}: {value!r}")
