"""Error kinds raised inside the engine and recovered at its boundary."""


class BubblePopError(Exception):
    """Base class for all game errors."""


class InvalidInput(BubblePopError):
    """Bad argument: empty player name, bubble index out of range, bad setting."""


class InvalidState(BubblePopError):
    """Operation not allowed in the current round phase."""


class PersistenceUnavailable(BubblePopError):
    """The key-value store could not be read or written."""
