"""
Exception hierarchy for the chopro package

Two failure classes exist: grammar errors raised by strict parse functions
when handed text that does not match the required grammar, and notation
mismatches raised when an operation needs alphabetic chords/keys and gets
Nashville ones (or the other way round). Parsing a whole document never
raises.
"""


class ChoproError(Exception):
    """Base class for all chopro errors"""


class GrammarError(ChoproError, ValueError):
    """Text does not match the required grammar"""


class KeyFormatError(GrammarError):
    """Invalid musical key string"""


class MissingKeyError(KeyFormatError):
    """A source key was required but none could be determined"""


class ChordFormatError(GrammarError):
    """Invalid chord or note token"""


class NotationMismatchError(ChoproError, TypeError):
    """Alphabetic vs. Nashville notation mismatch"""
