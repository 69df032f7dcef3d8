"""
exceptions.py - Engine Exceptions

Only internal configuration defects are raised. Bad caller input is
reported as data (see models.ValidationFailure), never thrown.
"""


class FreightEngineError(Exception):
    """Base exception"""
    pass


class ConfigurationDefect(FreightEngineError):
    """Internal invariant violation that caller input cannot fix"""
    pass


class RateTableIncompleteError(ConfigurationDefect):
    """Rate table is missing entries for valid enum combinations"""

    def __init__(self, missing):
        self.missing = list(missing)
        cells = ", ".join("/".join(str(part) for part in cell) for cell in self.missing)
        super().__init__(f"Rate table is missing {len(self.missing)} entries: {cells}")


class InvalidRateError(ConfigurationDefect):
    """Rate entry is absent or has non-positive / non-numeric fields"""
    pass
