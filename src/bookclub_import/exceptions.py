"""Exception types raised by the parser, importer and host stores."""


class ParseError(ValueError):
    """Input could not be turned into a document with at least one section."""


class ImportFailure(Exception):
    """An import step failed (fatal at publication level, recoverable per chapter)."""


class StoreError(Exception):
    """The host store rejected an operation (validation or persistence)."""
