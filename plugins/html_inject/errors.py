"""Errors raised while building an injected HTML document."""


class HtmlInjectError(Exception):
    """Base class for all handled html-inject failures."""


class MissingInputError(HtmlInjectError):
    def __init__(self):
        super().__init__("No input file given (use --input)")


class InputIsDirectoryError(HtmlInjectError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Input '{path}' is a directory, expected a file")


class InputNotFoundError(HtmlInjectError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Input file '{path}' not found")


class AssetPathNotFoundError(HtmlInjectError):
    def __init__(self, spec: str):
        self.spec = spec
        super().__init__(f"'{spec}' is not a file, a directory or a matching glob pattern")


class RevisionLookupError(HtmlInjectError):
    """The git revision could not be resolved."""
