"""
Immutable run configuration shared by the CLI and the MkDocs plugin.
"""

import hashlib
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_ETAG_ALGORITHM = "md5"


@dataclass(frozen=True)
class RemovalCondition:
    """Selects which `<!-- remove:<key> -->` blocks are stripped.

    Only `key` takes part in matching; `scope` is kept for logging and for
    callers that want to group removal keys (e.g. `env:production`).
    """

    scope: str = ""
    key: str = ""

    @classmethod
    def parse(cls, value: Optional[str]) -> "RemovalCondition":
        """Parse `key` or `scope:key`. The key is always the last colon segment."""
        if not value:
            return cls()
        scope, _, key = value.rpartition(":")
        return cls(scope=scope, key=key)

    def __str__(self) -> str:
        return f"{self.scope}:{self.key}" if self.scope else self.key


@dataclass(frozen=True)
class InjectConfig:
    input: Optional[str] = None
    output: Optional[str] = None
    css: Optional[str] = None
    js: Optional[str] = None
    remove: RemovalCondition = field(default_factory=RemovalCondition)
    ignore: Optional[str] = None
    git_hash: bool = False
    etag: bool = False
    etag_algorithm: str = DEFAULT_ETAG_ALGORITHM

    def __post_init__(self):
        if self.etag_algorithm not in hashlib.algorithms_available:
            raise ValueError(f"Unsupported etag algorithm '{self.etag_algorithm}'")
        # shake_* digests have no fixed length, so hexdigest() needs an argument.
        if hashlib.new(self.etag_algorithm).digest_size == 0:
            raise ValueError(f"Variable-length etag algorithm '{self.etag_algorithm}' is not supported")

    @property
    def output_path(self) -> Optional[str]:
        """Where the result is written; defaults to the input file."""
        return self.output or self.input

    @classmethod
    def from_options(
        cls,
        input: Optional[str] = None,
        output: Optional[str] = None,
        css: Optional[str] = None,
        js: Optional[str] = None,
        remove: Optional[str] = None,
        ignore: Optional[str] = None,
        git_hash: bool = False,
        etag: bool = False,
        etag_algorithm: Optional[str] = None,
    ) -> "InjectConfig":
        # Empty strings coming from config files mean "not set".
        return cls(
            input=input or None,
            output=output or None,
            css=css or None,
            js=js or None,
            remove=RemovalCondition.parse(remove),
            ignore=ignore or None,
            git_hash=bool(git_hash),
            etag=bool(etag),
            etag_algorithm=etag_algorithm or DEFAULT_ETAG_ALGORITHM,
        )
