from typing import Any, Mapping
from dataclasses import dataclass
from pathlib import Path
import enum
import uuid


@dataclass(frozen=True)
class FileLocation:
    path: Path
    line: int | None = None

    def __str__(self) -> str:
        if self.line is None:
            return str(self.path)
        return f"{self.path}:{self.line}"


class Severity(enum.Enum):
    """
    Severity levels for header issues.
    """
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class IssueType:
    """
    Represents a type of issue.
    """
    id: str
    message: str
    severity: Severity = Severity.ERROR

    def __post_init__(self):
        # Verify that the ID is a valid UUID
        if not isinstance(self.id, str):
            raise ValueError(f"Invalid ID: {self.id}")
        try:
            uuid.UUID(self.id)
        except ValueError:
            raise ValueError(f"Invalid UUID: {self.id}")

    def make(self, **kwargs) -> 'Issue':
        """
        Creates an Issue of this type.
        """
        return Issue(self, data=kwargs)


@dataclass
class Issue:
    """
    Represents a problem found in a single file.
    """
    issue_type: IssueType
    data: Mapping[str, Any] | None = None
    location: FileLocation | None = None

    def at(self, path: Path, line: int | None = None) -> 'Issue':
        """
        Returns an Issue with the specified path.
        """
        if self.location is not None and self.location.path != path:
            raise ValueError("Cannot change the path of an existing issue.")
        self.location = FileLocation(path, line)
        return self

    def describe(self) -> str:
        """
        Message plus data, without the location.
        """
        msg = self.issue_type.message.format(**(self.data or {}))
        data_str = ', '.join(
            f"{k}={v!r}" for k, v in self.data.items() if v is not None
        ) if self.data else ''
        if data_str:
            msg += f" ({data_str})"
        return msg

    def __str__(self) -> str:
        prefix = f"{self.location} > " if self.location is not None else "> "
        return prefix + self.describe()


E_MISSING_HEADER        = IssueType("5b0e6f1c-2d47-4b8e-9a31-7c2f04d8e915", "File has no license header.")
E_HEADER_MISMATCH       = IssueType("c41a9e27-8f3b-4d62-b0e5-1a9d73c6f208", "License header does not match the template.")
E_UNSUPPORTED_FILE_TYPE = IssueType("e8d2370b-64fa-4c19-8b7e-52f1a0c9d3e4", "Unsupported file type.")
E_IO_FAILURE            = IssueType("7a3f5c81-0b2e-4e97-a6d4-9c8b1e2f5a70", "Cannot read or write the file.")
