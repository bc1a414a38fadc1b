from pathlib import Path


class HeaderCheckError(Exception):
    """
    Base class for every error raised by headercheck.
    """


class UnsupportedFileType(HeaderCheckError):
    """
    No comment syntax is registered for the file's extension.
    """
    def __init__(self, extension: str, path: Path | None = None) -> None:
        self.extension = extension
        self.path = path
        where = f" ({path})" if path is not None else ""
        shown = f".{extension}" if extension else "<no extension>"
        super().__init__(f"Unsupported file extension: {shown}{where}")


class NoHistory(HeaderCheckError):
    """
    The authorship query found no tracked history for the file.
    """
    def __init__(self, path: Path, reason: str = "no tracked history") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class IOFailure(HeaderCheckError):
    """
    Reading or writing the target file failed.
    """
    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ConfigurationError(HeaderCheckError):
    """
    The configuration is malformed or incomplete. Fatal to the whole run.
    """
    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(f"{key}: {message}" if key else message)
