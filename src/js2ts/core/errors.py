class Js2TsError(Exception):
    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.args[0]} (caused by: {self.cause})"
        return str(self.args[0])


class ConfigurationError(Js2TsError):
    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause)
        self.file_path = file_path
        self.line: int | None = None
        self.column: int | None = None


class ParsingError(Js2TsError):
    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        file_path: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause)
        self.line = line
        self.column = column
        self.file_path = file_path
