"""Error types for schemalens."""

from typing import Optional, Dict, Any


class SchemaLensError(Exception):
    """Base exception for schemalens errors."""

    def __init__(self, message: str, code: str = "SCHEMALENS_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for structured output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class DialectError(SchemaLensError):
    """Error resolving a database dialect to a discovery implementation."""

    def __init__(self, message: str, dialect: str, code: str = "DIALECT_ERROR", details: Optional[Dict[str, Any]] = None):
        details = {"dialect": dialect, **(details or {})}
        super().__init__(message, code=code, details=details)
        self.dialect = dialect


class UnsupportedDialectError(DialectError):
    """The dialect identifier is not recognized at all.

    The message always carries the identifier exactly as the caller passed it
    (coerced to ``str``), so empty or whitespace-only input stays visible.
    """

    def __init__(self, dialect: Any, component: Optional[str] = None):
        literal = str(dialect)
        if component:
            message = f"Unsupported dialect for {component}: {literal}"
        else:
            message = f"Unsupported database dialect: {literal}"
        super().__init__(
            message,
            dialect=literal,
            code="UNSUPPORTED_DIALECT",
            details={"component": component} if component else None,
        )


class UnimplementedDialectError(DialectError):
    """The dialect is recognized but has no discovery implementation yet."""

    def __init__(self, engine: str, component: str, dialect: Optional[str] = None):
        message = f"{engine} {component} not yet implemented"
        super().__init__(
            message,
            dialect=dialect or engine.lower(),
            code="UNIMPLEMENTED_DIALECT",
            details={"engine": engine, "component": component},
        )
        self.engine = engine
        self.component = component


class ExecutorError(SchemaLensError):
    """Error opening or using a bundled query executor."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="EXECUTOR_ERROR", details=details)
