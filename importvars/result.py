# ==========================================
# PER-CALL-SITE OUTCOMES: Result<T, E> Model
# ==========================================
"""
Ok / Err results, so that one rejected call site never aborts the others.
"""


class Result:
    """Base class for Result<T, E> (Ok or Err)."""

    def is_ok(self) -> bool:
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        return isinstance(self, Err)

    def unwrap(self):
        """Get value or raise the error."""
        if isinstance(self, Ok):
            return self.value
        else:
            raise self.error

    def unwrap_or(self, default):
        """Get value or return default."""
        if isinstance(self, Ok):
            return self.value
        else:
            return default


class Ok(Result):
    """Success case: Ok<T>."""

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"Ok({self.value!r})"


class Err(Result):
    """Error case: Err<E>."""

    def __init__(self, error):
        self.error = error

    def __repr__(self):
        return f"Err({self.error.__class__.__name__})"

    def __str__(self):
        return str(self.error)
