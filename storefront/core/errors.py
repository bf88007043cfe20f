from postgrest.exceptions import APIError

# Postgres / PostgREST error codes the handlers care about
UNIQUE_VIOLATION = "23505"
NO_ROWS = "PGRST116"


def error_code(err: Exception):
    if isinstance(err, APIError):
        return err.code
    return getattr(err, "code", None)


def is_unique_violation(err: Exception) -> bool:
    return error_code(err) == UNIQUE_VIOLATION


def is_not_found(err: Exception) -> bool:
    return error_code(err) == NO_ROWS


def describe(err: Exception) -> str:
    if isinstance(err, APIError):
        return f"[{err.code}] {err.message}"
    return str(err)
