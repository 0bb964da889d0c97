"""Security helpers: log redaction and role checks."""
