import hashlib
import logging

# Create the library logger
logger = logging.getLogger("cursorhub")

# Add NullHandler to prevent "No handlers could be found" warnings
# if the application doesn't configure logging.
logger.addHandler(logging.NullHandler())


def redact(value: str | None) -> str:
    """
    Redacts a user identifier or storage key for logging.
    Hashes the value to allow correlation without revealing PII.
    """
    if value is None:
        return "<none>"
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:8]
