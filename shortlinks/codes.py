import random
import re
import string
from urllib.parse import urlparse

ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
CODE_RE = re.compile(r"[A-Za-z0-9]{6,8}")

def generate_code(length: int = 6) -> str:
    return "".join(random.choice(ALPHABET) for _ in range(length))

def validate_code(code: str | None) -> bool:
    return isinstance(code, str) and CODE_RE.fullmatch(code) is not None

def validate_url(url: str | None) -> bool:
    """True for an absolute URL with both a scheme and a host."""
    if not isinstance(url, str) or not url:
        return False
    if any(c.isspace() or ord(c) < 0x20 or ord(c) == 0x7f for c in url):
        return False
    try:
        parts = urlparse(url)
        return bool(parts.scheme and parts.netloc and parts.hostname)
    except ValueError:
        return False
