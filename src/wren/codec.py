"""Percent-encoding under the two RFC 6570 escaping policies.

Values are encoded as UTF-8 and every byte outside the allowed set
becomes ``%XX``. ``%`` itself is never allowed, so pre-escaped input
is escaped again: ``"50%"`` renders as ``"50%25"``.
"""

import string
from enum import Enum
from urllib.parse import quote, unquote

# RFC 3986 section 2.3; quote() never escapes these
UNRESERVED = frozenset(string.ascii_letters + string.digits + "-._~")

# RFC 3986 section 2.2 (gen-delims + sub-delims)
RESERVED = frozenset(":/?#[]@!$&'()*+,;=")


class Escaping(Enum):
    """Which characters an operator leaves unescaped."""

    UNRESERVED = "unreserved"
    RESERVED = "reserved"


# Extra characters passed to quote() as ``safe`` for each policy
_SAFE: dict[Escaping, str] = {
    Escaping.UNRESERVED: "",
    Escaping.RESERVED: "".join(sorted(RESERVED)),
}


def encode(text: str, policy: Escaping = Escaping.UNRESERVED) -> str:
    """Percent-encode *text*, leaving only the characters *policy* allows.

    Examples::

        encode("Hello World!")                    -> "Hello%20World%21"
        encode("Hello World!", Escaping.RESERVED) -> "Hello%20World!"
        encode("café")                            -> "caf%C3%A9"
    """
    return quote(text, safe=_SAFE[policy], encoding="utf-8", errors="surrogatepass")


def decode(text: str) -> str:
    """Decode ``%XX`` escapes. Lenient: malformed escapes pass through verbatim."""
    if "%" not in text:
        return text
    return unquote(text, encoding="utf-8", errors="replace")
