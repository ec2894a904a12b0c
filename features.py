"""
URL feature extraction for scam link detection.

Parses a raw URL string into 7 lexical features of the hostname plus one
exact-token indicator per scam keyword, in the fixed order of FEATURE_NAMES.
Training and inference both go through extract_features, so the vectors the
model sees are identical in both paths.

Usage:
    from features import extract_features, FEATURE_NAMES

    features = extract_features("https://bantuanrakyat.my/claim")
    # returns np.ndarray of shape (21,), dtype float32

    named = extract_features("https://bantuanrakyat.my/claim", vectorize=False)
    # returns {"dashCount": 0.0, ..., "kw_kerajaan": 0.0}
"""

import math
import re
from collections import Counter
from urllib.parse import unquote, urlsplit

import idna
import numpy as np

from errors import InvalidURLError

# Lexical markers of the government-aid scam campaign naming pattern.
# Changing this tuple changes the model input width; retrain afterwards.
SCAM_KEYWORDS: tuple[str, ...] = (
    "bantuankerajaan", "bantuanterkini", "madani", "bkmterkini", "bantuanrakyat",
    "privatevcs", "portalmykasih", "portalterkinimy", "portalkerajaan", "portalbantuan",
    "applymykad", "asasrahmah", "bantuanmadani", "kerajaan",
)

TRUSTED_SUFFIX = ".my"

BASE_FEATURE_NAMES: list[str] = [
    "dashCount",
    "digitCount",
    "subdomainCount",
    "slashCount",
    "hasIP",
    "tldType",
    "entropy",
]

FEATURE_NAMES: list[str] = BASE_FEATURE_NAMES + [f"kw_{kw}" for kw in SCAM_KEYWORDS]

assert len(FEATURE_NAMES) == 7 + len(SCAM_KEYWORDS), "Feature layout out of sync with keywords"

_SCHEME_RE = re.compile(r"^https?://")
_TOKEN_SPLIT_RE = re.compile(r"[.\-/?=&_]")
_DOTTED_QUAD_RE = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+")
# Code points a browser refuses in a domain name (control chars, space and <>^|\ "% and friends)
_FORBIDDEN_HOST_RE = re.compile(r"[\x00-\x20\x7f#%/<>?@\[\\\]^|\"\s]")


def shannon_entropy(text: str) -> float:
    """
    Shannon entropy (base 2) of the character distribution of text.

    Returns 0.0 for the empty string.
    """
    if not text:
        return 0.0
    total = len(text)
    ent = 0.0
    for count in Counter(text).values():
        p = count / total
        ent -= p * math.log2(p)
    return ent


def _normalize(url: str) -> str:
    """Prefix http:// when the URL carries no scheme separator."""
    return url if "://" in url else f"http://{url}"


def _hostname(url: str) -> str:
    """
    Parse the hostname out of a scheme-prefixed URL.

    Web browsers read a backslash as a path separator in http(s) URLs, so it
    ends the authority here too. Non-ASCII hostnames are returned in their
    punycode (xn--) form.
    """
    if _SCHEME_RE.match(url.lower()):
        url = url.replace("\\", "/")
    try:
        parts = urlsplit(url)
        # Accessing .port validates it; a bad port raises ValueError.
        _ = parts.port
    except ValueError as e:
        raise InvalidURLError(f"Cannot parse URL {url!r}: {e}") from e

    host = unquote(parts.hostname or "").lower()
    if not host or _FORBIDDEN_HOST_RE.search(host):
        raise InvalidURLError(f"URL has no valid hostname: {url!r}")

    if not host.isascii():
        try:
            host = idna.encode(host, uts46=True).decode("ascii")
        except idna.IDNAError as e:
            raise InvalidURLError(f"Invalid internationalized hostname in {url!r}: {e}") from e
    return host


def _strip_scheme(url: str) -> str:
    """Lowercase the URL and drop a leading http:// or https:// once."""
    return _SCHEME_RE.sub("", url.lower(), count=1)


def tokenize(url: str) -> list[str]:
    """Split a URL into lowercase tokens on . - / ? = & _ (empty tokens dropped)."""
    return [t for t in _TOKEN_SPLIT_RE.split(_strip_scheme(url)) if t]


def extract_features(url: str, vectorize: bool = True) -> np.ndarray | dict[str, float]:
    """
    Extract the scam-link features from a raw URL string.

    Args:
        url: Raw URL string, with or without scheme (e.g., "bantuanrakyat.my/claim").
        vectorize: Return a vector when True, a name -> value mapping when False.

    Returns:
        np.ndarray of shape (len(FEATURE_NAMES),) with dtype float32, or a dict
        keyed by FEATURE_NAMES holding exactly the same values.

    Raises:
        InvalidURLError: if no hostname can be parsed from the URL.
    """
    if not isinstance(url, str):
        raise InvalidURLError(f"URL must be a string, got {type(url).__name__}")

    url = _normalize(url)
    hostname = _hostname(url)
    stripped = _strip_scheme(url)
    tokens = set(tokenize(url))

    features: list[float] = [
        hostname.count("-"),
        sum(1 for c in hostname if "0" <= c <= "9"),
        len(hostname.split(".")) - 2,
        stripped.count("/"),
        1 if _DOTTED_QUAD_RE.fullmatch(hostname) else 0,
        0 if hostname.endswith(TRUSTED_SUFFIX) else 1,
        shannon_entropy(hostname),
    ]
    features.extend(1 if kw in tokens else 0 for kw in SCAM_KEYWORDS)

    result = np.array(features, dtype=np.float32)
    assert result.shape == (len(FEATURE_NAMES),), f"Expected {len(FEATURE_NAMES)} features, got {result.shape[0]}"
    if vectorize:
        return result
    return dict(zip(FEATURE_NAMES, result.tolist()))
