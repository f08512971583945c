"""Request signing for the xiaoi API (X-Auth header).

Every call must carry a signature header built as:
  1. HA1 = sha1(app_key:realm:app_secret), realm = "xiaoi.com"
  2. HA2 = sha1(method:uri), e.g. "POST" and "/ask.do"
  3. signature = sha1(HA1:nonce:HA2), nonce = 40 random hex chars
  4. header = app_key="...",nonce="...",signature="..."

HA1 and HA2 depend only on long-lived values, so Signer computes them once.
"""
import hashlib
import logging
import random
from dataclasses import dataclass

from xiaoi.config import METHOD, REALM, URI

logger = logging.getLogger(__name__)

SPLIT = ":"
NONCE_SIZE = 40


def _sha1_hex(*parts: str) -> str:
    return hashlib.sha1(SPLIT.join(parts).encode("utf-8")).hexdigest()


def derive_credential_hash(key: str, realm: str, secret: str) -> str:
    """HA1: lowercase hex sha1 of key:realm:secret."""
    return _sha1_hex(key, realm, secret)


def derive_method_hash(method: str, uri: str) -> str:
    """HA2: lowercase hex sha1 of method:uri."""
    return _sha1_hex(method, uri)


def make_nonce(rng: random.Random) -> str:
    """40 hex chars: two 64-bit values at width 16 and one 32-bit value at width 8."""
    return f"{rng.getrandbits(64):016x}{rng.getrandbits(64):016x}{rng.getrandbits(32):08x}"


@dataclass(frozen=True)
class SignedRequest:
    nonce: str
    signature: str
    auth_header: str


def sign_request(key: str, ha1: str, ha2: str, nonce: str) -> SignedRequest:
    """Combine HA1, nonce and HA2 into the signature and the X-Auth header value."""
    signature = _sha1_hex(ha1, nonce, ha2)
    auth_header = f'app_key="{key}",nonce="{nonce}",signature="{signature}"'
    return SignedRequest(nonce=nonce, signature=signature, auth_header=auth_header)


class Signer:
    """Holds the credential-derived hashes and a private random source for nonces.

    The random source is seeded once here (from OS entropy unless rng is given),
    so two dispatchers never share nonce state. Nonce reuse is not detected.
    """

    def __init__(
        self,
        key: str,
        secret: str,
        *,
        rng: random.Random | None = None,
        method: str = METHOD,
        uri: str = URI,
    ) -> None:
        self.key = key
        self.ha1 = derive_credential_hash(key, REALM, secret)
        self.ha2 = derive_method_hash(method, uri)
        self._rng = rng if rng is not None else random.Random()
        logger.debug("ha1: %s", self.ha1)
        logger.debug("ha2: %s", self.ha2)

    def new_nonce(self) -> str:
        return make_nonce(self._rng)

    def sign(self, nonce: str | None = None) -> SignedRequest:
        """Sign one request. A fresh nonce is drawn unless one is passed (tests, replays of a known vector)."""
        return sign_request(self.key, self.ha1, self.ha2, nonce if nonce is not None else self.new_nonce())
