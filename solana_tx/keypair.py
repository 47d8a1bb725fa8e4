"""Ed25519 keypair used to sign transactions"""

from typing import List, Optional, Sequence, Union

import base58
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from .constants import PUBLIC_KEY_LENGTH, SIGNATURE_LENGTH
from .errors import ConstructionError
from .publickey import PublicKey

SEED_LENGTH = 32
SECRET_KEY_LENGTH = SEED_LENGTH + PUBLIC_KEY_LENGTH


class Keypair:
    """Signing account backed by a PyNaCl ed25519 key.

    The 64-byte secret key layout is seed (32 bytes) followed by the public
    key (32 bytes), the form wallets export.
    """

    def __init__(self, signing_key: Optional[SigningKey] = None):
        self._signing_key = signing_key or SigningKey.generate()
        self._public_key = PublicKey(bytes(self._signing_key.verify_key))

    @classmethod
    def from_secret_key(cls, secret_key: Union[bytes, str]) -> 'Keypair':
        """Load from a 64-byte secret key (raw or base58 text)"""
        if isinstance(secret_key, str):
            secret_key = base58.b58decode(secret_key)
        if len(secret_key) != SECRET_KEY_LENGTH:
            raise ConstructionError(
                f"Invalid secret key length: expected {SECRET_KEY_LENGTH}, got {len(secret_key)}"
            )

        keypair = cls(SigningKey(bytes(secret_key[:SEED_LENGTH])))
        if bytes(keypair.public_key) != bytes(secret_key[SEED_LENGTH:]):
            raise ConstructionError("Secret key does not match its embedded public key")
        return keypair

    @classmethod
    def from_seed(cls, seed: bytes) -> 'Keypair':
        if len(seed) != SEED_LENGTH:
            raise ConstructionError(f"Invalid seed length: expected {SEED_LENGTH}, got {len(seed)}")
        return cls(SigningKey(bytes(seed)))

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    @property
    def secret_key(self) -> bytes:
        return bytes(self._signing_key) + bytes(self._public_key)

    def to_base58(self) -> str:
        return base58.b58encode(self.secret_key).decode('ascii')

    def sign(self, message: bytes) -> bytes:
        """Produce a 64-byte detached signature over ``message``"""
        return self._signing_key.sign(message).signature

    def __repr__(self) -> str:
        return f"Keypair({self._public_key.to_base58()!r})"


def verify_signature(public_key: PublicKey, message: bytes, signature: bytes) -> bool:
    """Check a detached signature without raising"""
    if len(signature) != SIGNATURE_LENGTH:
        return False
    try:
        VerifyKey(bytes(public_key)).verify(message, signature)
    except BadSignatureError:
        return False
    return True


def as_signer_list(signers: Union['Keypair', Sequence['Keypair']]) -> List['Keypair']:
    """Normalize a single signer or a sequence of signers; reject an empty list"""
    if signers is None:
        raise ConstructionError("No signers provided")
    if isinstance(signers, Keypair):
        return [signers]
    signers = list(signers)
    if not signers:
        raise ConstructionError("No signers provided")
    return signers
