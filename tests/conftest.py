"""
Shared fixtures for the transaction SDK tests.
"""

import pytest

from solana_tx import Keypair, PublicKey
from solana_tx.programs import SystemProgram


SECRET_KEY = "4Z7cXSyeFR8wNGMVXUE1TwtKn5D5Vu7FzEv69dokLv7KrQk7h6pu4LF8ZRR9yQBhc7uSM6RTTZtU1fmaxiNrxXrs"
FEE_PAYER = "QqCCvshxtqMAL2CVALqiJB7uEeE5mjSPsseQdDzsRUo"
RECIPIENT = "GrDMoeqMLFjeXQ24H56S1RLgT4R76jsuWCd6SvXyGPQ5"
BLOCKHASH = "Eit7RCyhUixAe2hGBS8oqnw59QK3kgMMjfLME5bm9wRn"

TRANSFER_TX_BASE64 = (
    "ASdDdWBaKXVRA+6flVFiZokic9gK0+r1JWgwGg/GJAkLSreYrGF4rbTCXNJvyut6K6hupJtm72GztLbWNmRF1Q4BAAEDBhrZ0FOHFUhTft4+"
    "JhhJo9+3/QL6vHWyI8jkatuFPQzrerzQ2HXrwm2hsYGjM5s+8qMWlbt6vbxngnO8rc3lqgAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA"
    "AAAAy+KIwZmU8DLmYglP3bPzrlpDaKkGu6VIJJwTOYQmRfUBAgIAAQwCAAAAuAsAAAAAAAA="
)

MEMO_TX_BASE64 = (
    "AV6w4Af9PSHhNsTSal4vlPF7Su9QXgCVyfDChHImJITLcS5BlNotKFeMoGw87VwjS3eNA2JCL+MEoReynCNbWAoBAAECBhrZ0FOHFUhTft4+"
    "JhhJo9+3/QL6vHWyI8jkatuFPQwFSlNQ+F3IgtYUpVZyeIopbd8eq6vQpgZ4iEky9O72oMviiMGZlPAy5mIJT92z865aQ2ipBrulSCScEzmE"
    "JkX1AQEBAAlUZXN0IG1lbW8="
)


@pytest.fixture
def signer():
    """Keypair whose public key is FEE_PAYER."""
    return Keypair.from_secret_key(SECRET_KEY)


@pytest.fixture
def fee_payer():
    return PublicKey(FEE_PAYER)


@pytest.fixture
def recipient():
    return PublicKey(RECIPIENT)


@pytest.fixture
def transfer_instruction(fee_payer, recipient):
    """Transfer of 3000 lamports from FEE_PAYER to RECIPIENT."""
    return SystemProgram.transfer(fee_payer, recipient, 3000)


@pytest.fixture
def random_key():
    """Factory for fresh, unrelated addresses."""
    def _make():
        return Keypair().public_key
    return _make


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no network access)")
