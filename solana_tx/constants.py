"""Wire protocol constants"""

PUBLIC_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64
BLOCKHASH_LENGTH = 32
HEADER_LENGTH = 3

# Account indices and lookup indices are single bytes on the wire
MAX_ACCOUNT_INDEX = 255

# High bit of the first byte marks a versioned transaction
VERSION_PREFIX_MASK = 0x80
