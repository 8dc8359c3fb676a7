"""
Default settings for TinyBloom.

Plain module-level constants; nothing here is read from the environment.
"""

import string

# Hashing
DEFAULT_BASE_SEED = 0x9747B28C
DEFAULT_HASH_FAMILY = "murmur3"
HASH_FAMILIES = ("murmur3", "fnv1a")

# Trial harness
DEFAULT_KEY_COUNT = 50000
DEFAULT_KEY_LENGTH = 8
KEY_CHARSET = string.ascii_lowercase + string.ascii_uppercase + string.digits
