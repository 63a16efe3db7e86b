"""Core constants: pagination bounds, pool limits and wire formats.

Single source of truth for literal values shared by the handler, the
connection provider and the transport.
"""

# ListUsers pagination: limit <= 0 falls back to the default, larger values
# are capped at the maximum; negative offsets become 0.
DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

# Connection pool: idle connections kept and maximum connection age.
DEFAULT_POOL_SIZE = 25
DEFAULT_CONNECTION_MAX_LIFETIME_SECONDS = 5 * 60

# bcrypt work factor for stored password hashes.
DEFAULT_BCRYPT_ROUNDS = 12

# RFC 3339 (second precision, UTC) used for every timestamp on the wire.
WIRE_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Dependent session store cleared by a hard delete.
USERS_TABLE = "users"
SESSIONS_TABLE = "sessions"
