"""Centralized constants for RiskGate."""


# ===== RISK SCORING =====
class RiskConstants:
    SCORE_MIN = 0
    SCORE_MAX = 100

    # Additive factor weights
    NEW_DEVICE_WEIGHT = 40
    NEW_NETWORK_WEIGHT = 20
    UNUSUAL_HOUR_WEIGHT = 15
    VELOCITY_WEIGHT = 10

    # Nocturnal window [start, end) in local hours
    UNUSUAL_HOUR_START = 0
    UNUSUAL_HOUR_END = 5

    VELOCITY_WINDOW_SECONDS = 60

    # Residual jitter drawn from [0, JITTER_MAX)
    JITTER_MAX = 10

    # Level thresholds (inclusive lower bounds)
    MEDIUM_THRESHOLD = 40
    HIGH_THRESHOLD = 70

    POLICY_VERSION = "1.0.0"


# ===== FACTOR LABELS =====
class FactorNames:
    NEW_DEVICE = "New device detected"
    NEW_NETWORK = "New IP address"
    UNUSUAL_HOUR = "Unusual login time (late night)"
    VELOCITY = "High frequency login attempt"
    VERIFIED_BY_CODE = "Verified via one-time code"


# ===== LEDGER =====
class LedgerConstants:
    FILE_SUFFIX = ".jsonl"
    HASH_ALGORITHM = "sha256"


# ===== ACCOUNT RECOVERY =====
class RecoveryConstants:
    CODE_MIN = 100000
    CODE_MAX = 999999
    CODE_TTL_SECONDS = 300
    MAX_FAILED_ATTEMPTS = 5


# ===== CREDENTIALS =====
class CredentialConstants:
    HASH_NAME = "sha256"
    PBKDF2_ITERATIONS = 100_000
    SALT_BYTES = 16


# ===== DEFAULTS FOR UNRESOLVED ORIGINS =====
class OriginConstants:
    UNKNOWN_ADDRESS = "127.0.0.1"
    UNKNOWN_LOCATION = "Unknown Location"
    UNKNOWN_DEVICE = "Unknown Browser on Unknown OS"
