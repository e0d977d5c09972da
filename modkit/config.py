"""Global configuration for modkit."""

import os

# ---------- Frequently used prime moduli ----------
MOD998244353_VALUE = 998_244_353     # 119 * 2^23 + 1, NTT-friendly
MOD1000000007_VALUE = 1_000_000_007

# Residues are stored in one unsigned machine word, so a modulus must be
# strictly below 2^64.
MAX_MODULUS = 2**64

# ---------- Defaults (env vars override) ----------
DEFAULT_MODULUS = int(os.environ.get("MODKIT_MODULUS", MOD998244353_VALUE))
DEFAULT_TABLE_BOUND = int(os.environ.get("MODKIT_TABLE_BOUND", 10**6))

# ---------- HTTP service limits ----------
MAX_SERVICE_TABLE_BOUND = int(os.environ.get("MODKIT_MAX_SERVICE_TABLE_BOUND", 5_000_000))
MAX_CACHED_TABLES = int(os.environ.get("MODKIT_MAX_CACHED_TABLES", 4))
# Oldest journal entries are dropped beyond this many
MAX_JOURNAL_ENTRIES = int(os.environ.get("MODKIT_MAX_JOURNAL_ENTRIES", 10_000))

# ---------- Demo client ----------
SERVICE_URL = os.environ.get("MODKIT_SERVICE_URL", "http://localhost:8000")
