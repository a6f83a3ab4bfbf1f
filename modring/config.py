"""Global configuration for modring."""

import re

# ---------- Well-known moduli ----------
# NTT-friendly prime: 998244353 = 119 * 2**23 + 1
MOD998244353 = 998_244_353
MOD1000000007 = 1_000_000_007
MOD1000000009 = 1_000_000_009

# ---------- Text parsing ----------
# Signed decimal integer, ASCII digits only.  No whitespace, no underscores.
DECIMAL_PATTERN = re.compile(r"[+-]?[0-9]+")
