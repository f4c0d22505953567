from __future__ import annotations

# Single source of truth for static constants of the SAM v2 protocol.

SOAP_ENVELOPE_NS = "http://schemas.xmlsoap.org/soap/envelope/"
DICS_NS = "urn:be:fgov:ehealth:dics:protocol:v5"

# Business error codes the registry uses to signal an empty result set.
NO_RESULTS_FAULT_CODES = frozenset({"1003", "1004", "1007", "1008", "1012", "1016", "1017"})

# ATC code length -> classification level.
ATC_LEVEL_BY_LENGTH = {1: 1, 3: 2, 4: 3, 5: 4}
ATC_MIN_SUBSTANCE_LENGTH = 7
# Classification level -> canonical code length of that level.
ATC_CODE_LENGTH_BY_LEVEL = {1: 1, 2: 3, 3: 4, 4: 5}

COPAYMENT_REGIME_TYPES = {
    "1": "PREFERENTIAL",
    "2": "REGULAR",
}

COMPANY_ACTOR_NR_WIDTH = 5

PROXY_RESPONSE_HEADERS = {
    "Content-Disposition": "inline",
    "Cache-Control": "public, max-age=86400",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Content-Type-Options": "nosniff",
}

# Shortest free-text search the registry is asked to run.
MIN_ATC_QUERY_LENGTH = 2
MIN_NAME_QUERY_LENGTH = 3

CNK_LENGTH = 7
