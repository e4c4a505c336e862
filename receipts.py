"""
receipts.py - Receipt Foundation Module

Canonical emit_receipt() for the habit-state engine. ALL modules import from here.
This is the single source of truth for receipt emission.

Never single hash. Always dual_hash (SHA256:BLAKE3).
"""

import hashlib
import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Union

import blake3

__all__ = [
    "dual_hash",
    "emit_receipt",
    "write_receipt_jsonl",
    "filter_receipts",
    "StopRule",
    "RECEIPT_SCHEMA",
]

# =============================================================================
# CONSTANTS
# =============================================================================

RECEIPT_SCHEMA = {
    "receipt_type": "str",
    "ts": "ISO8601",
    "tenant_id": "str",
    "payload_hash": "str (SHA256:BLAKE3)",
}


# =============================================================================
# CORE FUNCTION 1: dual_hash
# =============================================================================

def dual_hash(data: Union[bytes, str]) -> str:
    """
    SHA256:BLAKE3 - ALWAYS use this, never single hash.

    Args:
        data: Bytes or string to hash

    Returns:
        str: "sha256_hex:blake3_hex" format
    """
    if isinstance(data, str):
        data = data.encode()
    sha = hashlib.sha256(data).hexdigest()
    b3 = blake3.blake3(data).hexdigest()
    return f"{sha}:{b3}"


# =============================================================================
# CORE FUNCTION 2: emit_receipt
# =============================================================================

def emit_receipt(receipt_type: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Every state-changing engine step calls this.

    Args:
        receipt_type: Type identifier for this receipt
        data: Receipt payload (must include tenant_id or defaults to 'default')

    Returns:
        dict: Complete receipt with ts, tenant_id, payload_hash, and data fields
    """
    receipt = {
        "receipt_type": receipt_type,
        "ts": datetime.now(timezone.utc).isoformat(),
        "tenant_id": data.get("tenant_id", "default"),
        "payload_hash": dual_hash(json.dumps(data, sort_keys=True, default=str)),
        **data
    }
    return receipt


# =============================================================================
# CORE FUNCTION 3: write_receipt_jsonl
# =============================================================================

def write_receipt_jsonl(receipt: Dict[str, Any], fh) -> None:
    """
    Append receipt as single JSON line to file handle.

    Args:
        receipt: Receipt dict to write
        fh: File handle (must be open for writing)
    """
    line = json.dumps(receipt, separators=(",", ":"), default=str)
    fh.write(line + "\n")


def filter_receipts(ledger: List[Dict[str, Any]], receipt_type: str) -> List[Dict[str, Any]]:
    """Return receipts of one type, in ledger order."""
    return [r for r in ledger if r.get("receipt_type") == receipt_type]


# =============================================================================
# STOPRULE EXCEPTION
# =============================================================================

class StopRule(Exception):
    """Raised when stoprule triggers. Never catch silently."""
    pass
