import uuid

def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:16]}"

def new_secret() -> str:
    return uuid.uuid4().hex

"""
ID generation utilities & it provides:
- Plan IDs
- Participant IDs
- Participant secrets (full 128-bit uuid4, never truncated)

The main purpose:
Consistent identifier creation across system.
"""
