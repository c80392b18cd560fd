#!/usr/bin/env python3
"""Print a signed session token for each role, for manual API testing."""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.api.deps import issue_smoke_token
from src.domain.models import Identity
from src.domain.roles import Role

for index, role in enumerate(Role, start=1):
    identity = Identity(
        id=f"smoke-{role.value}",
        employee_id=str(9000000 + index),
        first_name="Smoke",
        last_name=role.value,
        role=role,
    )
    print(f"{role.value}:\n{issue_smoke_token(identity)}\n")
