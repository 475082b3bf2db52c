"""Root conftest: shared test configuration."""

import os

# Ensure tests never resolve a real Cloud KMS key
os.environ.setdefault(
    "KMS_KEY_RESOURCE",
    "projects/test/locations/global/keyRings/test-ring/cryptoKeys/test-key",
)
