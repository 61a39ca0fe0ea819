"""Global test fixtures."""

import os

import logfire

# Keep Config away from real stores before any test module imports the app
# This must happen at module load time, not in a fixture
os.environ.setdefault("MDGATE_DATABASE__URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("MDGATE_DATABASE__AUTO_CREATE", "false")

logfire.configure(send_to_logfire=False, console=False)
