import os

# The module-level app reads its settings on import; configure logins first
os.environ["AUTH_USERS"] = "alice:alice-pw:USER,bob:bob-pw:USER,root:root-pw:USER+ADMIN"
os.environ.setdefault("LOG_LEVEL", "DEBUG")
