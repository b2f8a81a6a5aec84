import os
from dotenv import load_dotenv
import os.path

# Load environment variables from .env file (one level up)
dotenv_path = os.path.join(os.path.dirname(__file__), '..', '.env')
load_dotenv(dotenv_path=dotenv_path)  # .env is in root directory


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# --- Akeyless API ---
AKEYLESS_DEFAULT_URL = "https://api.akeyless.io"
AKEYLESS_DEFAULT_TIMEOUT_MS = 30000
AKEYLESS_DEFAULT_DYNAMIC_SECRET_TIMEOUT = 15  # seconds, sent to the vendor

# Constant fields of the /auth request body, unrelated to the credential
AKEYLESS_AUTH_ACCESS_TYPE = "access_key"
AKEYLESS_AUTH_GCP_AUDIENCE = "akeyless.io"
AKEYLESS_AUTH_OCI_AUTH_TYPE = "apikey"

# --- Non-secret defaults for the akeyless resource ---
# AKEYLESS_ACCESS_ID, AKEYLESS_ACCESS_KEY and AKEYLESS_TOKEN are read by the
# resource through EnvVar so their values never reach the config schema.
AKEYLESS_URL = os.environ.get('AKEYLESS_URL', AKEYLESS_DEFAULT_URL)
AKEYLESS_AUTH_METHOD = os.environ.get('AKEYLESS_AUTH_METHOD', 'accessKey')
AKEYLESS_ALLOW_INSECURE_TLS = _env_flag('AKEYLESS_ALLOW_INSECURE_TLS')
AKEYLESS_TIMEOUT_MS = int(os.environ.get('AKEYLESS_TIMEOUT_MS', AKEYLESS_DEFAULT_TIMEOUT_MS))

# Path to .env file for configuration
ENV_PATH = dotenv_path
