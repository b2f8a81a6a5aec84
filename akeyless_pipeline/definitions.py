from dagster import Definitions
import os
from dotenv import load_dotenv

from .jobs.akeyless import akeyless_job
from .resources import AkeylessResource

# Load environment variables from .env file in parent directory
dotenv_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), '.env')
load_dotenv(dotenv_path)

defs = Definitions(
    jobs=[
        akeyless_job,
    ],
    resources={
        "akeyless": AkeylessResource(),
    },
)
