from dagster import job
from ..ops.akeyless import akeyless_operations, load_akeyless_records


# Load records from a JSON file and run each one against Akeyless
@job(
    name="akeyless_job",
    description="Run Akeyless secret and folder operations for a batch of records",
)
def akeyless_job():
    akeyless_operations(load_akeyless_records())
