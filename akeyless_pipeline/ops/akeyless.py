from dagster import Config, Failure, OpExecutionContext, op
import json
from pydantic import Field

from ..akeyless import AkeylessError


class LoadAkeylessRecordsConfig(Config):
    path: str = Field(description="JSON file with a list of Akeyless operation records")


class AkeylessOperationsConfig(Config):
    continue_on_fail: bool = Field(
        default=False,
        description="Emit {'error': ...} for failing records instead of failing the run",
    )


@op(
    name="load_akeyless_records",
    description="Read Akeyless operation records from a JSON file",
)
def load_akeyless_records(context: OpExecutionContext, config: LoadAkeylessRecordsConfig) -> list:
    with open(config.path, encoding="utf-8") as f:
        records = json.load(f)

    # A single record object is treated as a batch of one
    if isinstance(records, dict):
        records = [records]
    if not isinstance(records, list):
        raise Failure(description=f"Expected a JSON list of records in {config.path}")

    context.log.info(f"Loaded {len(records)} Akeyless record(s) from {config.path}")
    return records


@op(
    name="akeyless_operations",
    description="Run one Akeyless operation per input record (authenticate, then dispatch)",
    required_resource_keys={"akeyless"},
    tags={"kind": "akeyless"},
)
def akeyless_operations(
    context: OpExecutionContext,
    config: AkeylessOperationsConfig,
    records: list,
) -> list:
    """Execute the records in order and return one output per record.

    Outputs keep the input order; a failed record yields {"error": message}
    when continue_on_fail is set.
    """
    akeyless = context.resources.akeyless

    for index, record in enumerate(records):
        operation = record.get("operation") if isinstance(record, dict) else None
        context.log.info(f"Record {index}: {operation}")

    try:
        results = akeyless.run_batch(records, continue_on_fail=config.continue_on_fail)
    except AkeylessError as e:
        context.log.error(f"Akeyless batch aborted: {e}")
        raise Failure(description=str(e)) from e

    for result in results:
        if not result.ok:
            context.log.warning(f"Record {result.item} failed: {result.error}")

    return [result.to_output() for result in results]
