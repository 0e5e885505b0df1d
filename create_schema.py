#!/usr/bin/env python3
"""Create the technicians/tickets tables and seed the technician directory."""

import argparse
import os
import sys
from pathlib import Path

import boto3
from sqlalchemy import create_engine, select

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from models.technician import TechnicianStatus  # noqa: E402
from repositories.postgres_repo import _secret_to_db_url  # noqa: E402
from repositories.schema import metadata, technicians  # noqa: E402
from repositories.technician_repo import TechnicianRepository  # noqa: E402

DEFAULT_TECHNICIANS = ("Alex Morgan", "Priya Shah", "Daniel Okafor", "Maria Lopez")


def _database_url(stack_name: str, region: str) -> str:
    """DATABASE_URL if set, else the RDS secret exported by the stack."""
    if os.environ.get("DATABASE_URL"):
        return os.environ["DATABASE_URL"]

    cf = boto3.client("cloudformation", region_name=region)
    try:
        resp = cf.describe_stacks(StackName=stack_name)
        outputs = {o["OutputKey"]: o["OutputValue"] for o in resp["Stacks"][0]["Outputs"]}
        secret_arn = outputs["DbSecretArn"]
    except Exception as e:
        print(f"Error reading stack outputs: {e}")
        sys.exit(1)

    url = _secret_to_db_url(secret_arn)
    if not url:
        print("Could not build a database URL from the stack secret")
        sys.exit(1)
    return url


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--stack-name", default="FacilityOpsStack-dev")
    parser.add_argument("--region", default=os.environ.get("AWS_REGION", "eu-west-2"))
    parser.add_argument(
        "--technician",
        action="append",
        dest="technicians",
        help="Technician name to seed (repeatable); defaults to a sample roster",
    )
    args = parser.parse_args()

    engine = create_engine(_database_url(args.stack_name, args.region))
    metadata.create_all(engine)
    print("Tables created (or already present).")

    with engine.connect() as conn:
        existing = {row.name for row in conn.execute(select(technicians.c.name))}

    repo = TechnicianRepository(engine)
    for name in args.technicians or DEFAULT_TECHNICIANS:
        if name in existing:
            print(f"Technician already present: {name}")
            continue
        technician = repo.add(name, TechnicianStatus.AVAILABLE)
        print(f"Seeded technician {technician.name} ({technician.id})")


if __name__ == "__main__":
    main()
