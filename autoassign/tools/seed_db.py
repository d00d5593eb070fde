"""Seed database from CSV files.

Usage:
    python -m autoassign.tools.seed_db
    python -m autoassign.tools.seed_db --data-dir data  # overrides CSV_DATA_PATH
    python -m autoassign.tools.seed_db --drop  # drop existing data first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import uuid
from pathlib import Path

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from autoassign.adapters.csv_loader.loader import (
    load_agent_staff,
    load_countries,
    load_enquiries,
    load_sequence,
    load_staff,
)
from autoassign.adapters.persistence.database import async_session_factory
from autoassign.adapters.persistence.models import (
    AgentStaffAssignmentModel,
    AssignmentHistoryModel,
    AssignmentRuleModel,
    CountryModel,
    EnquiryModel,
    StaffModel,
    StaffSequenceModel,
    WorkflowEventModel,
)
from autoassign.config import settings
from autoassign.domain.value_objects.rule_toggles import ALL_RULES

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


async def _drop_data(session: AsyncSession) -> None:
    """Delete all data in correct order (respecting FK constraints)."""
    for model in [
        WorkflowEventModel,
        AssignmentHistoryModel,
        EnquiryModel,
        AgentStaffAssignmentModel,
        StaffSequenceModel,
        StaffModel,
        CountryModel,
        AssignmentRuleModel,
    ]:
        await session.execute(delete(model))
    await session.commit()
    logger.info("Dropped all existing data")


async def seed(data_dir: Path, drop: bool = False) -> dict[str, int]:
    """Main seed function. Returns counts of seeded records."""
    counts = {"countries": 0, "staff": 0, "sequence": 0, "agent_staff": 0, "enquiries": 0, "rules": 0}

    country_csv = _find_csv(data_dir, ["countries", "country"])
    staff_csv = _find_csv(data_dir, ["staff_members", "staff", "employees"], exclude=["sequence", "agent"])
    sequence_csv = _find_csv(data_dir, ["staff_sequence", "sequence"])
    agent_staff_csv = _find_csv(data_dir, ["agent_staff", "relationships"])
    enquiry_csv = _find_csv(data_dir, ["enquiries", "queries", "enquiry"])

    if not staff_csv:
        raise FileNotFoundError(f"No staff CSV found in {data_dir}. Expected something like staff.csv")

    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        # 1. Countries
        if country_csv:
            for cd in load_countries(country_csv):
                existing = await session.execute(
                    select(CountryModel).where(func.lower(CountryModel.name) == cd["name"].lower())
                )
                if existing.scalar_one_or_none():
                    logger.debug("Country '%s' already exists, skipping", cd["name"])
                    continue
                session.add(CountryModel(id=_uuid_or_new(cd["id"]), name=cd["name"], code=cd["code"]))
                counts["countries"] += 1
            await session.commit()

        # 2. Staff
        for sd in load_staff(staff_csv):
            existing = await session.execute(select(StaffModel).where(StaffModel.name == sd["name"]))
            if existing.scalar_one_or_none():
                logger.debug("Staff '%s' already exists, skipping", sd["name"])
                continue
            session.add(
                StaffModel(
                    id=_uuid_or_new(sd["id"]),
                    name=sd["name"],
                    email=sd["email"],
                    status=sd["status"],
                    operational_countries=sd["operational_countries"],
                )
            )
            counts["staff"] += 1
        await session.commit()

        staff_map = await _staff_map(session)

        # 3. Staff sequence
        if sequence_csv:
            for entry in load_sequence(sequence_csv):
                staff_id = _resolve_staff_id(entry["staff_ref"], staff_map)
                if staff_id is None:
                    logger.warning("Sequence entry '%s': staff not found, skipping", entry["staff_ref"])
                    continue
                existing = await session.execute(
                    select(StaffSequenceModel).where(StaffSequenceModel.staff_id == staff_id)
                )
                if existing.scalar_one_or_none():
                    continue
                session.add(
                    StaffSequenceModel(
                        staff_id=staff_id,
                        sequence_order=entry["sequence_order"],
                        auto_assign_enabled=entry["auto_assign_enabled"],
                    )
                )
                counts["sequence"] += 1
            await session.commit()

        # 4. Agent–staff relationships
        if agent_staff_csv:
            for pair in load_agent_staff(agent_staff_csv):
                staff_id = _resolve_staff_id(pair["staff_ref"], staff_map)
                if staff_id is None:
                    logger.warning("Relationship for agent '%s': staff '%s' not found", pair["agent_id"], pair["staff_ref"])
                    continue
                existing = await session.execute(
                    select(AgentStaffAssignmentModel).where(
                        AgentStaffAssignmentModel.agent_id == pair["agent_id"],
                        AgentStaffAssignmentModel.staff_id == staff_id,
                    )
                )
                if existing.scalar_one_or_none():
                    continue
                session.add(AgentStaffAssignmentModel(agent_id=pair["agent_id"], staff_id=staff_id))
                counts["agent_staff"] += 1
            await session.commit()

        # 5. Enquiries (if CSV exists)
        if enquiry_csv:
            for ed in load_enquiries(enquiry_csv):
                existing = await session.execute(
                    select(EnquiryModel).where(EnquiryModel.enquiry_id == ed["enquiry_id"])
                )
                if existing.scalar_one_or_none():
                    logger.debug("Enquiry '%s' already exists, skipping", ed["enquiry_id"])
                    continue
                session.add(
                    EnquiryModel(
                        enquiry_id=ed["enquiry_id"],
                        country_name=ed["country_name"],
                        agent_id=ed["agent_id"],
                        status=ed["status"],
                    )
                )
                counts["enquiries"] += 1
            await session.commit()
        else:
            logger.info("No enquiries CSV found — skipping enquiry import")

        # 6. Rule switches, all enabled
        for rule in ALL_RULES:
            existing = await session.execute(
                select(AssignmentRuleModel).where(AssignmentRuleModel.rule_name == rule.value)
            )
            if not existing.scalar_one_or_none():
                session.add(AssignmentRuleModel(rule_name=rule.value, enabled=True))
                counts["rules"] += 1
        await session.commit()

    logger.info("Seed complete: %s", counts)
    return counts


def _uuid_or_new(raw: str | None) -> str:
    if raw:
        try:
            return str(uuid.UUID(raw))
        except ValueError:
            logger.warning("Ignoring non-UUID id '%s'", raw)
    return str(uuid.uuid4())


async def _staff_map(session: AsyncSession) -> dict[str, str]:
    """Lowercased name and id → staff id."""
    result = await session.execute(select(StaffModel))
    mapping: dict[str, str] = {}
    for s in result.scalars():
        mapping[str(s.id).lower()] = str(s.id)
        if s.name:
            mapping[s.name.strip().lower()] = str(s.id)
    return mapping


def _resolve_staff_id(ref: str, staff_map: dict[str, str]) -> str | None:
    if not ref:
        return None
    return staff_map.get(ref.strip().lower())


def _find_csv(
    data_dir: Path, name_hints: list[str], exclude: list[str] | None = None
) -> Path | None:
    """Find a CSV file matching any of the name hints."""
    exclude = exclude or []
    files = sorted(data_dir.glob("*.csv"))
    for hint in name_hints:
        for f in files:
            fname_lower = f.stem.lower()
            if hint in fname_lower and not any(x in fname_lower for x in exclude):
                logger.info("Found CSV: %s (matched hint '%s')", f.name, hint)
                return f
    return None


async def _verify_data() -> None:
    """Print sanity checks after seeding."""
    async with async_session_factory() as session:
        staff = (await session.execute(select(StaffModel))).scalars().all()
        sequence = (await session.execute(select(StaffSequenceModel))).scalars().all()
        enquiries = (await session.execute(select(EnquiryModel))).scalars().all()

        print(f"\n{'='*50}")
        print("SEED VERIFICATION")
        print(f"{'='*50}")
        print(f"Staff:     {len(staff)}")
        print(f"Sequence:  {len(sequence)} ({sum(1 for s in sequence if s.auto_assign_enabled is not False)} enabled)")
        print(f"Enquiries: {len(enquiries)}")

        with_countries = sum(1 for s in staff if s.operational_countries)
        print(f"Staff with operational countries: {with_countries}/{len(staff)}")

        statuses: dict[str, int] = {}
        for e in enquiries:
            statuses[e.status] = statuses.get(e.status, 0) + 1
        print(f"Enquiry status distribution: {statuses}")
        print(f"{'='*50}\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seed the assignment database from CSV files")
    parser.add_argument(
        "--data-dir", type=str, default=settings.csv_data_path,
        help="Directory containing CSV files (default: CSV_DATA_PATH, else data)",
    )
    parser.add_argument(
        "--drop", action="store_true",
        help="Drop existing data before seeding",
    )
    parser.add_argument(
        "--verify-only", action="store_true",
        help="Only run verification, don't seed",
    )
    return parser


def main():
    args = _build_parser().parse_args()

    data_dir = Path(args.data_dir)
    if not args.verify_only and not data_dir.exists():
        logger.error("Data directory not found: %s", data_dir)
        sys.exit(1)

    if args.verify_only:
        asyncio.run(_verify_data())
    else:
        async def run_all():
            await seed(data_dir, drop=args.drop)
            await _verify_data()
        asyncio.run(run_all())


if __name__ == "__main__":
    main()
