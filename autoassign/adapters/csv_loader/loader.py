"""CSV loader — reads and normalizes the reference data files used for seeding."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from autoassign.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    normalize_status,
    parse_bool,
    parse_country_list,
)

logger = logging.getLogger(__name__)


def _sniff_dialect(sample: str) -> type[csv.Dialect] | csv.Dialect:
    """Detect the delimiter (comma/semicolon/tab) to support spreadsheet exports."""
    if not sample:
        return csv.get_dialect("excel")

    first_line = sample.splitlines()[0]
    delims = [",", ";", "\t"]
    counts = {d: first_line.count(d) for d in delims}
    best_delim = max(counts, key=counts.get)

    if counts[best_delim] > 0:
        class DynamicDialect(csv.excel):
            delimiter = best_delim
        return DynamicDialect

    return csv.get_dialect("excel")


def _read_csv(file_path: Path, encoding: str = "utf-8-sig") -> list[dict[str, str | None]]:
    """Read a CSV file with BOM handling and column normalization.

    Returns:
        List of dicts keyed by normalized column names.
    """
    with open(file_path, encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        reader = csv.DictReader(f, dialect=_sniff_dialect(sample))
        if reader.fieldnames is None:
            raise ValueError(f"CSV file {file_path} has no header row")

        col_map = {col: normalize_column_name(col) for col in reader.fieldnames}
        rows = []
        for raw_row in reader:
            row = {col_map[k]: clean_string(v) for k, v in raw_row.items() if k is not None}
            rows.append(row)

    logger.info("Loaded %d rows from %s (columns: %s)", len(rows), file_path.name, list(col_map.values()))
    return rows


def load_countries(file_path: Path) -> list[dict]:
    """Columns: id (optional), name / country, code / iso_code."""
    countries = []
    for row in _read_csv(file_path):
        name = row.get("name") or row.get("country") or row.get("country_name")
        if not name:
            continue
        countries.append({
            "id": row.get("id"),
            "name": name,
            "code": (row.get("code") or row.get("iso_code") or "").upper() or None,
        })
    logger.info("Parsed %d countries", len(countries))
    return countries


def load_staff(file_path: Path) -> list[dict]:
    """Columns: id (optional), name, email, status, operational_countries / countries."""
    staff = []
    for row in _read_csv(file_path):
        name = row.get("name") or row.get("full_name") or row.get("staff_name")
        if not name:
            continue
        staff.append({
            "id": row.get("id"),
            "name": name,
            "email": row.get("email"),
            "status": normalize_status(row.get("status")),
            "operational_countries": parse_country_list(
                row.get("operational_countries") or row.get("countries")
            ),
        })
    logger.info("Parsed %d staff", len(staff))
    return staff


def load_sequence(file_path: Path) -> list[dict]:
    """Columns: staff (id or name), sequence_order / order, auto_assign_enabled / enabled."""
    entries = []
    for row in _read_csv(file_path):
        staff_ref = row.get("staff_id") or row.get("staff") or row.get("staff_name") or row.get("name")
        if not staff_ref:
            continue
        entries.append({
            "staff_ref": staff_ref,
            "sequence_order": _parse_int(row.get("sequence_order") or row.get("order")),
            "auto_assign_enabled": parse_bool(
                row.get("auto_assign_enabled") or row.get("enabled"), default=True
            ),
        })
    logger.info("Parsed %d sequence entries", len(entries))
    return entries


def load_agent_staff(file_path: Path) -> list[dict]:
    """Columns: agent_id / agent, staff (id or name)."""
    pairs = []
    for row in _read_csv(file_path):
        agent_id = row.get("agent_id") or row.get("agent")
        staff_ref = row.get("staff_id") or row.get("staff") or row.get("staff_name")
        if agent_id and staff_ref:
            pairs.append({"agent_id": agent_id, "staff_ref": staff_ref})
    logger.info("Parsed %d agent–staff pairs", len(pairs))
    return pairs


def load_enquiries(file_path: Path) -> list[dict]:
    """Columns: enquiry_id / id, country / destination / country_name, agent_id, status."""
    enquiries = []
    for row in _read_csv(file_path):
        enquiry_id = row.get("enquiry_id") or row.get("id") or row.get("reference")
        if not enquiry_id:
            continue
        enquiries.append({
            "enquiry_id": enquiry_id,
            "country_name": row.get("country_name") or row.get("destination") or row.get("country"),
            "agent_id": row.get("agent_id") or row.get("agent"),
            "status": normalize_status(row.get("status"), default="new"),
        })
    logger.info("Parsed %d enquiries", len(enquiries))
    return enquiries


def _parse_int(value: str | None) -> int | None:
    if not value:
        return None
    try:
        # handle "4", "4.0"
        return int(float(str(value).replace(",", ".").strip()))
    except ValueError:
        return None
