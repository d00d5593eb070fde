"""Enquiry entity — a travel request waiting for (or holding) a staff assignee."""

from dataclasses import dataclass

from autoassign.domain.value_objects.enums import EnquiryStatus


@dataclass
class Enquiry:
    id: str
    enquiry_id: str
    destination_country: str = ""
    agent_uuid: str | None = None
    agent_legacy_id: str | None = None
    status: str = EnquiryStatus.NEW.value
    assigned_to: str | None = None

    def country_name(self) -> str:
        return (self.destination_country or "").strip()

    def agent_reference(self) -> str | None:
        """Agent ID used for relationship lookups.

        The UUID wins over the legacy ID; blank values count as missing.
        """
        if self.agent_uuid:
            raw = str(self.agent_uuid)
        elif self.agent_legacy_id is not None:
            raw = str(self.agent_legacy_id)
        else:
            raw = ""
        raw = raw.strip()
        return raw or None
