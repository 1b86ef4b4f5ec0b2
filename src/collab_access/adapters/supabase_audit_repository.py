"""Supabase repository for the capability audit trail."""

from dataclasses import dataclass

from supabase import Client

from collab_access.services.audit import AuditEvent, AuditRepository


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Appends audit events to the shared ``audit_events`` table."""

    client: Client

    def append(self, event: AuditEvent) -> None:
        row = {
            "user_id": str(event.actor_id),
            "entity_type": event.entity_type,
            "entity_id": str(event.entity_id),
            "event_type": event.event_type,
            "before_json": event.before,
            "after_json": event.after,
        }
        self.client.table("audit_events").insert(row).execute()
