"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from collab_access.adapters.supabase_admission_repository import (
    SupabaseAdmissionRepository,
)
from collab_access.adapters.supabase_audit_repository import SupabaseAuditRepository
from collab_access.adapters.supabase_identity_provider import SupabaseIdentityProvider
from collab_access.adapters.supabase_project_repository import (
    SupabaseProjectRepository,
)
from collab_access.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from collab_access.adapters.supabase_share_repository import SupabaseShareRepository
from collab_access.config import Settings
from collab_access.services.audit import AuditService
from collab_access.services.codes import SecretsCodeGenerator
from collab_access.services.gateway import GuestAccessGateway
from collab_access.services.identity import IdentityProvider
from collab_access.services.sessions import SessionAuthority
from collab_access.services.shares import ShareAuthority


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_provider: IdentityProvider
    session_authority: SessionAuthority
    share_authority: ShareAuthority
    gateway: GuestAccessGateway


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    project_repository = SupabaseProjectRepository(supabase_client)
    admission_repository = SupabaseAdmissionRepository(supabase_client)
    audit_service = AuditService(SupabaseAuditRepository(supabase_client))
    session_authority = SessionAuthority(
        repository=SupabaseSessionRepository(supabase_client),
        project_directory=project_repository,
        code_generator=SecretsCodeGenerator(resolved_settings.access_code_length),
        audit_service=audit_service,
        max_attempts=resolved_settings.code_generation_attempts,
    )
    share_authority = ShareAuthority(
        repository=SupabaseShareRepository(supabase_client),
        project_directory=project_repository,
        code_generator=SecretsCodeGenerator(resolved_settings.share_key_length),
        audit_service=audit_service,
        admission_repository=admission_repository,
        max_attempts=resolved_settings.code_generation_attempts,
    )
    gateway = GuestAccessGateway(
        session_authority=session_authority,
        share_authority=share_authority,
        admission_repository=admission_repository,
        project_store=project_repository,
    )
    return AppContainer(
        settings=resolved_settings,
        identity_provider=SupabaseIdentityProvider(supabase_client),
        session_authority=session_authority,
        share_authority=share_authority,
        gateway=gateway,
    )
