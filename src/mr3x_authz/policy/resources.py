"""Actor and agreement snapshots consumed by the agreement policy.

Both types are built fresh per check from caller-supplied data (the
session and the resource as returned by the backend) and are never
mutated or persisted here.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from mr3x_authz.roles.registry import Role


class AgreementStatus(str, Enum):
    """Lifecycle states of an agreement."""

    RASCUNHO = "RASCUNHO"
    PENDENTE_ASSINATURA = "PENDENTE_ASSINATURA"
    ATIVO = "ATIVO"
    APROVADO = "APROVADO"
    REJEITADO = "REJEITADO"
    CANCELADO = "CANCELADO"
    ENCERRADO = "ENCERRADO"

    @classmethod
    def parse(cls, value: object) -> AgreementStatus | None:
        """Return the status named by *value*, or ``None`` if malformed."""
        if isinstance(value, AgreementStatus):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class AgreementAction(str, Enum):
    """Verbs a user may perform on an agreement.

    Declaration order is the canonical order of action menus.
    """

    VIEW = "VIEW"
    CREATE = "CREATE"
    EDIT = "EDIT"
    DELETE = "DELETE"
    SIGN = "SIGN"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    CANCEL = "CANCEL"
    SEND_FOR_SIGNATURE = "SEND_FOR_SIGNATURE"

    @classmethod
    def from_value(cls, value: object) -> AgreementAction:
        """Return the action named by *value* in any case.

        Raises
        ------
        ValueError
            If *value* does not name an agreement action.
        """
        if isinstance(value, AgreementAction):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise ValueError(f"{value!r} is not a valid AgreementAction")


class SignatureType(str, Enum):
    """Signer positions on an agreement."""

    TENANT = "TENANT"
    OWNER = "OWNER"
    AGENCY = "AGENCY"
    BROKER = "BROKER"
    WITNESS = "WITNESS"

    @classmethod
    def from_value(cls, value: object) -> SignatureType:
        """Return the slot named by *value* in any case; raises ValueError."""
        if isinstance(value, SignatureType):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise ValueError(f"{value!r} is not a valid SignatureType")


def _pick(data: Mapping[str, object], *keys: str) -> str | None:
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return str(value)
    return None


@dataclass(frozen=True)
class UserContext:
    """Authenticated actor as seen by the permission checks.

    Attributes
    ----------
    id:
        User identifier.
    role:
        A :class:`Role` or the raw role string from the session. Unknown
        strings are kept as-is and treated as zero-capability.
    agency_id, broker_id:
        Optional affiliations.
    license_id:
        Optional professional license (CRECI).
    """

    id: str
    role: Role | str
    agency_id: str | None = None
    broker_id: str | None = None
    license_id: str | None = None

    @property
    def resolved_role(self) -> Role | None:
        return Role.parse(self.role)

    @classmethod
    def from_session(cls, session: Mapping[str, object]) -> UserContext:
        """Build a context from a session/user payload.

        Accepts camelCase (``agencyId``, ``brokerId``, ``creci``) and
        snake_case keys. The role is normalised when recognised.
        """
        raw_role = session.get("role", "")
        role = Role.parse(raw_role)
        return cls(
            id=str(session.get("id", "") or ""),
            role=role if role is not None else str(raw_role or ""),
            agency_id=_pick(session, "agency_id", "agencyId"),
            broker_id=_pick(session, "broker_id", "brokerId"),
            license_id=_pick(session, "license_id", "licenseId", "creci"),
        )


@dataclass(frozen=True)
class AgreementContext:
    """Read-only projection of an agreement relevant to authorization."""

    status: AgreementStatus | str
    tenant_id: str | None = None
    owner_id: str | None = None
    agency_id: str | None = None
    broker_id: str | None = None
    tenant_signature: str | None = None
    owner_signature: str | None = None
    agency_signature: str | None = None
    broker_signature: str | None = None
    witness_signature: str | None = None

    @property
    def resolved_status(self) -> AgreementStatus | None:
        return AgreementStatus.parse(self.status)

    def signature_for(self, slot: SignatureType) -> str | None:
        return getattr(self, f"{slot.value.lower()}_signature")

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> AgreementContext:
        """Build a snapshot from an API payload (camelCase or snake_case)."""
        raw_status = data.get("status", "")
        status = AgreementStatus.parse(raw_status)
        return cls(
            status=status if status is not None else str(raw_status or ""),
            tenant_id=_pick(data, "tenant_id", "tenantId"),
            owner_id=_pick(data, "owner_id", "ownerId"),
            agency_id=_pick(data, "agency_id", "agencyId"),
            broker_id=_pick(data, "broker_id", "brokerId"),
            tenant_signature=_pick(data, "tenant_signature", "tenantSignature"),
            owner_signature=_pick(data, "owner_signature", "ownerSignature"),
            agency_signature=_pick(data, "agency_signature", "agencySignature"),
            broker_signature=_pick(data, "broker_signature", "brokerSignature"),
            witness_signature=_pick(data, "witness_signature", "witnessSignature"),
        )
