"""Cloud service catalog — AWS / Azure / GCP offerings per component type.

Tracks lifecycle status (active, deprecated, preview, end-of-life) and the
successor to migrate to, so a topology can be checked for retired services.
"""

from typing import Optional

from infraflow.knowledge.loader import load_entries
from infraflow.knowledge.models import CloudService, DeprecationNotice
from infraflow.models.topology import Topology

CLOUD_SERVICES: tuple[CloudService, ...] = load_entries("cloud_services.json", CloudService)

_URGENCY_ORDER = {"critical": 0, "high": 1, "medium": 2}


def cloud_services_for_component(component: str, provider: Optional[str] = None) -> list[CloudService]:
    """Services implementing `component`, optionally restricted to one provider."""
    return [
        s for s in CLOUD_SERVICES
        if s.component_type == component and (provider is None or s.provider == provider)
    ]


def deprecated_cloud_services() -> list[CloudService]:
    """Services no longer recommended (deprecated or end-of-life)."""
    return [s for s in CLOUD_SERVICES if s.status in ("deprecated", "end-of-life")]


def active_services(component: str) -> list[CloudService]:
    """Active services across all providers, for side-by-side comparison."""
    return [s for s in CLOUD_SERVICES if s.component_type == component and s.status == "active"]


def alternatives(service: CloudService) -> list[CloudService]:
    """Active same-provider replacements for a non-active service."""
    if service.status == "active":
        return []
    return [
        s for s in CLOUD_SERVICES
        if s.provider == service.provider
        and s.component_type == service.component_type
        and s.status == "active"
        and s.id != service.id
    ]


def deprecation_warnings(topology: Topology) -> list[DeprecationNotice]:
    """Warnings for catalog services whose component type the topology uses.

    End-of-life services are critical, deprecated ones high. Sorted by urgency.
    """
    present = topology.present_types()
    notices: list[DeprecationNotice] = []

    for svc in CLOUD_SERVICES:
        if svc.component_type not in present:
            continue

        if svc.status == "end-of-life":
            action = f"{svc.successor_ko}(으)로 마이그레이션하세요." if svc.successor_ko else "대체 서비스를 검토하세요."
            notices.append(DeprecationNotice(
                service=svc,
                urgency="critical",
                message_ko=f"{svc.service_name_ko}은(는) 서비스가 종료되었습니다. {action}",
            ))
        elif svc.status == "deprecated":
            action = f"{svc.successor_ko}(으)로 전환을 권장합니다." if svc.successor_ko else "대체 서비스를 검토하세요."
            notices.append(DeprecationNotice(
                service=svc,
                urgency="high",
                message_ko=f"{svc.service_name_ko}은(는) 더 이상 사용되지 않습니다. {action}",
            ))

    return sorted(notices, key=lambda n: _URGENCY_ORDER[n.urgency])
