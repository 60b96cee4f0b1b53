"""Infrastructure anti-patterns — detection predicates and remediation guidance.

22 anti-patterns, each with a pure detection predicate over a Topology:
    AP-SEC   critical security flaws
    AP-HA    high availability gaps
    AP-PERF  performance gaps
    AP-ARCH  architecture design flaws

Predicates must tolerate an empty topology and return False for it. They
check direct connectivity and type membership only, never paths.
"""

from infraflow.knowledge.evaluator import detect_violations
from infraflow.knowledge.models import AntiPattern, AntiPatternSeverity, KnowledgeSource, TrustMetadata
from infraflow.knowledge.sources import (
    AWS_WAF_PERF,
    AWS_WAF_REL,
    AZURE_CAF,
    CIS_V8_12,
    CNCF_SECURITY,
    NIST_800_41,
    NIST_800_44,
    NIST_800_53,
    NIST_800_63B,
    NIST_800_77,
    NIST_800_81,
    NIST_800_123,
    NIST_800_144,
    OWASP_TOP10,
    OWASP_WSTG,
    SANS_FIREWALL,
    with_section,
)
from infraflow.models.topology import AUTH_TYPES, COMPUTE_TYPES, Topology

# Commonly used type groups
INTERNAL_ONLY_TYPES = ("ldap-ad", "san-nas", "backup", "cache", "db-server")
STORAGE_NODE_TYPES = ("san-nas", "object-storage", "backup", "cache", "storage")
INTERNET_FACING_TYPES = ("web-server", "app-server", "load-balancer", "cdn")
LB_FRONTEND_TYPES = ("internet", "user", "firewall", "waf", "cdn", "dns", "router")


def _trust(confidence: float, *sources: KnowledgeSource) -> TrustMetadata:
    return TrustMetadata(confidence=confidence, sources=sources, last_reviewed_at="2026-02-09")


def _is_public(topology: Topology) -> bool:
    return topology.has_type("internet") or topology.has_type("user")


# ──────────────────────────────────────────────────────────────────────
# DETECTION PREDICATES
# ──────────────────────────────────────────────────────────────────────

def _db_direct_internet(topology: Topology) -> bool:
    if not topology.has_type("db-server") or not topology.has_type("internet"):
        return False
    return topology.is_directly_connected("db-server", "internet")


def _no_firewall(topology: Topology) -> bool:
    if not topology.has_any_type(COMPUTE_TYPES):
        return False
    return not topology.has_type("firewall")


def _web_without_waf(topology: Topology) -> bool:
    if not topology.has_type("web-server") or not _is_public(topology):
        return False
    return not topology.has_type("waf")


def _internal_services_exposed(topology: Topology) -> bool:
    if not topology.has_type("internet"):
        return False
    return any(
        topology.has_type(t) and topology.is_directly_connected(t, "internet")
        for t in INTERNAL_ONLY_TYPES
    )


def _no_encryption_gateway(topology: Topology) -> bool:
    if not topology.has_type("internet") or not topology.has_any_type(INTERNET_FACING_TYPES):
        return False
    has_vpn = topology.has_type("vpn-gateway")
    has_encrypted_flow = any(c.flow_type == "encrypted" for c in topology.connections)
    return not has_vpn and not has_encrypted_flow


def _unprotected_database(topology: Topology) -> bool:
    return any(db.tier in ("dmz", "external") for db in topology.nodes_of_type("db-server"))


def _no_access_control(topology: Topology) -> bool:
    if not topology.has_any_type(COMPUTE_TYPES):
        return False
    return not topology.has_any_type(AUTH_TYPES)


def _single_load_balancer(topology: Topology) -> bool:
    return topology.count_type("load-balancer") == 1 and topology.count_type("web-server") >= 2


def _no_backup(topology: Topology) -> bool:
    return topology.has_type("db-server") and not topology.has_type("backup")


def _no_disaster_recovery(topology: Topology) -> bool:
    if len(topology.nodes) < 3:  # too small to matter
        return False
    return not topology.has_type("backup") and not topology.has_type("cache")


def _single_database(topology: Topology) -> bool:
    multi_tier = topology.has_type("web-server") and topology.has_type("app-server")
    return topology.count_type("db-server") == 1 and multi_tier


def _no_health_check_path(topology: Topology) -> bool:
    lb_ids = {n.id for n in topology.nodes_of_type("load-balancer")}
    if not lb_ids:
        return False

    backend_links = 0
    for conn in topology.connections:
        if conn.source in lb_ids:
            other_id = conn.target
        elif conn.target in lb_ids:
            other_id = conn.source
        else:
            continue
        other = topology.node_by_id(other_id)
        if other is not None and other.type not in LB_FRONTEND_TYPES:
            backend_links += 1

    return backend_links <= 1


def _no_cache(topology: Topology) -> bool:
    if not topology.has_type("db-server") or not topology.has_type("app-server"):
        return False
    return not topology.has_type("cache")


def _no_cdn(topology: Topology) -> bool:
    if not topology.has_type("web-server") or not _is_public(topology):
        return False
    return not topology.has_type("cdn")


def _no_load_balancing(topology: Topology) -> bool:
    return topology.count_type("web-server") >= 2 and not topology.has_type("load-balancer")


def _web_direct_db(topology: Topology) -> bool:
    if not topology.has_type("web-server") or not topology.has_type("db-server"):
        return False
    if topology.has_type("app-server"):
        return False
    return topology.is_directly_connected("web-server", "db-server")


def _no_dns(topology: Topology) -> bool:
    if not topology.has_type("cdn") and not topology.has_type("web-server"):
        return False
    if not _is_public(topology):
        return False
    return not topology.has_type("dns")


def _flat_network(topology: Topology) -> bool:
    if len(topology.nodes) < 3:
        return False
    tiers = {n.tier for n in topology.nodes if n.tier is not None}
    if not tiers:
        return False
    return len(tiers) <= 1


def _missing_app_tier(topology: Topology) -> bool:
    return (
        topology.has_type("web-server")
        and topology.has_type("db-server")
        and not topology.has_type("app-server")
    )


def _oversized_architecture(topology: Topology) -> bool:
    if len(topology.nodes) <= 15:
        return False
    return not topology.has_type("kubernetes") and not topology.has_type("container")


def _no_network_segmentation(topology: Topology) -> bool:
    compute_tiers = {n.tier for n in topology.nodes if n.type in COMPUTE_TYPES and n.tier is not None}
    storage_tiers = {n.tier for n in topology.nodes if n.type in STORAGE_NODE_TYPES and n.tier is not None}
    if not compute_tiers or not storage_tiers:
        return False
    # Every storage tier is shared with compute
    return storage_tiers <= compute_tiers


def _monolithic_everything(topology: Topology) -> bool:
    if not (
        topology.count_type("web-server") == 1
        and topology.count_type("app-server") == 1
        and topology.count_type("db-server") == 1
    ):
        return False
    return not topology.has_any_type(("load-balancer", "container", "kubernetes"))


# ──────────────────────────────────────────────────────────────────────
# CRITICAL SECURITY ANTI-PATTERNS (AP-SEC)
# ──────────────────────────────────────────────────────────────────────

_SECURITY = [
    AntiPattern(
        id="AP-SEC-001",
        name="DB Direct Internet Exposure",
        name_ko="데이터베이스 인터넷 직접 노출",
        severity="critical",
        detection=_db_direct_internet,
        detection_description_ko="db-server 노드가 internet 노드와 방화벽 없이 직접 연결되어 있는지 검사합니다.",
        problem_ko="데이터베이스가 인터넷에 직접 노출되면 SQL 인젝션, 무차별 대입 공격, 데이터 탈취 등 치명적 보안 위협에 노출됩니다.",
        impact_ko="전체 데이터베이스 침해, 고객 개인정보 유출, 규정 위반 벌금, 기업 신뢰도 치명적 손상이 발생할 수 있습니다.",
        solution_ko="데이터베이스를 내부 네트워크(data 티어)에 배치하고, 방화벽과 애플리케이션 서버를 통해서만 접근하도록 구성하세요.",
        tags=("security", "database", "internet-exposure", "critical"),
        trust=_trust(
            0.95,
            with_section(NIST_800_41, "Section 2.1 - Network Segmentation"),
            with_section(NIST_800_123, "Section 5 - Secure Network Configuration"),
        ),
    ),
    AntiPattern(
        id="AP-SEC-002",
        name="No Firewall",
        name_ko="방화벽 부재",
        severity="critical",
        detection=_no_firewall,
        detection_description_ko="컴퓨팅 노드(웹/앱/DB 서버)가 존재하지만 방화벽이 전혀 없는지 검사합니다.",
        problem_ko="방화벽 없이 서버를 운영하면 네트워크 계층의 접근 제어가 전혀 없어 모든 포트와 프로토콜이 무방비 상태입니다.",
        impact_ko="무단 접근, 포트 스캔 기반 공격, 내부 네트워크 침투, 서비스 거부 공격(DDoS)에 무방비로 노출됩니다.",
        solution_ko="인프라 경계에 방화벽을 배치하고, 기본 차단(Default Deny) 정책을 적용한 후 필요한 트래픽만 허용하세요.",
        tags=("security", "firewall", "perimeter", "critical"),
        trust=_trust(
            0.95,
            with_section(NIST_800_41, "Section 4.1 - Firewall Policy Recommendations"),
            SANS_FIREWALL,
        ),
    ),
    AntiPattern(
        id="AP-SEC-003",
        name="Web Server Without WAF",
        name_ko="WAF 없는 웹 서버",
        severity="critical",
        detection=_web_without_waf,
        detection_description_ko="인터넷에 노출된 web-server가 있지만 WAF가 없는지 검사합니다.",
        problem_ko="WAF 없이 웹 서버를 인터넷에 노출하면 OWASP Top 10 공격(SQL 인젝션, XSS, CSRF 등)에 무방비입니다.",
        impact_ko="웹 애플리케이션 침해, 사용자 세션 탈취, 데이터 유출, 웹사이트 변조가 발생할 수 있습니다.",
        solution_ko="웹 서버 앞에 WAF를 배치하여 OWASP Top 10 공격을 차단하고, 정기적으로 룰셋을 업데이트하세요.",
        tags=("security", "waf", "web-server", "owasp"),
        trust=_trust(0.9, OWASP_TOP10, with_section(OWASP_WSTG, "Configuration and Deployment Management")),
    ),
    AntiPattern(
        id="AP-SEC-004",
        name="Internal Services Exposed",
        name_ko="내부 서비스 인터넷 노출",
        severity="critical",
        detection=_internal_services_exposed,
        detection_description_ko="LDAP/AD, SAN/NAS, 백업 등 내부 전용 서비스가 인터넷에 직접 연결되어 있는지 검사합니다.",
        problem_ko="디렉터리 서비스, 스토리지, 백업 시스템 등 내부 전용 서비스가 인터넷에 노출되면 핵심 인프라 전체가 위험합니다.",
        impact_ko="자격 증명 탈취, 대규모 데이터 유출, 백업 데이터 랜섬웨어 감염, 전체 인프라 장악이 가능합니다.",
        solution_ko="내부 서비스는 반드시 내부 네트워크에만 배치하고, 방화벽으로 격리하며, VPN을 통해서만 원격 접근을 허용하세요.",
        tags=("security", "internal-services", "exposure", "critical"),
        trust=_trust(
            0.95,
            with_section(NIST_800_53, "SC-7 - Boundary Protection"),
            with_section(NIST_800_53, "AC-17 - Remote Access"),
        ),
    ),
    AntiPattern(
        id="AP-SEC-005",
        name="No Encryption Gateway",
        name_ko="암호화 게이트웨이 부재",
        severity="critical",
        detection=_no_encryption_gateway,
        detection_description_ko="인터넷에 노출된 서비스가 있지만 VPN 게이트웨이나 암호화 연결이 없는지 검사합니다.",
        problem_ko="암호화 없이 인터넷 통신을 하면 중간자 공격(MITM), 패킷 스니핑, 세션 하이재킹에 취약합니다.",
        impact_ko="전송 중 데이터 탈취, 자격 증명 유출, 세션 탈취, 규정 준수 위반이 발생할 수 있습니다.",
        solution_ko="VPN 게이트웨이를 배치하거나, 모든 인터넷 통신에 TLS/HTTPS 암호화를 적용하세요.",
        tags=("security", "encryption", "vpn", "tls"),
        trust=_trust(
            0.95,
            with_section(NIST_800_77, "Section 3.2 - VPN Security Architecture"),
            with_section(NIST_800_53, "SC-8 - Transmission Confidentiality and Integrity"),
        ),
    ),
    AntiPattern(
        id="AP-SEC-006",
        name="Unprotected Database",
        name_ko="보호되지 않은 데이터베이스",
        severity="critical",
        detection=_unprotected_database,
        detection_description_ko="db-server가 DMZ 또는 외부 티어에 배치되어 있는지 검사합니다.",
        problem_ko="데이터베이스가 DMZ나 외부 티어에 있으면 공격 표면이 넓어져 직접 공격 대상이 됩니다.",
        impact_ko="데이터베이스 직접 침해, 전체 데이터 유출, 서비스 중단, 복구 비용 급증이 발생합니다.",
        solution_ko="데이터베이스를 data 또는 internal 티어로 이동하고, 방화벽과 애플리케이션 계층을 통해서만 접근을 허용하세요.",
        tags=("security", "database", "tier-placement", "segmentation"),
        trust=_trust(
            0.95,
            with_section(NIST_800_41, "Section 2.1 - Network Segmentation"),
            with_section(NIST_800_123, "Section 5 - Secure Network Configuration"),
        ),
    ),
    AntiPattern(
        id="AP-SEC-007",
        name="No Access Control",
        name_ko="접근 제어 부재",
        severity="critical",
        detection=_no_access_control,
        detection_description_ko="컴퓨팅 서비스가 존재하지만 인증/접근 제어 구성요소(LDAP, SSO, MFA, IAM)가 전혀 없는지 검사합니다.",
        problem_ko="인증 및 접근 제어 없이 서비스를 운영하면 누구나 시스템에 접근할 수 있어 보안이 전혀 보장되지 않습니다.",
        impact_ko="무단 시스템 접근, 권한 상승 공격, 내부자 위협 탐지 불가, 감사 추적 불가능이 발생합니다.",
        solution_ko="LDAP/AD 기반 중앙 인증을 구축하고, SSO와 MFA를 적용하며, IAM으로 최소 권한 원칙을 시행하세요.",
        tags=("security", "access-control", "authentication", "authorization"),
        trust=_trust(
            0.95,
            with_section(NIST_800_63B, "Section 4 - Authenticator Assurance Levels"),
            with_section(NIST_800_53, "AC-2 - Account Management"),
        ),
    ),
]


# ──────────────────────────────────────────────────────────────────────
# HIGH AVAILABILITY ANTI-PATTERNS (AP-HA)
# ──────────────────────────────────────────────────────────────────────

_AVAILABILITY = [
    AntiPattern(
        id="AP-HA-001",
        name="Single Point of Failure - Load Balancer",
        name_ko="단일 장애점 - 로드 밸런서",
        severity="high",
        detection=_single_load_balancer,
        detection_description_ko="웹 서버가 2대 이상인데 로드 밸런서가 1대뿐인지 검사합니다.",
        problem_ko="단일 로드 밸런서 장애 시 모든 웹 서버가 트래픽을 받을 수 없어 전체 서비스가 중단됩니다.",
        impact_ko="서비스 전면 중단, SLA 위반, 매출 손실, 사용자 이탈이 발생합니다.",
        solution_ko="로드 밸런서를 Active-Standby 또는 Active-Active 이중화로 구성하고, 헬스 체크와 자동 페일오버를 설정하세요.",
        tags=("availability", "load-balancer", "spof", "redundancy"),
        trust=_trust(0.85, with_section(AWS_WAF_REL, "Design for Failure - Eliminate Single Points of Failure")),
    ),
    AntiPattern(
        id="AP-HA-002",
        name="No Backup System",
        name_ko="백업 시스템 부재",
        severity="high",
        detection=_no_backup,
        detection_description_ko="데이터베이스 서버가 있지만 백업 노드가 없는지 검사합니다.",
        problem_ko="백업 없이 데이터베이스를 운영하면 장애, 랜섬웨어, 인적 오류 시 데이터를 복구할 수 없습니다.",
        impact_ko="영구적 데이터 손실, 서비스 복구 불가, 비즈니스 연속성 붕괴, 규정 위반이 발생합니다.",
        solution_ko="정기적인 자동 백업을 구성하고, 3-2-1 백업 규칙(3개 사본, 2가지 매체, 1개 오프사이트)을 적용하세요.",
        tags=("availability", "backup", "disaster-recovery", "data-protection"),
        trust=_trust(
            0.95,
            with_section(NIST_800_53, "CP-9 - Information System Backup"),
            with_section(AWS_WAF_REL, "Data Backup and Recovery"),
        ),
    ),
    AntiPattern(
        id="AP-HA-003",
        name="No Disaster Recovery",
        name_ko="재해 복구 미구성",
        severity="high",
        detection=_no_disaster_recovery,
        detection_description_ko="일정 규모 이상의 인프라에 백업과 캐시가 모두 없어 복원력이 없는지 검사합니다.",
        problem_ko="재해 복구 체계 없이 운영하면 장애 발생 시 서비스 복구에 장시간이 소요되거나 불가능합니다.",
        impact_ko="장시간 서비스 중단, 데이터 손실, 비즈니스 연속성 파괴, 고객 신뢰 상실이 발생합니다.",
        solution_ko="백업 시스템과 캐시 계층을 추가하고, RTO/RPO를 정의한 재해 복구 계획을 수립하세요.",
        tags=("availability", "disaster-recovery", "resilience", "business-continuity"),
        trust=_trust(
            0.85,
            with_section(NIST_800_53, "CP-2 - Contingency Plan"),
            with_section(AWS_WAF_REL, "Disaster Recovery Strategies"),
        ),
    ),
    AntiPattern(
        id="AP-HA-004",
        name="Single Database",
        name_ko="단일 데이터베이스 (이중화 없음)",
        severity="high",
        detection=_single_database,
        detection_description_ko="멀티 티어 아키텍처에서 db-server가 1대뿐인지 검사합니다.",
        problem_ko="단일 데이터베이스는 장애 시 전체 애플리케이션이 중단되는 치명적 단일 장애점(SPOF)입니다.",
        impact_ko="데이터베이스 장애 시 전체 서비스 중단, 데이터 정합성 위험, 복구 시간 증가가 발생합니다.",
        solution_ko="Primary-Replica 복제 구성 또는 클러스터링을 적용하고, 자동 페일오버를 설정하세요.",
        tags=("availability", "database", "redundancy", "spof"),
        trust=_trust(
            0.85,
            with_section(AWS_WAF_REL, "Design for Failure - Database Redundancy"),
            with_section(AZURE_CAF, "High Availability Best Practices"),
        ),
    ),
    AntiPattern(
        id="AP-HA-005",
        name="No Health Check Path",
        name_ko="헬스 체크 경로 없음",
        severity="high",
        detection=_no_health_check_path,
        detection_description_ko="로드 밸런서가 백엔드 노드 1개 이하에만 연결되어 부하 분산 효과가 없는지 검사합니다.",
        problem_ko="로드 밸런서가 단일 백엔드에만 연결되면 부하 분산과 장애 조치 목적을 달성할 수 없습니다.",
        impact_ko="로드 밸런서가 있어도 고가용성이 보장되지 않으며, 단일 백엔드 장애 시 서비스가 중단됩니다.",
        solution_ko="최소 2대 이상의 백엔드 서버를 로드 밸런서에 연결하고, 헬스 체크를 구성하세요.",
        tags=("availability", "load-balancer", "health-check", "failover"),
        trust=_trust(0.85, with_section(AWS_WAF_REL, "Health Checks and Self-Healing")),
    ),
]


# ──────────────────────────────────────────────────────────────────────
# PERFORMANCE ANTI-PATTERNS (AP-PERF)
# ──────────────────────────────────────────────────────────────────────

_PERFORMANCE = [
    AntiPattern(
        id="AP-PERF-001",
        name="No Caching Layer",
        name_ko="캐시 계층 부재",
        severity="medium",
        detection=_no_cache,
        detection_description_ko="데이터베이스와 애플리케이션 서버가 있지만 캐시 노드가 없는지 검사합니다.",
        problem_ko="캐시 없이 모든 요청이 데이터베이스에 직접 전달되면 DB 부하가 급증하고 응답 속도가 저하됩니다.",
        impact_ko="응답 지연 증가, 데이터베이스 과부하, 트래픽 급증 시 서비스 장애, 사용자 경험 악화가 발생합니다.",
        solution_ko="Redis 또는 Memcached 기반 캐시 계층을 app-server와 db-server 사이에 배치하세요.",
        tags=("performance", "cache", "database", "latency"),
        trust=_trust(0.85, with_section(AWS_WAF_PERF, "Caching Strategy")),
    ),
    AntiPattern(
        id="AP-PERF-002",
        name="No CDN",
        name_ko="CDN 부재",
        severity="medium",
        detection=_no_cdn,
        detection_description_ko="인터넷에 노출된 웹 서버가 있지만 CDN이 없는지 검사합니다.",
        problem_ko="CDN 없이 웹 서버를 직접 노출하면 모든 정적 콘텐츠 요청이 오리진 서버에 집중되고, 글로벌 사용자 경험이 저하됩니다.",
        impact_ko="느린 페이지 로딩, 서버 대역폭 과다 사용, DDoS 공격 취약성, 글로벌 접근성 저하가 발생합니다.",
        solution_ko="CDN을 배치하여 정적 콘텐츠를 엣지에서 제공하고, DDoS 방어와 대역폭 절감 효과를 얻으세요.",
        tags=("performance", "cdn", "web-server", "latency", "ddos"),
        trust=_trust(
            0.85,
            with_section(AWS_WAF_PERF, "Content Delivery Network"),
            with_section(NIST_800_44, "Section 9 - Web Server Performance"),
        ),
    ),
    AntiPattern(
        id="AP-PERF-003",
        name="No Load Balancing",
        name_ko="로드 밸런싱 부재",
        severity="high",
        detection=_no_load_balancing,
        detection_description_ko="웹 서버가 2대 이상이지만 로드 밸런서가 없는지 검사합니다.",
        problem_ko="복수의 웹 서버가 있는데 로드 밸런서가 없으면 트래픽 분산이 불가능하고 서버 자원을 효율적으로 사용할 수 없습니다.",
        impact_ko="특정 서버에 트래픽 집중, 서버 자원 낭비, 장애 시 자동 전환 불가, 확장성 제약이 발생합니다.",
        solution_ko="로드 밸런서를 웹 서버 앞에 배치하여 트래픽을 균등 분산하고, 헬스 체크 기반 자동 페일오버를 구성하세요.",
        tags=("performance", "load-balancer", "web-server", "scalability"),
        trust=_trust(
            0.85,
            with_section(AWS_WAF_REL, "Distribute Traffic with Load Balancing"),
            with_section(AWS_WAF_PERF, "Load Balancing"),
        ),
    ),
    AntiPattern(
        id="AP-PERF-004",
        name="Direct DB Connection from Web",
        name_ko="웹 서버의 DB 직접 연결",
        severity="high",
        detection=_web_direct_db,
        detection_description_ko="web-server가 app-server 없이 db-server에 직접 연결되어 있는지 검사합니다.",
        problem_ko="웹 서버가 데이터베이스에 직접 접근하면 비즈니스 로직 분리가 불가능하고 보안 및 성능 문제가 발생합니다.",
        impact_ko="비즈니스 로직 중복, 커넥션 풀 관리 어려움, SQL 인젝션 확대, 수평 확장 제약이 발생합니다.",
        solution_ko="애플리케이션 서버(app-server)를 중간 계층으로 추가하여 비즈니스 로직을 분리하고, 커넥션 풀링을 관리하세요.",
        tags=("performance", "architecture", "web-server", "database", "separation"),
        trust=_trust(0.95, with_section(NIST_800_123, "Section 5 - Application Architecture"), OWASP_TOP10),
    ),
    AntiPattern(
        id="AP-PERF-005",
        name="No DNS",
        name_ko="DNS 부재",
        severity="medium",
        detection=_no_dns,
        detection_description_ko="CDN 또는 웹 서버가 인터넷에 노출되어 있지만 DNS 노드가 없는지 검사합니다.",
        problem_ko="DNS 없이는 도메인 기반 접근이 불가능하고, CDN의 지리적 라우팅이 동작하지 않습니다.",
        impact_ko="IP 직접 접근만 가능, CDN 지리적 분산 불가, 도메인 기반 보안 정책 적용 불가가 발생합니다.",
        solution_ko="DNS 서비스를 추가하고, DNSSEC를 적용하며, CDN 사용 시 CNAME 또는 ALIAS 레코드를 구성하세요.",
        tags=("performance", "dns", "cdn", "web-server", "name-resolution"),
        trust=_trust(
            0.95,
            with_section(NIST_800_81, "Section 2 - DNS Security Threats"),
            with_section(AWS_WAF_PERF, "DNS and Traffic Routing"),
        ),
    ),
]


# ──────────────────────────────────────────────────────────────────────
# ARCHITECTURE DESIGN ANTI-PATTERNS (AP-ARCH)
# ──────────────────────────────────────────────────────────────────────

_ARCHITECTURE = [
    AntiPattern(
        id="AP-ARCH-001",
        name="Flat Network",
        name_ko="플랫 네트워크 (티어 미분리)",
        severity="high",
        detection=_flat_network,
        detection_description_ko="3개 이상의 노드가 있는데 모든 노드가 동일한 티어에 있어 네트워크 세그먼테이션이 없는지 검사합니다.",
        problem_ko="플랫 네트워크에서는 모든 시스템이 같은 보안 영역에 있어, 하나의 시스템 침해가 전체로 확산됩니다.",
        impact_ko="횡적 이동(Lateral Movement) 공격 용이, 내부 위협 탐지 어려움, 규정 준수 위반이 발생합니다.",
        solution_ko="네트워크를 외부/DMZ/내부/데이터 티어로 분리하고, 티어 간 방화벽으로 접근을 제어하세요.",
        tags=("architecture", "segmentation", "flat-network", "lateral-movement"),
        trust=_trust(
            0.95,
            with_section(NIST_800_41, "Section 2.1 - Network Segmentation"),
            with_section(CIS_V8_12, "12.2 - Establish and Maintain a Secure Network Architecture"),
        ),
    ),
    AntiPattern(
        id="AP-ARCH-002",
        name="Missing Application Tier",
        name_ko="애플리케이션 티어 누락",
        severity="medium",
        detection=_missing_app_tier,
        detection_description_ko="web-server와 db-server가 있지만 app-server가 없는지 검사합니다.",
        problem_ko="애플리케이션 티어 없이 웹 서버가 데이터베이스에 직접 접근하면 보안, 확장성, 유지보수에 문제가 생깁니다.",
        impact_ko="비즈니스 로직 분리 불가, API 계층 부재, 마이크로서비스 전환 어려움, 보안 경계 부족이 발생합니다.",
        solution_ko="웹 서버와 데이터베이스 사이에 애플리케이션 서버를 배치하여 3-티어 아키텍처를 완성하세요.",
        tags=("architecture", "multi-tier", "app-server", "separation-of-concerns"),
        trust=_trust(
            0.95,
            with_section(NIST_800_123, "Section 5 - Application Architecture"),
            with_section(NIST_800_44, "Section 3 - Web Server Architecture"),
        ),
    ),
    AntiPattern(
        id="AP-ARCH-003",
        name="Oversized Architecture",
        name_ko="과대 아키텍처 (오케스트레이션 부재)",
        severity="medium",
        detection=_oversized_architecture,
        detection_description_ko="15개 이상의 노드가 있지만 Kubernetes나 컨테이너 오케스트레이션이 없는지 검사합니다.",
        problem_ko="대규모 인프라를 수동으로 관리하면 운영 복잡도가 급증하고, 배포/스케일링/모니터링이 어려워집니다.",
        impact_ko="운영 비용 급증, 배포 시간 증가, 장애 복구 지연, 일관성 없는 환경 구성이 발생합니다.",
        solution_ko="Kubernetes 또는 컨테이너 오케스트레이션을 도입하여 자동화된 배포, 스케일링, 관리를 구현하세요.",
        tags=("architecture", "orchestration", "kubernetes", "scalability"),
        trust=_trust(
            0.7,
            with_section(CNCF_SECURITY, "Container Orchestration Benefits"),
            with_section(NIST_800_144, "Section 3 - Cloud Computing Benefits"),
        ),
    ),
    AntiPattern(
        id="AP-ARCH-004",
        name="No Network Segmentation",
        name_ko="네트워크 세그먼테이션 부재",
        severity="high",
        detection=_no_network_segmentation,
        detection_description_ko="컴퓨팅 노드와 스토리지 노드가 동일한 티어에 배치되어 세그먼테이션이 없는지 검사합니다.",
        problem_ko="컴퓨팅과 스토리지가 동일 세그먼트에 있으면 컴퓨팅 침해 시 스토리지까지 바로 접근 가능합니다.",
        impact_ko="데이터 유출 위험 증가, 컴퓨팅 침해의 스토리지 확산, 접근 제어 우회 가능성이 높아집니다.",
        solution_ko="스토리지를 별도의 data 티어에 배치하고, 컴퓨팅 티어와 방화벽으로 분리하세요.",
        tags=("architecture", "segmentation", "storage", "compute", "isolation"),
        trust=_trust(
            0.95,
            with_section(NIST_800_53, "SC-7 - Boundary Protection"),
            with_section(CIS_V8_12, "12.2 - Secure Network Architecture"),
        ),
    ),
    AntiPattern(
        id="AP-ARCH-005",
        name="Monolithic Everything",
        name_ko="모놀리식 아키텍처 (확장성 없음)",
        severity="medium",
        detection=_monolithic_everything,
        detection_description_ko="웹/앱/DB 서버가 각 1대씩만 있고 로드 밸런서, 컨테이너, Kubernetes 등 확장 요소가 없는지 검사합니다.",
        problem_ko="모든 계층이 단일 인스턴스로 구성되면 어느 계층이든 장애 시 전체 서비스가 중단되며, 수평 확장이 불가능합니다.",
        impact_ko="서비스 확장 불가, 단일 장애점 다수 존재, 트래픽 급증 대응 불가, 유지보수 시 다운타임 불가피가 발생합니다.",
        solution_ko="로드 밸런서를 추가하고, 최소 2대 이상의 웹/앱 서버를 구성하며, 컨테이너화를 고려하세요.",
        tags=("architecture", "monolithic", "scalability", "spof", "horizontal-scaling"),
        trust=_trust(
            0.85,
            with_section(AWS_WAF_REL, "Design for Failure - Horizontal Scaling"),
            with_section(AZURE_CAF, "Scalability Best Practices"),
        ),
    ),
]


# All verified anti-patterns (immutable)
ANTI_PATTERNS: tuple[AntiPattern, ...] = tuple(_SECURITY + _AVAILABILITY + _PERFORMANCE + _ARCHITECTURE)


def detect_antipatterns(topology: Topology) -> list[AntiPattern]:
    """Run every canonical anti-pattern against the topology and return the ones that fire."""
    return detect_violations(topology, ANTI_PATTERNS)


def antipatterns_by_severity(severity: AntiPatternSeverity) -> list[AntiPattern]:
    return [ap for ap in ANTI_PATTERNS if ap.severity == severity]


def critical_antipatterns() -> list[AntiPattern]:
    return antipatterns_by_severity("critical")
