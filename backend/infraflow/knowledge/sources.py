"""Source registry — verified reference documents cited by knowledge entries.

Entries (Python or JSON data files) cite these by key; `with_section` narrows a
citation to the specific section that backs a claim.
"""

from typing import Optional

from infraflow.knowledge.models import KnowledgeSource

ACCESSED = "2026-02-09"


def _nist(doc_id: str, title: str, url: str, published: str) -> KnowledgeSource:
    return KnowledgeSource(
        type="nist", title=f"NIST {doc_id}: {title}", url=url,
        published_date=published, accessed_date=ACCESSED,
    )


def _rfc(num: int, title: str, published: str, section: Optional[str] = None) -> KnowledgeSource:
    return KnowledgeSource(
        type="rfc", title=f"RFC {num}: {title}",
        url=f"https://datatracker.ietf.org/doc/html/rfc{num}",
        section=section, published_date=published, accessed_date=ACCESSED,
    )


def _cited(source_type: str, title: str, url: str, section: Optional[str] = None) -> KnowledgeSource:
    return KnowledgeSource(type=source_type, title=title, url=url, section=section, accessed_date=ACCESSED)


# ── NIST Special Publications ──

NIST_800_41 = _nist("SP 800-41 Rev.1", "Guidelines on Firewalls and Firewall Policy",
                    "https://csrc.nist.gov/pubs/sp/800/41/r1/final", "2009-09")
NIST_800_44 = _nist("SP 800-44 Ver.2", "Guidelines on Securing Public Web Servers",
                    "https://csrc.nist.gov/pubs/sp/800/44/ver2/final", "2007-09")
NIST_800_53 = _nist("SP 800-53 Rev.5", "Security and Privacy Controls for Information Systems",
                    "https://csrc.nist.gov/pubs/sp/800/53/r5/upd1/final", "2020-09")
NIST_800_63B = _nist("SP 800-63B", "Digital Identity Guidelines - Authentication and Lifecycle Management",
                     "https://csrc.nist.gov/pubs/sp/800/63b/upd2/final", "2017-06")
NIST_800_77 = _nist("SP 800-77 Rev.1", "Guide to IPsec VPNs",
                    "https://csrc.nist.gov/pubs/sp/800/77/r1/final", "2020-06")
NIST_800_81 = _nist("SP 800-81-2", "Secure Domain Name System (DNS) Deployment Guide",
                    "https://csrc.nist.gov/pubs/sp/800/81/2/final", "2013-09")
NIST_800_94 = _nist("SP 800-94", "Guide to Intrusion Detection and Prevention Systems (IDPS)",
                    "https://csrc.nist.gov/pubs/sp/800/94/final", "2007-02")
NIST_800_123 = _nist("SP 800-123", "Guide to General Server Security",
                     "https://csrc.nist.gov/pubs/sp/800/123/final", "2008-07")
NIST_800_144 = _nist("SP 800-144", "Guidelines on Security and Privacy in Public Cloud Computing",
                     "https://csrc.nist.gov/pubs/sp/800/144/final", "2011-12")
NIST_800_125 = _nist("SP 800-125", "Guide to Security for Full Virtualization Technologies",
                     "https://csrc.nist.gov/pubs/sp/800/125/final", "2011-01")

# ── IETF RFCs ──

RFC_7230 = _rfc(7230, "HTTP/1.1 Message Syntax and Routing", "2014-06", "Section 2.3 - Intermediaries")
RFC_8446 = _rfc(8446, "The Transport Layer Security (TLS) Protocol Version 1.3", "2018-08")
RFC_1034 = _rfc(1034, "Domain Names - Concepts and Facilities", "1987-11")
RFC_2818 = _rfc(2818, "HTTP Over TLS", "2000-05")

# ── CIS Controls ──

CIS_V8 = _cited("cis", "CIS Controls v8", "https://www.cisecurity.org/controls/v8")
CIS_V8_12 = _cited("cis", "CIS Controls v8 - Control 12: Network Infrastructure Management",
                   "https://www.cisecurity.org/controls/v8",
                   "12.2 - Establish and Maintain a Secure Network Architecture")
CIS_V8_13 = _cited("cis", "CIS Controls v8 - Control 13: Network Monitoring and Defense",
                   "https://www.cisecurity.org/controls/v8",
                   "13.3 - Deploy a Network Intrusion Detection Solution")

# ── OWASP ──

OWASP_TOP10 = _cited("owasp", "OWASP Top 10 (2021)", "https://owasp.org/Top10/")
OWASP_WSTG = _cited("owasp", "OWASP Web Security Testing Guide",
                    "https://owasp.org/www-project-web-security-testing-guide/")
OWASP_API_TOP10 = _cited("owasp", "OWASP API Security Top 10 (2023)", "https://owasp.org/API-Security/")

# ── Vendor documentation ──

AWS_WAF_REL = _cited("vendor", "AWS Well-Architected Framework - Reliability Pillar",
                     "https://docs.aws.amazon.com/wellarchitected/latest/reliability-pillar/")
AWS_WAF_SEC = _cited("vendor", "AWS Well-Architected Framework - Security Pillar",
                     "https://docs.aws.amazon.com/wellarchitected/latest/security-pillar/")
AWS_WAF_PERF = _cited("vendor", "AWS Well-Architected Framework - Performance Efficiency Pillar",
                      "https://docs.aws.amazon.com/wellarchitected/latest/performance-efficiency-pillar/")
AZURE_CAF = _cited("vendor", "Azure Cloud Adoption Framework",
                   "https://learn.microsoft.com/azure/cloud-adoption-framework/")

# ── Industry guides ──

SANS_CIS_TOP20 = _cited("industry", "SANS/CIS Top 20 Critical Security Controls",
                        "https://www.sans.org/critical-security-controls/")
CNCF_SECURITY = _cited("industry", "CNCF Cloud Native Security Whitepaper",
                       "https://github.com/cncf/tag-security/blob/main/security-whitepaper/v2/cloud-native-security-whitepaper.md")
SANS_FIREWALL = _cited("industry", "SANS: Firewall Best Practices", "https://www.sans.org/white-papers/1117/")

# ── Vulnerability feeds ──

NVD = _cited("nist", "NIST National Vulnerability Database (NVD)", "https://nvd.nist.gov/")
MITRE_CVE = _cited("industry", "MITRE CVE Program", "https://cve.mitre.org/")
GHSA = _cited("vendor", "GitHub Security Advisories", "https://github.com/advisories")

# ── Cloud provider catalogs ──

AWS_CATALOG = _cited("vendor", "AWS Service Catalog", "https://aws.amazon.com/products/")
AZURE_CATALOG = _cited("vendor", "Azure Service Catalog", "https://azure.microsoft.com/products/")
GCP_CATALOG = _cited("vendor", "GCP Service Catalog", "https://cloud.google.com/products")


# Keyed registry, used by the JSON loader to resolve {"ref": "NIST_800_41"} citations
ALL_SOURCES: dict[str, KnowledgeSource] = {
    name: value for name, value in list(globals().items())
    if name.isupper() and isinstance(value, KnowledgeSource)
}


def with_section(source: KnowledgeSource, section: str) -> KnowledgeSource:
    """Copy of `source` narrowed to a specific section."""
    return source.model_copy(update={"section": section})


def is_official_source(source_type: str) -> bool:
    return source_type in ("rfc", "nist", "cis", "owasp")


def is_user_source(source_type: str) -> bool:
    return source_type in ("user_verified", "user_unverified")
