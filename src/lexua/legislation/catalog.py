"""Curated source configurations and the reference lookup built from them.

UKRAINIAN_LAWS are fetched from zakon.rada.gov.ua print pages and
POLISH_ACTS from the Sejm ELI text endpoint. ``order`` fixes the position of
a document in a run and prefixes its cached and seeded file names.
"""

import logging
import re
from typing import Iterable, Iterator, Mapping, Optional

from lexua.core.text import collapse_whitespace, fold_hyphens
from lexua.legislation.models import ActStatus, LegislationSource, SourceConfig
from lexua.settings import ISAP_BASE_URL

logger = logging.getLogger(__name__)

DZIENNIK_REFERENCE = re.compile(
    r"^dz\.?\s*u\.?\s*(?P<year>\d{4})\s*(?:nr\s*\d+\s*)?poz\.?\s*(?P<position>\d+)$"
)
REFERENCE_PREFIXES = ("/laws/show/", "/eli/acts/")
REFERENCE_SUFFIXES = ("/print", "/text.html", "/text.pdf")


def isap_url(year: int, number: int, position: int) -> str:
    return f"{ISAP_BASE_URL}/isap.nsf/DocDetails.xsp?id=WDU{year}{number:03d}{position:04d}"


UKRAINIAN_LAWS: tuple[SourceConfig, ...] = (
    SourceConfig(
        id="ua-personal-data-protection",
        reference="2297-17",
        title="Про захист персональних даних",
        title_en="On Personal Data Protection",
        short_name="ЗУ «Про захист персональних даних»",
        description="Personal data processing principles, rights of data subjects and duties of controllers and processors",
        issued_date="2010-06-01",
        order="01",
    ),
    SourceConfig(
        id="ua-access-public-information",
        reference="2939-17",
        title="Про доступ до публічної інформації",
        title_en="On Access to Public Information",
        short_name="ЗУ «Про доступ до публічної інформації»",
        description="Right of access to information held by public authorities, requests and restricted information",
        issued_date="2011-01-13",
        order="02",
    ),
    SourceConfig(
        id="ua-electronic-trust-services",
        reference="2155-19",
        title="Про електронну ідентифікацію та електронні довірчі послуги",
        title_en="On Electronic Identification and Electronic Trust Services",
        short_name="ЗУ «Про електронні довірчі послуги»",
        description="Electronic signatures and seals, qualified trust service providers and electronic identification schemes",
        issued_date="2017-10-05",
        order="03",
    ),
    SourceConfig(
        id="ua-cybersecurity",
        reference="2163-19",
        title="Про основні засади забезпечення кібербезпеки України",
        title_en="On the Basic Principles of Ensuring Cybersecurity of Ukraine",
        short_name="ЗУ «Про кібербезпеку»",
        description="National cybersecurity system, critical information infrastructure and the roles of CERT-UA and state bodies",
        issued_date="2017-10-05",
        order="04",
    ),
    SourceConfig(
        id="ua-critical-infrastructure",
        reference="1882-20",
        title="Про критичну інфраструктуру",
        title_en="On Critical Infrastructure",
        short_name="ЗУ «Про критичну інфраструктуру»",
        description="Designation and protection of critical infrastructure objects and operator obligations",
        issued_date="2021-11-16",
        order="05",
    ),
    SourceConfig(
        id="ua-electronic-communications",
        reference="1089-20",
        title="Про електронні комунікації",
        title_en="On Electronic Communications",
        short_name="ЗУ «Про електронні комунікації»",
        description="Electronic communications networks and services, the regulator, and confidentiality of communications",
        issued_date="2020-12-16",
        order="06",
    ),
    SourceConfig(
        id="ua-electronic-commerce",
        reference="675-19",
        title="Про електронну комерцію",
        title_en="On Electronic Commerce",
        short_name="ЗУ «Про електронну комерцію»",
        description="Electronic transactions, electronic contracts and duties of e-commerce participants",
        issued_date="2015-09-03",
        order="07",
    ),
    SourceConfig(
        id="ua-cloud-services",
        reference="2075-20",
        title="Про хмарні послуги",
        title_en="On Cloud Services",
        short_name="ЗУ «Про хмарні послуги»",
        description="Cloud services for public bodies, requirements for providers and data centres",
        issued_date="2022-02-17",
        order="08",
    ),
    SourceConfig(
        id="ua-criminal-code-cybercrime",
        reference="2341-14",
        title="Кримінальний кодекс України",
        title_en="Criminal Code of Ukraine",
        short_name="ККУ",
        description="Crimes in the use of computers, systems and networks and telecommunication networks",
        sections=("361", "361-1", "361-2", "362", "363", "363-1"),
        issued_date="2001-04-05",
        order="09",
    ),
    SourceConfig(
        id="ua-competition-trade-secrets",
        reference="236/96-вр",
        title="Про захист від недобросовісної конкуренції",
        title_en="On Protection against Unfair Competition",
        short_name="ЗУ «Про захист від недобросовісної конкуренції»",
        description="Unfair competition including unlawful collection, disclosure and use of commercial secrets",
        issued_date="1996-06-07",
        order="10",
    ),
)

POLISH_ACTS: tuple[SourceConfig, ...] = (
    SourceConfig(
        id="dpa-2018",
        reference="DU/2018/1000",
        title="Ustawa z dnia 10 maja 2018 r. o ochronie danych osobowych",
        title_en="Personal Data Protection Act 2018",
        short_name="UODO 2018",
        description="GDPR implementing provisions; establishes the supervisory authority and administrative penalties",
        status=ActStatus.IN_FORCE,
        issued_date="2018-05-10",
        in_force_date="2018-05-25",
        url=isap_url(2018, 0, 1000),
        order="01",
    ),
    SourceConfig(
        id="ksc-2018",
        reference="DU/2018/1560",
        title="Ustawa z dnia 5 lipca 2018 r. o krajowym systemie cyberbezpieczeństwa",
        title_en="National Cybersecurity System Act 2018 (KSC)",
        short_name="KSC",
        description="NIS Directive implementation; national cybersecurity system with CSIRT teams",
        status=ActStatus.IN_FORCE,
        issued_date="2018-07-05",
        in_force_date="2018-08-28",
        url=isap_url(2018, 0, 1560),
        order="02",
    ),
    SourceConfig(
        id="ksh-2000",
        reference="DU/2000/1037",
        title="Ustawa z dnia 15 września 2000 r. - Kodeks spółek handlowych",
        title_en="Commercial Companies Code (KSH)",
        short_name="KSH",
        description="Partnerships and capital companies; corporate governance requirements",
        status=ActStatus.IN_FORCE,
        issued_date="2000-09-15",
        in_force_date="2001-01-01",
        url=isap_url(2000, 94, 1037),
        order="03",
    ),
    SourceConfig(
        id="kodeks-karny-1997",
        reference="DU/1997/553",
        title="Ustawa z dnia 6 czerwca 1997 r. - Kodeks karny",
        title_en="Criminal Code (Kodeks karny)",
        short_name="KK",
        description="Criminal Code; unauthorised access, data destruction, computer sabotage and hacking tools offences",
        status=ActStatus.IN_FORCE,
        issued_date="1997-06-06",
        in_force_date="1998-09-01",
        url=isap_url(1997, 88, 553),
        order="04",
    ),
    SourceConfig(
        id="e-services-2002",
        reference="DU/2002/1204",
        title="Ustawa z dnia 18 lipca 2002 r. o świadczeniu usług drogą elektroniczną",
        title_en="Act on Provision of Electronic Services",
        short_name="E-Services Act",
        description="Electronic services, service provider liability, unsolicited commercial communication",
        status=ActStatus.IN_FORCE,
        issued_date="2002-07-18",
        in_force_date="2002-10-10",
        url=isap_url(2002, 144, 1204),
        order="05",
    ),
    SourceConfig(
        id="telecom-2004",
        reference="DU/2004/1800",
        title="Ustawa z dnia 16 lipca 2004 r. - Prawo telekomunikacyjne",
        title_en="Telecommunications Law",
        short_name="PT",
        description="Telecommunications regulation; data retention, communications security, network integrity",
        status=ActStatus.IN_FORCE,
        issued_date="2004-07-16",
        in_force_date="2004-09-03",
        url=isap_url(2004, 171, 1800),
        order="06",
    ),
    SourceConfig(
        id="constitution-1997",
        reference="DU/1997/483",
        title="Konstytucja Rzeczypospolitej Polskiej z dnia 2 kwietnia 1997 r.",
        title_en="Constitution of the Republic of Poland",
        short_name="Konstytucja RP",
        description="Supreme law; privacy, secrecy of communication and personal data protection",
        status=ActStatus.IN_FORCE,
        issued_date="1997-04-02",
        in_force_date="1997-10-17",
        url=isap_url(1997, 78, 483),
        order="07",
    ),
    SourceConfig(
        id="kodeks-cywilny-1964",
        reference="DU/1964/93",
        title="Ustawa z dnia 23 kwietnia 1964 r. - Kodeks cywilny",
        title_en="Civil Code (Kodeks cywilny)",
        short_name="KC",
        description="Core private law; personality rights, contracts, liability for damages",
        status=ActStatus.IN_FORCE,
        issued_date="1964-04-23",
        in_force_date="1965-01-01",
        url=isap_url(1964, 16, 93),
        order="08",
    ),
    SourceConfig(
        id="banking-law-1997",
        reference="DU/1997/939",
        title="Ustawa z dnia 29 sierpnia 1997 r. - Prawo bankowe",
        title_en="Banking Law",
        short_name="PB",
        description="Banking regulation; banking secrecy, outsourcing, IT security requirements",
        status=ActStatus.IN_FORCE,
        issued_date="1997-08-29",
        in_force_date="1998-01-01",
        url=isap_url(1997, 140, 939),
        order="09",
    ),
    SourceConfig(
        id="kpa-1960",
        reference="DU/1960/168",
        title="Ustawa z dnia 14 czerwca 1960 r. - Kodeks postępowania administracyjnego",
        title_en="Code of Administrative Procedure (KPA)",
        short_name="KPA",
        description="Administrative procedure before regulators; electronic administration",
        status=ActStatus.IN_FORCE,
        issued_date="1960-06-14",
        in_force_date="1961-01-01",
        url=isap_url(1960, 30, 168),
        order="10",
    ),
)

CATALOG_BY_SOURCE: Mapping[LegislationSource, tuple[SourceConfig, ...]] = {
    LegislationSource.RADA: UKRAINIAN_LAWS,
    LegislationSource.SEJM: POLISH_ACTS,
}


def normalize_reference(reference: str) -> str:
    """Canonical lookup key for a portal reference.

    Accepts bare references (``2297-17``, ``DU/2018/1000``), portal URLs and
    paths, and Dziennik Ustaw citations (``Dz.U. 2000 nr 94 poz. 1037``).
    """
    key = collapse_whitespace(fold_hyphens(reference)).lower()

    for prefix in REFERENCE_PREFIXES:
        if prefix in key:
            key = key.split(prefix, 1)[1]
    key = key.split("?", 1)[0].split("#", 1)[0]
    for suffix in REFERENCE_SUFFIXES:
        key = key.removesuffix(suffix)
    key = key.strip("/ ")

    citation = DZIENNIK_REFERENCE.match(key)
    if citation:
        return f"du/{citation.group('year')}/{citation.group('position')}"
    return key


def slugify_reference(reference: str) -> str:
    return re.sub(r"[^\w]+", "-", normalize_reference(reference)).strip("-")


class SourceCatalog:
    """Read-only lookup from normalised reference to curated configuration.

    Built once by the caller and passed to whoever needs it; it is never
    mutated after construction, so concurrent reads are safe.
    """

    def __init__(self, configs: Iterable[SourceConfig] = ()):
        entries = {}
        for config in configs:
            key = normalize_reference(config.reference)
            if key in entries:
                logger.warning(f"Duplicate catalog reference {config.reference}, keeping {entries[key].id}")
                continue
            entries[key] = config
        self._entries: dict[str, SourceConfig] = entries

    @classmethod
    def from_configs(cls, *groups: Iterable[SourceConfig]) -> "SourceCatalog":
        return cls(config for group in groups for config in group)

    def get(self, reference: str) -> Optional[SourceConfig]:
        return self._entries.get(normalize_reference(reference))

    def resolve(self, reference: str) -> SourceConfig:
        """Curated configuration for the reference, or a generic one built from it."""
        config = self.get(reference)
        if config is not None:
            return config

        logger.info(f"Reference {reference} is not catalogued, using a generic configuration")
        return SourceConfig(id=f"doc-{slugify_reference(reference)}", reference=reference.strip())

    def __contains__(self, reference: str) -> bool:
        return normalize_reference(reference) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SourceConfig]:
        return iter(self._entries.values())


def default_catalog() -> SourceCatalog:
    """A fresh catalog of every curated document."""
    return SourceCatalog.from_configs(UKRAINIAN_LAWS, POLISH_ACTS)


def configs_for_source(source: LegislationSource) -> tuple[SourceConfig, ...]:
    return CATALOG_BY_SOURCE[LegislationSource(source)]
