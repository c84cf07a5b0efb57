"""
Service catalog: the price list of offerable services and the mapping
from detected needs to candidate services.

Pure configuration data. Engines receive a ``ServiceCatalog`` in their
constructor, so tests and tenants can swap in their own price list.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ServiceCatalogEntry:
    """A single offerable service."""
    id: str
    name: str
    description: str
    base_price: float
    category: str


@dataclass(frozen=True)
class ServiceCatalog:
    """Price list plus the need -> service mapping used for quoting."""

    entries: tuple[ServiceCatalogEntry, ...]
    need_to_services: dict[str, tuple[str, ...]] = field(default_factory=dict)
    default_service_ids: tuple[str, ...] = ()

    def get(self, service_id: str) -> ServiceCatalogEntry | None:
        for entry in self.entries:
            if entry.id == service_id:
                return entry
        return None

    def services_for_need(self, need: str) -> tuple[str, ...]:
        """Service ids mapped to a need label, matched case-insensitively."""
        wanted = need.strip().lower()
        for label, service_ids in self.need_to_services.items():
            if label.lower() == wanted:
                return service_ids
        return ()

    def resolve(self, service_ids: set[str]) -> list[ServiceCatalogEntry]:
        """Catalog entries for the given ids, in catalog declaration order."""
        return [entry for entry in self.entries if entry.id in service_ids]


# ── Default catalog ───────────────────────────────────────────────────

DEFAULT_ENTRIES: tuple[ServiceCatalogEntry, ...] = (
    # Lead generation
    ServiceCatalogEntry("meta-ads", "Meta Ads Campaigns", "Full management of Facebook and Instagram campaigns", 8000, "Digital advertising"),
    ServiceCatalogEntry("google-ads", "Google Ads Campaigns", "Search, display and remarketing campaigns", 10000, "Digital advertising"),
    ServiceCatalogEntry("landing-page", "Optimized Landing Page", "High-conversion landing page", 15000, "Web development"),
    # Social media
    ServiceCatalogEntry("social-basic", "Social Basic Pack", "12 monthly posts + stories + moderation", 6000, "Social media"),
    ServiceCatalogEntry("social-pro", "Social Pro Pack", "20 posts + reels + stories + moderation + reports", 12000, "Social media"),
    ServiceCatalogEntry("social-premium", "Social Premium Pack", "30 posts + reels + influencers + community management", 20000, "Social media"),
    # SEO
    ServiceCatalogEntry("seo-local", "Local SEO", "Google Business Profile optimization + on-page SEO", 5000, "SEO"),
    ServiceCatalogEntry("seo-full", "Full SEO", "End-to-end SEO strategy + link building + content", 15000, "SEO"),
    # Branding
    ServiceCatalogEntry("branding-basic", "Basic Branding", "Logo + brand manual + basic stationery", 12000, "Branding"),
    ServiceCatalogEntry("branding-full", "Full Branding", "Complete visual identity + applications + brand guide", 35000, "Branding"),
    # Content
    ServiceCatalogEntry("content-blog", "Blog Pack", "4 monthly SEO articles", 4000, "Content marketing"),
    ServiceCatalogEntry("video-basic", "Video Basic Pack", "4 monthly reels/tiktoks", 8000, "Video marketing"),
    ServiceCatalogEntry("video-pro", "Video Pro Pack", "8 reels + 2 testimonial videos", 18000, "Video marketing"),
    # Automation
    ServiceCatalogEntry("crm-setup", "CRM Setup", "CRM configuration + basic automations", 10000, "Automation"),
    ServiceCatalogEntry("automation-full", "Full Automation", "Email, WhatsApp and follow-up automation flows", 25000, "Automation"),
    # Email
    ServiceCatalogEntry("email-monthly", "Monthly Email Marketing", "4 email campaigns + automations", 5000, "Email marketing"),
)

DEFAULT_NEED_TO_SERVICES: dict[str, tuple[str, ...]] = {
    "Lead generation": ("meta-ads", "google-ads", "landing-page"),
    "Social media": ("social-basic", "social-pro", "social-premium"),
    "Web development": ("landing-page",),
    "SEO": ("seo-local", "seo-full"),
    "Digital advertising": ("meta-ads", "google-ads"),
    "Branding": ("branding-basic", "branding-full"),
    "Content marketing": ("content-blog",),
    "Email marketing": ("email-monthly",),
    "Video marketing": ("video-basic", "video-pro"),
    "Automation": ("crm-setup", "automation-full"),
}

DEFAULT_CATALOG = ServiceCatalog(
    entries=DEFAULT_ENTRIES,
    need_to_services=DEFAULT_NEED_TO_SERVICES,
    # Offered when no detected need maps to a service
    default_service_ids=("social-pro", "meta-ads"),
)
