from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class RangeRule(BaseModel):
    min: int
    max: int


class RegexRule(RangeRule):
    pattern: str


class ContentRules(BaseModel):
    slug: RegexRule
    title: RangeRule
    excerpt_max: int = 500
    password_min_length: int = 4
    default_locale: str = "en"
    status_values: list[str]
    visibility_values: list[str]
    meta_key_max: int = 191


class ListingRules(BaseModel):
    default_limit: int = 20
    max_limit: int = 100
    max_page: int = 10_000
    text_search_min_length: int = 3
    # BM25 column weights for the full-text index
    weights: dict[str, float] = Field(
        default_factory=lambda: {"title": 10.0, "slug": 6.0, "excerpt": 4.0}
    )


class UploadsRules(BaseModel):
    max_upload_bytes: int
    allowlist_mime_types: list[str]
    public_url_prefix: str = "/uploads"


class CookieRules(BaseModel):
    access_name: str = "cms_access"
    refresh_name: str = "cms_refresh"
    secure: bool = False
    same_site: str = "lax"


class AuthRules(BaseModel):
    access_ttl_minutes: int = 15
    refresh_ttl_minutes: int = 60 * 24 * 30
    issuer: str = "block-cms"
    audience: str = "block-cms-users"
    password_min_length: int = 8
    default_role: str = "subscriber"
    cookie: CookieRules = Field(default_factory=CookieRules)


class RbacRules(BaseModel):
    roles: dict[str, list[str]]
    public_permissions: list[str]


class AbacRules(BaseModel):
    """Roles in ``owner_roles`` get ``owner_allow`` on content they authored."""

    owner_roles: list[str] = Field(default_factory=list)
    owner_allow: list[str] = Field(default_factory=list)


class Rules(BaseModel):
    project: ProjectRules
    content: ContentRules
    listing: ListingRules = Field(default_factory=ListingRules)
    uploads: UploadsRules
    auth: AuthRules = Field(default_factory=AuthRules)
    rbac: RbacRules
    abac: AbacRules = Field(default_factory=AbacRules)
