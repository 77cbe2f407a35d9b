"""Service sampler profiles — the per-backend data a sampler needs."""

from __future__ import annotations

from pydantic import BaseModel


class SamplerProfile(BaseModel):
    name: str
    service_key: str
    default_endpoint: str
    ready_selector: str


BOBCAT_REDIRECTS = SamplerProfile(
    name="BobcatRedirects",
    service_key="bobcat-redirects",
    default_endpoint="http://localhost:3000/",
    ready_selector='h4:has-text("Send to")',
)

BOBCAT_REDIRECTS_NEW_VERSION = SamplerProfile(
    name="BobcatRedirectsNewVersion",
    service_key="bobcat-redirects-new-version",
    default_endpoint="http://localhost:3001/",
    ready_selector='h4:has-text("Send to")',
)

# Not a bobcat-redirects instance: samples the Primo Classic instance that
# bobcat-redirects sends users to.
BOBCAT_PRIMO_CLASSIC = SamplerProfile(
    name="BobcatPrimoClassic",
    service_key="bobcat-primo-classic",
    default_endpoint="https://bobcatdev.library.nyu.edu",
    ready_selector='h4:has-text("Links")',
)

PROFILES: dict[str, SamplerProfile] = {
    profile.service_key: profile
    for profile in (BOBCAT_REDIRECTS, BOBCAT_REDIRECTS_NEW_VERSION, BOBCAT_PRIMO_CLASSIC)
}
