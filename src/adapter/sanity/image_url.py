"""Resolve Sanity image asset references into CDN URLs."""

import re

from domain.model.errors import ContentStoreError

SANITY_CDN_BASE_URL = "https://cdn.sanity.io/images"

# e.g. image-Tb9Ew8CXIwaY6R1kjMvI0uRR-2000x3000-jpg
_ASSET_REF_RE = re.compile(
    r'^image-(?P<asset_id>[A-Za-z0-9]+)-(?P<width>\d+)x(?P<height>\d+)-(?P<ext>[a-z0-9]+)$'
)


def image_url(asset_ref: str, project_id: str, dataset: str) -> str:
    match = _ASSET_REF_RE.match(asset_ref)
    if not match:
        raise ContentStoreError(f"Malformed image asset reference: {asset_ref}")
    return (
        f"{SANITY_CDN_BASE_URL}/{project_id}/{dataset}/"
        f"{match['asset_id']}-{match['width']}x{match['height']}.{match['ext']}"
    )
