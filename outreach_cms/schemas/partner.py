# File: outreach_cms/schemas/partner.py
from typing import List, Optional

from outreach_cms.schemas.base import CamelModel, ContentOut, IdInput, Pagination


class PartnerCreate(CamelModel):
    name: Optional[str] = None
    logo_url: Optional[str] = None


class PartnerUpdate(CamelModel):
    name: Optional[str] = None
    logo_url: Optional[str] = None


class PartnerUpdateRequest(PartnerUpdate):
    partner_id: IdInput = None


class Partner(ContentOut):
    name: str
    logo_url: str


class PartnerListResponse(CamelModel):
    partners: List[Partner]
    pagination: Pagination


class PartnerMutationResponse(CamelModel):
    message: str
    partner: Partner
