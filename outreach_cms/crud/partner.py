# File: outreach_cms/crud/partner.py
from outreach_cms.crud.base import CRUDBase
from outreach_cms.models.partner import Partner
from outreach_cms.schemas.partner import PartnerCreate, PartnerUpdate


class CRUDPartner(CRUDBase[Partner, PartnerCreate, PartnerUpdate]):
    search_fields = ("name",)


partner = CRUDPartner(Partner)
