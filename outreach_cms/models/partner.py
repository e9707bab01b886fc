# File: outreach_cms/models/partner.py
from sqlalchemy import Column, String

from outreach_cms.models.base import ContentBaseModel


class Partner(ContentBaseModel):
    __tablename__ = "partners"

    name = Column(String(255), nullable=False)
    logo_url = Column(String(1000), nullable=False)
