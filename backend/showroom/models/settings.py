from __future__ import annotations

from ..extensions import db
from ..entities import CompanyProfile


class CompanySetting(db.Model):
    """
    Company profile printed on receipts. Single row (id=1).

    The logo is stored as the data URI the settings service accepted.
    """
    __tablename__ = "company_settings"

    id = db.Column(db.Integer, primary_key=True)
    company_name = db.Column(db.String(255), nullable=False)
    company_address = db.Column(db.Text, nullable=False, default="")
    company_logo = db.Column(db.Text, nullable=False, default="")

    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def update_from(self, profile: CompanyProfile) -> None:
        self.company_name = profile.company_name
        self.company_address = profile.company_address
        self.company_logo = profile.company_logo

    def to_entity(self) -> CompanyProfile:
        return CompanyProfile(
            company_name=self.company_name,
            company_address=self.company_address,
            company_logo=self.company_logo,
        )
