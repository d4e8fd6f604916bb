"""
Administrator settings stored in the admin_settings table
"""
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leadmarket.database.models import AdminSetting
from leadmarket.repositories.base_repository import BaseRepository
from leadmarket.schemas.admin import LeadMatchingSettings
from leadmarket.utils.exceptions import StoreWriteFailed
from leadmarket.utils.logging import get_logger

logger = get_logger(__name__)

LEAD_MATCHING_KEY = "lead_matching"


class SettingsService:
    """Keyed settings records; currently the lead-matching configuration"""

    def __init__(self, db: Session):
        self.db = db
        self.settings = BaseRepository(db, AdminSetting)

    def get_lead_matching(self) -> LeadMatchingSettings:
        """Stored lead-matching settings, or the defaults when none are saved"""
        record = self.settings.find_one_by(key=LEAD_MATCHING_KEY)
        if record is None or not record.value:
            return LeadMatchingSettings()
        return LeadMatchingSettings(**record.value)

    def update_lead_matching(self, matching: LeadMatchingSettings) -> LeadMatchingSettings:
        """
        Upsert the lead-matching settings.

        Weights are stored as given. A sum other than 1 is only logged.
        """
        if abs(matching.weight_sum - 1.0) > 1e-6:
            logger.warning(
                f"[yellow]⚠️  Lead matching weights sum to {matching.weight_sum:.2f}, not 1[/yellow]"
            )

        record = self.settings.find_one_by(key=LEAD_MATCHING_KEY)
        value = matching.model_dump()
        if record is None:
            self.settings.add(
                key=LEAD_MATCHING_KEY,
                value=value,
                description="Lead matching algorithm configuration",
            )
        else:
            record.value = value

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[red]❌ Failed to save lead matching settings:[/red] {e}")
            raise StoreWriteFailed("Failed to save lead matching settings")

        logger.info("[green]✅ Lead matching settings updated[/green]")
        return self.get_lead_matching()
