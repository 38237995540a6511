"""Tax setting domain service."""

import logging
from decimal import Decimal

from finnexus.database.base import Database
from finnexus.domain.aggregation import HUNDRED, ZERO
from finnexus.domain.entities import LoadResult, TaxSetting
from finnexus.domain.errors import ConfigurationError, StoreError, ValidationError
from finnexus.utils.amount_parser import TAX_PERCENT_PLACES, round_to_places

logger = logging.getLogger(__name__)


class TaxSettingService:
    """Service for managing tax settings."""

    def __init__(self, db: Database):
        """Initialize tax setting service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_tax_setting(self, name: str, percentage: Decimal) -> TaxSetting:
        """Add a named tax rate.

        Args:
            name: Tax name (e.g., "ISS")
            percentage: Rate in percent, between 0 and 100; rounded to three
                decimal places

        Returns:
            The stored tax setting

        Raises:
            ValidationError: If name is empty or percentage out of range
        """
        if not name or not name.strip():
            raise ValidationError("Tax name is required")
        percentage = round_to_places(percentage, TAX_PERCENT_PLACES)
        if not ZERO <= percentage <= HUNDRED:
            raise ValidationError("Tax percentage must be between 0 and 100")
        return self.db.create_tax_setting(name=name.strip(), percentage=percentage)

    def load_tax_settings(self) -> LoadResult:
        """Read tax settings for display, degrading to empty on failure."""
        try:
            settings = self.db.list_tax_settings()
        except (ConfigurationError, StoreError) as e:
            logger.warning("Could not load tax settings: %s", e)
            return LoadResult(items=(), error=str(e))
        return LoadResult(items=tuple(settings))

    def delete_tax_setting(self, tax_id: str) -> None:
        """Delete a tax setting.

        Raises:
            NotFoundError: If tax setting doesn't exist
        """
        self.db.delete_tax_setting(tax_id)
