"""Property lookup service."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from staybook.models import DEFAULT_CURRENCY, Failure, Property

from .database import DatabaseService
from .tables import PropertyRecord


class PropertyService:
    """Service for resolving properties by identifier or slug."""

    def __init__(self, db: DatabaseService) -> None:
        """Initialize property service.

        Args:
            db: Database service instance
        """
        self.db = db

    def get_property(
        self,
        property_id: str | None = None,
        slug: str | None = None,
    ) -> Property | Failure:
        """Resolve a property.

        The identifier wins when both are given.

        Args:
            property_id: Property identifier
            slug: Property slug

        Returns:
            The Property, or a NOT_FOUND Failure (also when neither key is given)
        """
        if not property_id and not slug:
            return Failure.not_found()

        with self.db.session_scope() as session:
            prop = self.find(session, property_id=property_id, slug=slug)

        if prop is None:
            if property_id:
                return Failure.not_found(property_id=property_id)
            return Failure.not_found(slug=slug or "")
        return prop

    def find(
        self,
        session: Session,
        *,
        property_id: str | None = None,
        slug: str | None = None,
    ) -> Property | None:
        """Look up a property within an existing session."""
        stmt = select(PropertyRecord)
        if property_id:
            stmt = stmt.where(PropertyRecord.id == property_id)
        else:
            stmt = stmt.where(PropertyRecord.slug == slug)

        record = session.scalars(stmt).one_or_none()
        return self._record_to_property(record) if record else None

    def _record_to_property(self, record: PropertyRecord) -> Property:
        """Convert a table row to the Property model."""
        return Property(
            id=record.id,
            slug=record.slug,
            name=record.name,
            currency=(record.currency or DEFAULT_CURRENCY).upper(),
            price_per_night_cents=int(record.price_per_night_cents or 0),
        )
