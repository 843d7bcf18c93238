from dorothy.models import Partner
from dorothy.repositories.base_repository import CrudRepository


class PartnerRepository(CrudRepository):
    model = Partner

    @staticmethod
    def list_active():
        return (
            Partner.query.filter(Partner.active.is_(True))
            .order_by(Partner.sort_order.asc(), Partner.created_at.desc())
            .all()
        )
