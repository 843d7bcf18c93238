from dorothy.models import TeamMember
from dorothy.repositories.base_repository import CrudRepository


class TeamRepository(CrudRepository):
    model = TeamMember

    @staticmethod
    def list_active():
        return (
            TeamMember.query.filter(TeamMember.active.is_(True))
            .order_by(TeamMember.sort_order.asc(), TeamMember.created_at.desc())
            .all()
        )

    @staticmethod
    def list_all():
        return TeamMember.query.order_by(TeamMember.sort_order.asc()).all()
