from dorothy.models import Contact
from dorothy.repositories.base_repository import CrudRepository


class ContactRepository(CrudRepository):
    model = Contact

    @staticmethod
    def list_contacts(status=None):
        query = Contact.query
        if status:
            query = query.filter(Contact.status == status)
        return query.order_by(Contact.created_at.desc()).all()
