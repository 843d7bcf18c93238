from dorothy.extensions import db
from dorothy.models import User


class UserRepository:
    @staticmethod
    def create(user):
        db.session.add(user)
        db.session.commit()
        return user

    @staticmethod
    def find_by_email(email):
        return User.query.filter_by(email=email.strip().lower()).first()

    @staticmethod
    def find_by_id(user_id: int):
        return db.session.get(User, user_id)
